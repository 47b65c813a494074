"""Main CLI entry point."""

import logging

import click

from sparkreceipt.backend.factories import create_backend_functions, create_blob_storage
from sparkreceipt.database.factories import create_sqlite_database

# Import and register all commands at module level
from sparkreceipt.cli.commands import (
    profile,
    client,
    invoice,
    payment,
    expense,
    income,
    event,
    category,
    dashboard,
    calendar,
    scan,
    report,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SPARKRECEIPT_DB_PATH environment variable)",
    envvar="SPARKRECEIPT_DB_PATH",
)
@click.option(
    "--backend-url",
    help="Hosted backend base URL for receipt extraction, reports and uploads",
    envvar="SPARKRECEIPT_BACKEND_URL",
)
@click.option(
    "--api-key",
    help="Hosted backend API key",
    envvar="SPARKRECEIPT_API_KEY",
)
@click.option(
    "--storage-dir",
    type=click.Path(),
    help="Directory for receipt images when no backend URL is set",
    envvar="SPARKRECEIPT_STORAGE_DIR",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    backend_url: str | None,
    api_key: str | None,
    storage_dir: str | None,
    verbose: bool,
):
    """SparkReceipt - receipts, invoices and bookkeeping for small businesses.

    Scan receipts, track expenses and income, manage clients, invoices and
    events, and export financial reports.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    # Initialize collaborators only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if "db" not in ctx.obj:
            db = create_sqlite_database(database_path=db_path)
            db.connect()
            db.initialize_schema()
            ctx.obj["db"] = db
            ctx.call_on_close(db.disconnect)
        ctx.obj.setdefault("functions", create_backend_functions(backend_url, api_key))
        ctx.obj.setdefault("storage", create_blob_storage(backend_url, api_key, storage_dir))


# Register all commands
profile.register_commands(cli)
client.register_commands(cli)
invoice.register_commands(cli)
payment.register_commands(cli)
expense.register_commands(cli)
income.register_commands(cli)
event.register_commands(cli)
category.register_commands(cli)
dashboard.register_commands(cli)
calendar.register_commands(cli)
scan.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
