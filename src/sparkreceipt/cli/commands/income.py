"""Income commands."""

import click

from sparkreceipt.cli.client_resolution import resolve_client_or_exit
from sparkreceipt.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.cli.parsing import parse_amount_or_exit
from sparkreceipt.domain.client import ClientService
from sparkreceipt.domain.income import INCOME_CATEGORIES, PAYMENT_METHODS, IncomeService
from sparkreceipt.domain.invoice import InvoiceService
from sparkreceipt.utils.formatting import format_currency


def _invoice_id_or_exit(ctx, invoice: str | None) -> int | None:
    if not invoice:
        return None
    try:
        return InvoiceService(ctx.obj["db"]).resolve_invoice(invoice).id
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.group()
def income_group():
    """Track income."""
    pass


@income_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--date", "income_date", help="Date received (default: today)")
@click.option("--category", type=click.Choice(INCOME_CATEGORIES), default="Service", help="Income category")
@click.option("--client", help="Client name or ID")
@click.option("--invoice", help="Invoice number or ID")
@click.option("--method", type=click.Choice(PAYMENT_METHODS), help="Payment method")
@click.option("--notes", help="Notes")
@click.pass_context
def add_income(ctx, description, amount, income_date, category, client, invoice, method, notes):
    """Add an income entry.

    Examples:
        sparkreceipt income add "Wedding deposit" 1000 --category Deposit --client "Jane Doe"
    """
    db = ctx.obj["db"]
    value = parse_amount_or_exit(ctx, amount)
    received = parse_date_or_exit(ctx, income_date, "date")
    client_id = resolve_client_or_exit(ctx, ClientService(db), client)
    invoice_id = _invoice_id_or_exit(ctx, invoice)

    try:
        income_id = IncomeService(db).create_income(
            description=description,
            amount=value,
            income_date=received,
            category=category,
            client_id=client_id,
            invoice_id=invoice_id,
            payment_method=method,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added income {income_id}: {format_currency(value)} ({category})")


@income_group.command("list")
@click.option("--start-date", help="Earliest date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="Latest date (YYYY-MM-DD or relative)")
@click.option("--client", help="Only income from this client")
@click.pass_context
def list_income(ctx, start_date, end_date, client):
    """List income entries, most recent first."""
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=None)
    clients = ClientService(db)
    client_id = resolve_client_or_exit(ctx, clients, client)

    entries = IncomeService(db).list_income(start_date=start, end_date=end, client_id=client_id)
    if not entries:
        click.echo("No income found.")
        return

    names = {c.id: c.name for c in clients.list_clients()}
    click.echo(f"\nFound {len(entries)} income entr{'y' if len(entries) == 1 else 'ies'}:")
    click.echo("-" * 95)
    click.echo(f"{'ID':<6} {'Date':<12} {'Description':<30} {'Category':<14} {'Amount':>12}  {'Client':<18}")
    click.echo("-" * 95)
    for entry in entries:
        click.echo(
            f"{entry.id:<6} {str(entry.income_date or ''):<12} {entry.description[:30]:<30} "
            f"{entry.category[:14]:<14} {format_currency(entry.amount):>12}  "
            f"{names.get(entry.client_id, '')[:18]:<18}"
        )
    click.echo("-" * 95)
    click.echo(f"Total: {format_currency(sum(e.amount for e in entries))}")


@income_group.command("update")
@click.argument("income_id", type=int)
@click.option("--description", help="Description")
@click.option("--amount", help="Amount")
@click.option("--date", "income_date", help="Date received")
@click.option("--category", type=click.Choice(INCOME_CATEGORIES), help="Income category")
@click.option("--client", help="Client name or ID")
@click.option("--invoice", help="Invoice number or ID")
@click.option("--method", type=click.Choice(PAYMENT_METHODS), help="Payment method")
@click.option("--notes", help="Notes")
@click.pass_context
def update_income(ctx, income_id, description, amount, income_date, category, client, invoice, method, notes):
    """Update an income entry. Only the given options are changed."""
    db = ctx.obj["db"]
    fields = {}
    if description is not None:
        fields["description"] = description
    if amount is not None:
        fields["amount"] = parse_amount_or_exit(ctx, amount)
    if income_date is not None:
        fields["income_date"] = parse_date_or_exit(ctx, income_date, "date")
    if category is not None:
        fields["category"] = category
    if client is not None:
        fields["client_id"] = resolve_client_or_exit(ctx, ClientService(db), client)
    if invoice is not None:
        fields["invoice_id"] = _invoice_id_or_exit(ctx, invoice)
    if method is not None:
        fields["payment_method"] = method
    if notes is not None:
        fields["notes"] = notes

    try:
        IncomeService(db).update_income(income_id, **fields)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated income {income_id}")


@income_group.command("delete")
@click.argument("income_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_income(ctx, income_id: int, yes: bool):
    """Delete an income entry."""
    service = IncomeService(ctx.obj["db"])
    entry = service.get_income(income_id)
    if entry is None:
        click.echo(f"Error: Income entry {income_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete '{entry.description}'?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_income(income_id)
    click.echo(f"Deleted income {income_id}")


def register_commands(cli):
    """Register income commands with main CLI."""
    cli.add_command(income_group, name="income")
