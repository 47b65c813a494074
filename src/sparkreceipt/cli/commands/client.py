"""Client management commands."""

import click

from sparkreceipt.cli.client_resolution import resolve_client_or_exit
from sparkreceipt.cli.date_filters import parse_date_or_exit
from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.cli.parsing import ITEM_HELP, parse_line_items_or_exit, print_line_items
from sparkreceipt.domain.client import PAYMENT_STATUSES, ClientService
from sparkreceipt.utils.formatting import format_currency


def _contact_options(func):
    options = [
        click.option("--email", help="Email address"),
        click.option("--phone", help="Phone number"),
        click.option("--address", help="Street address"),
        click.option("--city", help="City"),
        click.option("--state", help="State"),
        click.option("--zip", "zip_code", help="ZIP code"),
        click.option("--event-date", help="Event date (YYYY-MM-DD or relative)"),
        click.option("--event-type", help="Event type (e.g. Wedding, Corporate)"),
        click.option("--venue", help="Venue"),
        click.option("--ceremony-time", help="Ceremony time (e.g. 4:30 PM)"),
        click.option("--notes", help="Notes"),
        click.option("--service", "services", multiple=True, help=ITEM_HELP),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _contact_fields(ctx, zip_code, event_date, **fields) -> dict:
    values = {key: value for key, value in fields.items() if value is not None}
    if zip_code is not None:
        values["zip"] = zip_code
    parsed = parse_date_or_exit(ctx, event_date, "event date")
    if parsed is not None:
        values["event_date"] = parsed
    return values


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("create")
@click.argument("name")
@_contact_options
@click.pass_context
def create_client(ctx, name, zip_code, event_date, event_type, services, **contact):
    """Create a client with optional booked services.

    Examples:
        sparkreceipt client create "Jane Doe" --email jane@example.com \\
            --event-date 2025-06-14 --service "Photography:2500" --service "Album:2:150"
    """
    service = ClientService(ctx.obj["db"])
    items = parse_line_items_or_exit(ctx, services) or ()
    fields = _contact_fields(ctx, zip_code, event_date, **contact)
    try:
        client_id = service.create_client(
            name=name, services=items, event_type=event_type or "Wedding", **fields
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    client = service.require_client(client_id)
    click.echo(f"Created client '{client.name}' (ID: {client_id})")
    if items:
        click.echo(f"Contract amount: {format_currency(client.contract_amount)}")


@client_group.command("list")
@click.option("--search", default="", help="Search name, email or phone")
@click.option("--status", type=click.Choice(PAYMENT_STATUSES), help="Payment status")
@click.pass_context
def list_clients(ctx, search: str, status: str | None):
    """List clients."""
    service = ClientService(ctx.obj["db"])
    clients = service.search_clients(query=search, payment_status=status)
    if not clients:
        click.echo("No clients found.")
        return

    click.echo(f"\nFound {len(clients)} client(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Name':<25} {'Event Date':<12} {'Contract':>12} {'Balance':>12}  {'Status':<8} {'Email':<20}"
    )
    click.echo("-" * 100)
    for client in clients:
        event_date = str(client.event_date) if client.event_date else ""
        click.echo(
            f"{client.id:<6} {client.name[:25]:<25} {event_date:<12} "
            f"{format_currency(client.contract_amount):>12} {format_currency(client.balance_due):>12}  "
            f"{client.payment_status:<8} {(client.email or '')[:20]:<20}"
        )


@client_group.command("show")
@click.argument("client")
@click.pass_context
def show_client(ctx, client: str):
    """Show a client with their services, invoices and expenses."""
    service = ClientService(ctx.obj["db"])
    client_id = resolve_client_or_exit(ctx, service, client)
    activity = service.get_activity(client_id)
    record = activity.client

    click.echo(f"\n{record.name} (ID: {record.id})")
    for label, value in (
        ("Email", record.email),
        ("Phone", record.phone),
        ("Event", record.event_type),
        ("Event date", record.event_date),
        ("Venue", record.venue),
        ("Ceremony", record.ceremony_time),
        ("Notes", record.notes),
    ):
        if value:
            click.echo(f"  {label}: {value}")
    click.echo(f"  Contract: {format_currency(record.contract_amount)}")
    click.echo(f"  Balance due: {format_currency(record.balance_due)} ({record.payment_status})")

    if record.services_booked:
        click.echo("\nServices booked:")
        print_line_items(record.services_booked)

    click.echo(f"\nInvoices ({len(activity.invoices)}):")
    for inv in activity.invoices:
        click.echo(
            f"  {inv.invoice_number:<24} {inv.invoice_type.value:<8} {format_currency(inv.total):>12} "
            f"{inv.status.value}"
        )
    click.echo(
        f"  Invoiced: {format_currency(activity.total_invoiced)} | "
        f"Paid: {format_currency(activity.total_paid)} | "
        f"Outstanding: {format_currency(activity.outstanding)}"
    )

    click.echo(f"\nExpenses ({len(activity.expenses)}):")
    for expense in activity.expenses:
        click.echo(
            f"  {str(expense.transaction_date or ''):<12} {(expense.merchant_name or '')[:30]:<30} "
            f"{format_currency(expense.total_amount):>12}"
        )


@client_group.command("update")
@click.argument("client")
@click.option("--name", help="New name")
@_contact_options
@click.option("--clear-services", is_flag=True, help="Remove all booked services")
@click.pass_context
def update_client(ctx, client, name, zip_code, event_date, services, clear_services, **contact):
    """Update a client. Only the given options are changed.

    Giving --service replaces the booked services and recomputes the
    contract amount; payments already received are kept.
    """
    service = ClientService(ctx.obj["db"])
    client_id = resolve_client_or_exit(ctx, service, client)
    items = parse_line_items_or_exit(ctx, services)
    if clear_services:
        items = ()
    fields = _contact_fields(ctx, zip_code, event_date, **contact)
    try:
        service.update_client(client_id, name=name, services=items, **fields)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated client {client_id}")


@client_group.command("delete")
@click.argument("client")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, client: str, yes: bool):
    """Delete a client."""
    service = ClientService(ctx.obj["db"])
    client_id = resolve_client_or_exit(ctx, service, client)
    record = service.require_client(client_id)

    if not yes and not click.confirm(f"Are you sure you want to delete client '{record.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_client(client_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted client '{record.name}'")


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
