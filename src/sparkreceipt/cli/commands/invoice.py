"""Invoice and quote commands."""

import click

from sparkreceipt.cli.client_resolution import resolve_client_or_exit
from sparkreceipt.cli.date_filters import parse_date_or_exit
from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.cli.parsing import (
    ITEM_HELP,
    parse_amount_or_exit,
    parse_line_items_or_exit,
    print_line_items,
)
from sparkreceipt.domain.client import ClientService
from sparkreceipt.domain.entities import InvoiceStatus, InvoiceType
from sparkreceipt.domain.invoice import InvoiceService
from sparkreceipt.domain.payment import PaymentService
from sparkreceipt.domain.profile import BusinessProfileService
from sparkreceipt.utils.formatting import format_currency

TYPE_CHOICES = [t.value for t in InvoiceType]
STATUS_CHOICES = [s.value for s in InvoiceStatus]
TITLES = {InvoiceType.INVOICE: "INVOICE", InvoiceType.QUOTE: "QUOTE", InvoiceType.RECEIPT: "SALES RECEIPT"}


def _resolve_invoice(ctx, service: InvoiceService, reference: str):
    try:
        return service.resolve_invoice(reference)
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.group()
def invoice_group():
    """Manage invoices, quotes and sales receipts."""
    pass


@invoice_group.command("create")
@click.option("--type", "invoice_type", type=click.Choice(TYPE_CHOICES), default="invoice", help="Document type (default: invoice)")
@click.option("--client", help="Client name or ID (their booked services are used when no --item is given)")
@click.option("--issue-date", help="Issue date (default: today)")
@click.option("--due-date", help="Due date")
@click.option("--item", "items", multiple=True, help=ITEM_HELP)
@click.option("--tax-rate", default="0", help="Tax rate in percent (default: 0)")
@click.option("--notes", help="Notes")
@click.option("--terms", help="Payment terms (default: standard retainer terms)")
@click.option("--number", help="Invoice number (generated if omitted)")
@click.pass_context
def create_invoice(ctx, invoice_type, client, issue_date, due_date, items, tax_rate, notes, terms, number):
    """Create an invoice, quote or sales receipt.

    Examples:
        sparkreceipt invoice create --client "Jane Doe" --due-date 2025-05-31
        sparkreceipt invoice create --type quote --item "DJ:6:150" --tax-rate 8.25
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)
    client_id = resolve_client_or_exit(ctx, ClientService(db), client)
    line_items = parse_line_items_or_exit(ctx, items)
    rate = parse_amount_or_exit(ctx, tax_rate, "tax rate")
    issued = parse_date_or_exit(ctx, issue_date, "issue date")
    due = parse_date_or_exit(ctx, due_date, "due date")

    try:
        invoice_id = service.create_invoice(
            invoice_type=InvoiceType(invoice_type),
            client_id=client_id,
            issue_date=issued,
            due_date=due,
            line_items=line_items,
            tax_rate=rate,
            notes=notes,
            terms=terms,
            invoice_number=number,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    invoice = service.require_invoice(invoice_id)
    click.echo(f"Created {invoice.invoice_type.value} {invoice.invoice_number} (ID: {invoice_id})")
    click.echo(f"Total: {format_currency(invoice.total)}")


@invoice_group.command("list")
@click.option("--search", default="", help="Search invoice number or client name")
@click.option("--type", "invoice_type", type=click.Choice(TYPE_CHOICES), help="Document type")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Status")
@click.pass_context
def list_invoices(ctx, search: str, invoice_type: str | None, status: str | None):
    """List invoices, newest first."""
    db = ctx.obj["db"]
    service = InvoiceService(db)
    invoices = service.search_invoices(
        query=search,
        invoice_type=InvoiceType(invoice_type) if invoice_type else None,
        status=InvoiceStatus(status) if status else None,
    )
    if not invoices:
        click.echo("No invoices found.")
        return

    clients = {c.id: c.name for c in ClientService(db).list_clients()}
    click.echo(f"\nFound {len(invoices)} invoice(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Number':<24} {'Type':<8} {'Client':<20} {'Due':<12} {'Total':>12} {'Balance':>12}  {'Status':<9}"
    )
    click.echo("-" * 110)
    for inv in invoices:
        click.echo(
            f"{inv.id:<6} {inv.invoice_number:<24} {inv.invoice_type.value:<8} "
            f"{clients.get(inv.client_id, '')[:20]:<20} {str(inv.due_date or ''):<12} "
            f"{format_currency(inv.total):>12} {format_currency(inv.balance_due):>12}  {inv.status.value:<9}"
        )

    outstanding = sum(inv.balance_due for inv in invoices if inv.status in (InvoiceStatus.PENDING, InvoiceStatus.PARTIAL))
    click.echo("-" * 110)
    click.echo(f"Outstanding: {format_currency(outstanding)} | Count: {len(invoices)}")


@invoice_group.command("show")
@click.argument("invoice")
@click.pass_context
def show_invoice(ctx, invoice: str):
    """Show an invoice as it would be printed."""
    db = ctx.obj["db"]
    service = InvoiceService(db)
    record = _resolve_invoice(ctx, service, invoice)
    profile = BusinessProfileService(db).get_profile()
    client = ClientService(db).get_client(record.client_id) if record.client_id else None

    if profile is not None:
        click.echo(profile.business_name)
        for value in (profile.address, profile.phone, profile.email, profile.website):
            if value:
                click.echo(value)
        click.echo()

    click.echo(f"{TITLES[record.invoice_type]} {record.invoice_number}")
    click.echo(f"Issued: {record.issue_date}")
    if record.due_date:
        click.echo(f"Due: {record.due_date}")
    if client is not None:
        click.echo(f"Bill to: {client.name}")
        if client.email:
            click.echo(f"         {client.email}")

    click.echo()
    print_line_items(record.line_items)
    click.echo()
    click.echo(f"  {'Subtotal:':>52} {format_currency(record.subtotal):>12}")
    if record.tax_rate:
        click.echo(f"  {f'Tax ({record.tax_rate.normalize():f}%):':>52} {format_currency(record.tax_amount):>12}")
    click.echo(f"  {'Total:':>52} {format_currency(record.total):>12}")
    click.echo(f"  {'Paid:':>52} {format_currency(record.amount_paid):>12}")
    click.echo(f"  {'Balance due:':>52} {format_currency(record.balance_due):>12}")
    click.echo(f"\nStatus: {record.status.value}")

    payments = PaymentService(db).list_payments(invoice_id=record.id)
    if payments:
        click.echo("\nPayments:")
        for p in payments:
            click.echo(f"  {p.payment_date}  {format_currency(p.amount):>12}  {p.payment_method or ''}")
    if record.notes:
        click.echo(f"\nNotes: {record.notes}")
    if record.terms:
        click.echo(f"\nTerms:\n{record.terms}")


@invoice_group.command("update")
@click.argument("invoice")
@click.option("--type", "invoice_type", type=click.Choice(TYPE_CHOICES), help="Document type")
@click.option("--client", help="Client name or ID")
@click.option("--issue-date", help="Issue date")
@click.option("--due-date", help="Due date")
@click.option("--item", "items", multiple=True, help=ITEM_HELP + "; replaces all items")
@click.option("--tax-rate", help="Tax rate in percent")
@click.option("--notes", help="Notes")
@click.option("--terms", help="Payment terms")
@click.pass_context
def update_invoice(ctx, invoice, invoice_type, client, issue_date, due_date, items, tax_rate, notes, terms):
    """Update an invoice. Totals are recomputed, payments are kept."""
    db = ctx.obj["db"]
    service = InvoiceService(db)
    record = _resolve_invoice(ctx, service, invoice)

    fields = {}
    if invoice_type is not None:
        fields["invoice_type"] = InvoiceType(invoice_type)
    if client is not None:
        fields["client_id"] = resolve_client_or_exit(ctx, ClientService(db), client)
    if issue_date is not None:
        fields["issue_date"] = parse_date_or_exit(ctx, issue_date, "issue date")
    if due_date is not None:
        fields["due_date"] = parse_date_or_exit(ctx, due_date, "due date")
    if notes is not None:
        fields["notes"] = notes
    if terms is not None:
        fields["terms"] = terms

    try:
        service.update_invoice(
            record.id,
            line_items=parse_line_items_or_exit(ctx, items),
            tax_rate=parse_amount_or_exit(ctx, tax_rate, "tax rate"),
            **fields,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    updated = service.require_invoice(record.id)
    click.echo(f"Updated {updated.invoice_number}: total {format_currency(updated.total)}, "
               f"balance {format_currency(updated.balance_due)} ({updated.status.value})")


@invoice_group.command("status")
@click.argument("invoice")
@click.argument("status", type=click.Choice(STATUS_CHOICES))
@click.pass_context
def set_status(ctx, invoice: str, status: str):
    """Set an invoice's status (e.g. cancelled or overdue)."""
    service = InvoiceService(ctx.obj["db"])
    record = _resolve_invoice(ctx, service, invoice)
    service.set_status(record.id, InvoiceStatus(status))
    click.echo(f"{record.invoice_number} is now {status}")


@invoice_group.command("delete")
@click.argument("invoice")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_invoice(ctx, invoice: str, yes: bool):
    """Delete an invoice."""
    service = InvoiceService(ctx.obj["db"])
    record = _resolve_invoice(ctx, service, invoice)

    if not yes and not click.confirm(f"Are you sure you want to delete {record.invoice_number}?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_invoice(record.id)
    click.echo(f"Deleted {record.invoice_number}")


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
