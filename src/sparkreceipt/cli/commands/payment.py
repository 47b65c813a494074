"""Payment commands."""

import click

from sparkreceipt.cli.client_resolution import resolve_client_or_exit
from sparkreceipt.cli.date_filters import parse_date_or_exit
from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.cli.parsing import parse_amount_or_exit
from sparkreceipt.domain.client import ClientService
from sparkreceipt.domain.income import PAYMENT_METHODS
from sparkreceipt.domain.invoice import InvoiceService
from sparkreceipt.domain.payment import PaymentService
from sparkreceipt.utils.formatting import format_currency


@click.group()
def payment_group():
    """Record and list payments."""
    pass


@payment_group.command("record")
@click.argument("amount")
@click.option("--invoice", help="Invoice number or ID being paid")
@click.option("--client", help="Paying client name or ID (defaults to the invoice's client)")
@click.option("--method", type=click.Choice(PAYMENT_METHODS), help="Payment method")
@click.option("--date", "payment_date", help="Payment date (default: today)")
@click.option("--notes", help="Notes")
@click.pass_context
def record_payment(ctx, amount, invoice, client, method, payment_date, notes):
    """Record a payment, updating the invoice's balance and status.

    Examples:
        sparkreceipt payment record 500 --invoice 05-01-2025-INV-AB12 --method zelle
    """
    db = ctx.obj["db"]
    service = PaymentService(db)
    invoices = InvoiceService(db)
    value = parse_amount_or_exit(ctx, amount)
    paid_on = parse_date_or_exit(ctx, payment_date, "payment date")
    client_id = resolve_client_or_exit(ctx, ClientService(db), client)

    invoice_id = None
    if invoice:
        try:
            invoice_id = invoices.resolve_invoice(invoice).id
        except ValueError as e:
            handle_domain_error(ctx, e)

    try:
        payment_id = service.record_payment(
            amount=value,
            invoice_id=invoice_id,
            client_id=client_id,
            payment_date=paid_on,
            payment_method=method,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded payment of {format_currency(value)} (ID: {payment_id})")
    if invoice_id is not None:
        updated = invoices.require_invoice(invoice_id)
        click.echo(
            f"{updated.invoice_number}: paid {format_currency(updated.amount_paid)}, "
            f"balance {format_currency(updated.balance_due)} ({updated.status.value})"
        )


@payment_group.command("list")
@click.option("--invoice", help="Only payments for this invoice number or ID")
@click.pass_context
def list_payments(ctx, invoice: str | None):
    """List payments, most recent first."""
    db = ctx.obj["db"]
    invoices = InvoiceService(db)
    invoice_id = None
    if invoice:
        try:
            invoice_id = invoices.resolve_invoice(invoice).id
        except ValueError as e:
            handle_domain_error(ctx, e)

    payments = PaymentService(db).list_payments(invoice_id=invoice_id)
    if not payments:
        click.echo("No payments found.")
        return

    numbers = {inv.id: inv.invoice_number for inv in invoices.list_invoices()}
    clients = {c.id: c.name for c in ClientService(db).list_clients()}
    click.echo(f"\nFound {len(payments)} payment(s):")
    click.echo("-" * 90)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>12}  {'Method':<10} {'Invoice':<24} {'Client':<20}")
    click.echo("-" * 90)
    for p in payments:
        click.echo(
            f"{p.id:<6} {str(p.payment_date):<12} {format_currency(p.amount):>12}  "
            f"{(p.payment_method or ''):<10} {numbers.get(p.invoice_id, ''):<24} "
            f"{clients.get(p.client_id, '')[:20]:<20}"
        )
    click.echo("-" * 90)
    click.echo(f"Total received: {format_currency(sum(p.amount for p in payments))}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
