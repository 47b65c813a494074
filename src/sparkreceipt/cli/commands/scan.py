"""Receipt scanning command."""

import click

from sparkreceipt.cli.client_resolution import resolve_client_or_exit
from sparkreceipt.cli.date_filters import parse_date_or_exit
from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.cli.parsing import parse_amount_or_exit, print_line_items
from sparkreceipt.domain.client import ClientService
from sparkreceipt.domain.receipt_scan import ReceiptScanService
from sparkreceipt.utils.formatting import format_currency


def print_extraction(extraction) -> None:
    """Print extracted receipt fields for review."""
    click.echo("\nExtracted receipt:")
    click.echo(f"  Merchant: {extraction.merchant_name or '(unknown)'}")
    click.echo(f"  Date: {extraction.transaction_date}")
    click.echo(f"  Total: {format_currency(extraction.total_amount)} {extraction.currency}")
    click.echo(f"  Tax: {format_currency(extraction.tax_amount)}")
    click.echo(f"  Payment method: {extraction.payment_method}")
    click.echo(f"  Suggested category: {extraction.category_suggestion or '(none)'}")
    if extraction.irs_category:
        click.echo(f"  IRS category: {extraction.irs_category}")
    click.echo(f"  Tax deductible: {'yes' if extraction.is_tax_deductible else 'no'}")
    if extraction.confidence is not None:
        click.echo(f"  Confidence: {extraction.confidence:.0%}")
    if extraction.receipt_url:
        click.echo(f"  Image: {extraction.receipt_url}")
    if extraction.line_items:
        click.echo()
        print_line_items(extraction.line_items)


@click.command("scan")
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.option("--save/--no-save", default=None, help="Save as an expense without asking")
@click.option("--category", help="Category (default: the suggested one)")
@click.option("--client", help="Client name or ID the expense belongs to")
@click.option("--notes", help="Notes")
@click.option("--merchant", help="Correct the merchant name")
@click.option("--date", "transaction_date", help="Correct the transaction date")
@click.option("--amount", help="Correct the total amount")
@click.option("--tax", help="Correct the tax amount")
@click.option("--method", help="Correct the payment method")
@click.option("--deductible/--not-deductible", default=None, help="Correct tax deductibility")
@click.pass_context
def scan(ctx, image, save, category, client, notes, merchant, transaction_date, amount, tax, method, deductible):
    """Scan a receipt image and save it as an expense.

    The image is uploaded, its fields are extracted by the backend and
    shown for review. Options correct individual fields before saving.

    Examples:
        sparkreceipt scan receipt.jpg
        sparkreceipt scan receipt.jpg --save --category Meals --amount 23.40
    """
    db = ctx.obj["db"]
    service = ReceiptScanService(db, ctx.obj.get("functions"), ctx.obj["storage"])
    client_id = resolve_client_or_exit(ctx, ClientService(db), client)
    overrides = {
        "merchant_name": merchant,
        "transaction_date": parse_date_or_exit(ctx, transaction_date, "date"),
        "total_amount": parse_amount_or_exit(ctx, amount),
        "tax_amount": parse_amount_or_exit(ctx, tax, "tax amount"),
        "payment_method": method,
        "is_tax_deductible": deductible,
    }

    click.echo(f"Scanning {image}...")
    try:
        extraction = service.scan_file(image)
    except ValueError as e:
        handle_domain_error(ctx, e)
    print_extraction(extraction)

    if save is None:
        save = click.confirm("\nSave this receipt as an expense?", default=True)
    if not save:
        click.echo("Receipt not saved.")
        return

    try:
        expense_id = service.save_extraction(
            extraction, category_name=category, client_id=client_id, notes=notes, **overrides
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Saved expense {expense_id}")


def register_commands(cli):
    """Register scan command with main CLI."""
    cli.add_command(scan)
