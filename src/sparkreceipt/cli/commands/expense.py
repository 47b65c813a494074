"""Expense commands."""

from datetime import date
from pathlib import Path

import click

from sparkreceipt.cli.client_resolution import resolve_client_or_exit
from sparkreceipt.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.cli.parsing import (
    ITEM_HELP,
    parse_amount_or_exit,
    parse_line_items_or_exit,
    print_line_items,
)
from sparkreceipt.domain.client import ClientService
from sparkreceipt.domain.entities import ReviewStatus
from sparkreceipt.domain.expense import SORT_KEYS, ExpenseService, expenses_to_csv
from sparkreceipt.utils.formatting import format_currency

REVIEW_CHOICES = [s.value for s in ReviewStatus]


def _print_expense_table(expenses) -> None:
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Merchant':<28} {'Category':<20} {'Amount':>12}  {'Status':<9} {'Ded.':<4}"
    )
    click.echo("-" * 100)
    for e in expenses:
        click.echo(
            f"{e.id:<6} {str(e.transaction_date or ''):<12} {(e.merchant_name or '')[:28]:<28} "
            f"{(e.category_name or '')[:20]:<20} {format_currency(e.total_amount):>12}  "
            f"{e.review_status.value:<9} {'yes' if e.is_tax_deductible else '':<4}"
        )
    click.echo("-" * 100)


@click.group()
def expense_group():
    """Manage expenses."""
    pass


@expense_group.command("add")
@click.argument("amount")
@click.option("--merchant", help="Merchant name")
@click.option("--date", "transaction_date", help="Transaction date (default: today)")
@click.option("--category", help="Category name")
@click.option("--tax", help="Tax amount")
@click.option("--method", help="Payment method")
@click.option("--client", help="Client name or ID the expense belongs to")
@click.option("--notes", help="Notes")
@click.option("--item", "items", multiple=True, help=ITEM_HELP)
@click.option(
    "--deductible/--not-deductible",
    default=None,
    help="Tax deductibility (default: from the category)",
)
@click.option("--personal", is_flag=True, help="Mark as a personal, non-business expense")
@click.option("--currency", default="USD", help="Currency code (default: USD)")
@click.option(
    "--status",
    type=click.Choice(REVIEW_CHOICES),
    default=ReviewStatus.APPROVED.value,
    help="Review status (default: approved)",
)
@click.pass_context
def add_expense(
    ctx, amount, merchant, transaction_date, category, tax, method, client, notes, items,
    deductible, personal, currency, status,
):
    """Add an expense by hand.

    Examples:
        sparkreceipt expense add 42.50 --merchant "Office Depot" --category "Office Supplies"
        sparkreceipt expense add "$120" --merchant Shell --date yesterday --client "Jane Doe"
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)
    total = parse_amount_or_exit(ctx, amount)
    tax_amount = parse_amount_or_exit(ctx, tax, "tax amount")
    when = parse_date_or_exit(ctx, transaction_date, "date")
    client_id = resolve_client_or_exit(ctx, ClientService(db), client)
    line_items = parse_line_items_or_exit(ctx, items) or ()

    fields = {
        "payment_method": method,
        "client_id": client_id,
        "notes": notes,
        "is_business": not personal,
        "currency": currency.upper(),
        "review_status": ReviewStatus(status),
        "line_items": line_items,
    }
    if tax_amount is not None:
        fields["tax_amount"] = tax_amount
    if deductible is not None:
        fields["is_tax_deductible"] = deductible

    try:
        expense_id = service.create_expense(
            total_amount=total,
            merchant_name=merchant,
            transaction_date=when or date.today(),
            category_name=category,
            **fields,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added expense {expense_id}: {format_currency(total)} at {merchant or 'unknown merchant'}")


@expense_group.command("list")
@click.option("--search", default="", help="Search merchant, category or notes")
@click.option("--category", help="Only this category")
@click.option("--status", type=click.Choice(REVIEW_CHOICES), help="Review status")
@click.option("--start-date", help="Earliest date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="Latest date (YYYY-MM-DD or relative)")
@click.option("--sort", "sort_by", type=click.Choice(SORT_KEYS), default="date", help="Sort key (default: date)")
@click.option("--asc", is_flag=True, help="Oldest/smallest first")
@click.option("--receipts-only", is_flag=True, help="Only expenses with a receipt image")
@click.option("--client", help="Only expenses for this client")
@click.pass_context
def list_expenses(ctx, search, category, status, start_date, end_date, sort_by, asc, receipts_only, client):
    """List expenses.

    Examples:
        sparkreceipt expense list --search coffee
        sparkreceipt expense list --category Travel --start-date "this month" --sort amount
    """
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=None)
    client_id = resolve_client_or_exit(ctx, ClientService(db), client)

    expenses = ExpenseService(db).list_expenses(
        query=search,
        category=category,
        review_status=ReviewStatus(status) if status else None,
        start_date=start,
        end_date=end,
        sort_by=sort_by,
        descending=not asc,
        receipts_only=receipts_only,
        client_id=client_id,
    )
    if not expenses:
        click.echo("No expenses found.")
        return

    click.echo(f"\nFound {len(expenses)} expense(s):")
    _print_expense_table(expenses)
    click.echo(f"Total: {format_currency(sum(e.total_amount for e in expenses))} | Count: {len(expenses)}")


@expense_group.command("show")
@click.argument("expense_id", type=int)
@click.pass_context
def show_expense(ctx, expense_id: int):
    """Show an expense with its line items."""
    db = ctx.obj["db"]
    try:
        expense = ExpenseService(db).require_expense(expense_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nExpense {expense.id}")
    rows = (
        ("Merchant", expense.merchant_name),
        ("Date", expense.transaction_date),
        ("Category", expense.category_name),
        ("Amount", f"{format_currency(expense.total_amount)} {expense.currency}"),
        ("Tax", format_currency(expense.tax_amount)),
        ("Payment method", expense.payment_method),
        ("Tax deductible", "yes" if expense.is_tax_deductible else "no"),
        ("IRS category", expense.irs_category),
        ("Business", "yes" if expense.is_business else "no"),
        ("Review status", expense.review_status.value),
        ("Receipt", expense.receipt_url),
        ("AI confidence", f"{expense.ai_confidence:.0%}" if expense.ai_confidence is not None else None),
        ("Notes", expense.notes),
    )
    for label, value in rows:
        if value:
            click.echo(f"  {label}: {value}")
    if expense.client_id is not None:
        client = ClientService(db).get_client(expense.client_id)
        click.echo(f"  Client: {client.name if client else expense.client_id}")
    if expense.line_items:
        click.echo("\nLine items:")
        print_line_items(expense.line_items)


@expense_group.command("update")
@click.argument("expense_id", type=int)
@click.option("--amount", help="Amount")
@click.option("--merchant", help="Merchant name")
@click.option("--date", "transaction_date", help="Transaction date")
@click.option("--category", help="Category name, or empty string to clear")
@click.option("--tax", help="Tax amount")
@click.option("--method", help="Payment method")
@click.option("--client", help="Client name or ID")
@click.option("--notes", help="Notes")
@click.option("--deductible/--not-deductible", default=None, help="Tax deductibility")
@click.pass_context
def update_expense(ctx, expense_id, amount, merchant, transaction_date, category, tax, method, client, notes, deductible):
    """Update an expense. Only the given options are changed."""
    db = ctx.obj["db"]
    fields = {}
    if amount is not None:
        fields["total_amount"] = parse_amount_or_exit(ctx, amount)
    if tax is not None:
        fields["tax_amount"] = parse_amount_or_exit(ctx, tax, "tax amount")
    if transaction_date is not None:
        fields["transaction_date"] = parse_date_or_exit(ctx, transaction_date, "date")
    if client is not None:
        fields["client_id"] = resolve_client_or_exit(ctx, ClientService(db), client)
    if merchant is not None:
        fields["merchant_name"] = merchant
    if category is not None:
        fields["category_name"] = category or None
    if method is not None:
        fields["payment_method"] = method
    if notes is not None:
        fields["notes"] = notes
    if deductible is not None:
        fields["is_tax_deductible"] = deductible

    if not fields:
        click.echo("Nothing to update.")
        return

    try:
        ExpenseService(db).update_expense(expense_id, **fields)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated expense {expense_id}")


@expense_group.command("approve")
@click.argument("expense_id", type=int)
@click.pass_context
def approve_expense(ctx, expense_id: int):
    """Mark an expense as approved."""
    try:
        ExpenseService(ctx.obj["db"]).approve_expense(expense_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Approved expense {expense_id}")


@expense_group.command("reject")
@click.argument("expense_id", type=int)
@click.pass_context
def reject_expense(ctx, expense_id: int):
    """Mark an expense as rejected."""
    try:
        ExpenseService(ctx.obj["db"]).reject_expense(expense_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Rejected expense {expense_id}")


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_expense(ctx, expense_id: int, yes: bool):
    """Delete an expense."""
    service = ExpenseService(ctx.obj["db"])
    try:
        expense = service.require_expense(expense_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete expense {expense_id} ({format_currency(expense.total_amount)})?"
    ):
        click.echo("Deletion cancelled.")
        return

    service.delete_expense(expense_id)
    click.echo(f"Deleted expense {expense_id}")


@expense_group.command("export")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: stdout)")
@click.option("--search", default="", help="Search merchant, category or notes")
@click.option("--category", help="Only this category")
@click.option("--start-date", help="Earliest date")
@click.option("--end-date", help="Latest date")
@click.pass_context
def export_expenses(ctx, output, search, category, start_date, end_date):
    """Export expenses as CSV."""
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=None)
    expenses = ExpenseService(ctx.obj["db"]).list_expenses(
        query=search, category=category, start_date=start, end_date=end
    )
    content = expenses_to_csv(expenses)
    if output is None:
        click.echo(content, nl=False)
        return
    Path(output).write_text(content, encoding="utf-8")
    click.echo(f"Exported {len(expenses)} expense(s) to {output}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
