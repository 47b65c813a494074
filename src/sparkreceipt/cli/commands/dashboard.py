"""Dashboard command."""

from datetime import date

import click

from sparkreceipt.cli.calendar_view import print_month_grid
from sparkreceipt.domain.calendar import build_month_grid, upcoming_events
from sparkreceipt.domain.statistics import (
    compute_dashboard_stats,
    monthly_snapshot,
    open_invoices,
    recent_expenses,
)
from sparkreceipt.domain.workspace import Workspace
from sparkreceipt.utils.date_parser import parse_month
from sparkreceipt.utils.formatting import format_currency


@click.command("dashboard")
@click.option("--month", help="Month for the snapshot and mini calendar (YYYY-MM, default: this month)")
@click.option("--no-calendar", is_flag=True, help="Hide the mini calendar")
@click.pass_context
def dashboard(ctx, month: str | None, no_calendar: bool):
    """Show headline numbers, this month, upcoming events and recent activity."""
    workspace = Workspace(ctx.obj["db"])
    if not workspace.refresh():
        click.echo("Error: Could not load records.", err=True)
        ctx.exit(1)
    snap = workspace.snapshot

    today = date.today()
    year, month_number = today.year, today.month
    if month:
        try:
            year, month_number = parse_month(month)
        except ValueError as e:
            click.echo(f"Error: Invalid month: {e}", err=True)
            ctx.exit(1)

    stats = compute_dashboard_stats(snap.expenses, snap.income, snap.invoices, snap.events, today)
    title = snap.profile.business_name if snap.profile else "SparkReceipt"
    click.echo(f"\n{title} dashboard")
    click.echo("=" * 60)
    click.echo(f"{'Total income:':<28} {format_currency(stats.total_income):>15}")
    click.echo(f"{'Total expenses:':<28} {format_currency(stats.total_expenses):>15}")
    click.echo(f"{'Net profit:':<28} {format_currency(stats.net_profit):>15}")
    click.echo(
        f"{'Pending invoices:':<28} {format_currency(stats.pending_amount):>15} ({stats.pending_invoices})"
    )
    click.echo(f"{'Upcoming events:':<28} {stats.upcoming_events:>15}")
    click.echo(f"{'Receipts this month:':<28} {stats.receipts_this_month:>15}")

    current = monthly_snapshot(snap.expenses, snap.income, year, month_number)
    click.echo(f"\n{date(year, month_number, 1):%B %Y}")
    click.echo("-" * 60)
    click.echo(f"  Income:   {format_currency(current.income):>14} ({current.income_count} entries)")
    click.echo(f"  Expenses: {format_currency(current.expenses):>14} ({current.expense_count} expenses)")

    if not no_calendar:
        click.echo()
        grid = build_month_grid(year, month_number, snap.events, snap.invoices, include_paid=True)
        print_month_grid(grid)

    click.echo("\nUpcoming events:")
    events = upcoming_events(snap.events, today, limit=5)
    if not events:
        click.echo("  None")
    for event in events:
        client = workspace.client_name(event.client_id)
        suffix = f" ({client})" if client else ""
        click.echo(f"  {event.event_date}  {event.title}{suffix}")

    click.echo("\nRecent expenses:")
    recent = recent_expenses(snap.expenses, limit=5)
    if not recent:
        click.echo("  None")
    for expense in recent:
        click.echo(
            f"  {str(expense.transaction_date or ''):<12} {(expense.merchant_name or '')[:30]:<30} "
            f"{format_currency(expense.total_amount):>12}"
        )

    click.echo("\nPending invoices:")
    pending = sorted(open_invoices(snap.invoices), key=lambda inv: inv.due_date or date.max)[:5]
    if not pending:
        click.echo("  None")
    for inv in pending:
        click.echo(
            f"  {inv.invoice_number:<24} {workspace.client_name(inv.client_id)[:20]:<20} "
            f"due {str(inv.due_date or '-'):<12} {format_currency(inv.balance_due):>12}"
        )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
