"""Calendar command."""

from datetime import date

import click

from sparkreceipt.cli.calendar_view import print_month_grid
from sparkreceipt.cli.date_filters import parse_date_or_exit
from sparkreceipt.domain.calendar import build_month_grid, items_on, upcoming_events
from sparkreceipt.domain.workspace import Workspace
from sparkreceipt.utils.date_parser import parse_month


@click.command("calendar")
@click.option("--month", help="Month to show (YYYY-MM, default: this month)")
@click.option("--day", help="List everything on one day of the month")
@click.option("--include-paid", is_flag=True, help="Also show due dates of paid invoices")
@click.pass_context
def calendar(ctx, month: str | None, day: str | None, include_paid: bool):
    """Show a month of events and invoice due dates.

    Examples:
        sparkreceipt calendar
        sparkreceipt calendar --month 2025-06 --day 2025-06-14
    """
    workspace = Workspace(ctx.obj["db"])
    if not workspace.refresh():
        click.echo("Error: Could not load records.", err=True)
        ctx.exit(1)
    snap = workspace.snapshot

    today = date.today()
    selected = parse_date_or_exit(ctx, day, "day")
    year, month_number = today.year, today.month
    if month:
        try:
            year, month_number = parse_month(month)
        except ValueError as e:
            click.echo(f"Error: Invalid month: {e}", err=True)
            ctx.exit(1)
    elif selected is not None:
        year, month_number = selected.year, selected.month

    grid = build_month_grid(year, month_number, snap.events, snap.invoices, include_paid=include_paid)
    print_month_grid(grid)

    if selected is not None:
        items = items_on(grid, selected)
        click.echo(f"\n{selected:%A, %B %d, %Y}")
        if not items:
            click.echo("  Nothing scheduled.")
        for item in items:
            time = f"{item.start_time} " if item.start_time else ""
            kind = "read-only" if item.source == "invoice" else item.event_type or "Event"
            click.echo(f"  [{item.id}] {time}{item.title} ({kind})")

    click.echo("\nUpcoming events:")
    events = upcoming_events(snap.events, today, limit=10)
    if not events:
        click.echo("  None")
    for event in events:
        client = workspace.client_name(event.client_id)
        suffix = f" - {client}" if client else ""
        time = f" {event.start_time}" if event.start_time else ""
        click.echo(f"  [{event.id}] {event.event_date}{time}  {event.title}{suffix}")


def register_commands(cli):
    """Register calendar command with main CLI."""
    cli.add_command(calendar)
