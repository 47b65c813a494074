"""Text rendering of the month grid."""

from typing import Sequence

import click

from sparkreceipt.domain.entities import CalendarDay

WEEKDAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
CELL_WIDTH = 9


def format_cell(cell: CalendarDay) -> str:
    """Day number with markers: '*' per event, '$' for a payment due."""
    if not cell.is_current_month:
        return f"({cell.date.day:>2})".ljust(CELL_WIDTH)
    events = sum(1 for item in cell.items if item.source == "event")
    markers = "*" * min(events, 3)
    if any(item.is_payment_due for item in cell.items):
        markers += "$"
    return f"{cell.date.day:>3} {markers}".ljust(CELL_WIDTH)


def print_month_grid(grid: Sequence[CalendarDay]) -> None:
    """Print a 6-week grid, Sunday first."""
    in_month = [cell for cell in grid if cell.is_current_month]
    if in_month:
        click.echo(f"{in_month[0].date:%B %Y}".center(CELL_WIDTH * 7))
    click.echo("".join(day.ljust(CELL_WIDTH) for day in WEEKDAYS))
    for week in range(0, len(grid), 7):
        click.echo("".join(format_cell(cell) for cell in grid[week:week + 7]).rstrip())
    click.echo("* event  $ payment due  (n) other month")
