"""CLI helpers for date and period resolution."""

from datetime import date
from typing import Optional

import click

from sparkreceipt.utils.date_parser import get_report_period, parse_date


def parse_date_or_exit(ctx: click.Context, value: Optional[str], label: str = "date") -> Optional[date]:
    """Parse an optional date option, or exit with a CLI error."""
    if value is None or value == "":
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: Optional[str],
    end_date: Optional[str],
    period: Optional[str],
    default_period: Optional[str] = None,
) -> tuple[Optional[date], Optional[date]]:
    """Resolve a date range from a named period or explicit dates.

    A period ("week", "month", "quarter", "year") cannot be combined with
    explicit dates. With neither given, ``default_period`` is used if set.
    """
    if period and period != "custom" and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period == "custom" and not (start_date and end_date):
        click.echo("Error: --period custom needs both --start-date and --end-date.", err=True)
        ctx.exit(1)

    if period and period != "custom":
        return get_report_period(period)

    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")

    if start is None and end is None and default_period is not None:
        return get_report_period(default_period)

    if start is not None and end is not None and end < start:
        click.echo(f"Error: End date {end} is before start date {start}.", err=True)
        ctx.exit(1)

    return start, end
