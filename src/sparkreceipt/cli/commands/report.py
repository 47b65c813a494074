"""Financial report command."""

from pathlib import Path

import click

from sparkreceipt.cli.date_filters import resolve_cli_date_range
from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.domain.report import REPORT_FORMATS, ReportService
from sparkreceipt.utils.date_parser import REPORT_PERIODS
from sparkreceipt.utils.formatting import format_currency


@click.command("report")
@click.option(
    "--period",
    type=click.Choice(REPORT_PERIODS + ("custom",)),
    help="Report period ending today (default: year)",
)
@click.option("--start-date", help="Start date for a custom period")
@click.option("--end-date", help="End date for a custom period")
@click.option("--category", "categories", multiple=True, help="Only include this expense category (repeatable)")
@click.option("--format", "fmt", type=click.Choice(REPORT_FORMATS), default="csv", help="File format (default: csv)")
@click.option("--name", "report_name", help="Report name, also used for the file name")
@click.option("--output", "-o", type=click.Path(file_okay=False), default=".", help="Directory to write the file to")
@click.option("--summary-only", is_flag=True, help="Print the summary without writing a file")
@click.pass_context
def report(ctx, period, start_date, end_date, categories, fmt, report_name, output, summary_only):
    """Summarize income and expenses and export a report file.

    Examples:
        sparkreceipt report --period quarter
        sparkreceipt report --start-date 2025-01-01 --end-date 2025-03-31 --format json
        sparkreceipt report --period year --category Travel --category Meals
    """
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period, default_period="year"
    )
    if start is None or end is None:
        click.echo("Error: A report needs both --start-date and --end-date.", err=True)
        ctx.exit(1)

    service = ReportService(ctx.obj["db"], ctx.obj.get("functions"))
    try:
        data = service.build_report(start, end, categories)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nFinancial report {start} to {end}")
    click.echo("=" * 60)
    click.echo(f"{'Total income:':<28} {format_currency(data.total_income):>15}")
    click.echo(f"{'Total expenses:':<28} {format_currency(data.total_expenses):>15}")
    click.echo(f"{'Net profit:':<28} {format_currency(data.net_profit):>15}")
    click.echo(f"{'Tax paid:':<28} {format_currency(data.total_tax):>15}")
    click.echo(f"{'Tax deductible:':<28} {format_currency(data.tax_deductible):>15}")

    if data.category_breakdown:
        click.echo("\nExpenses by category:")
        for cat in data.category_breakdown:
            click.echo(
                f"  {cat.name[:30]:<30} {format_currency(cat.total):>12} {cat.percentage:>6.1f}%  ({cat.count})"
            )
    if data.monthly_breakdown:
        click.echo("\nBy month:")
        click.echo(f"  {'Month':<10} {'Income':>12} {'Expenses':>12}")
        for m in data.monthly_breakdown:
            click.echo(f"  {m.month:<10} {format_currency(m.income):>12} {format_currency(m.expenses):>12}")
    if data.irs_breakdown:
        click.echo("\nDeductible by IRS category:")
        for t in data.irs_breakdown:
            click.echo(f"  {t.irs_category[:30]:<30} {format_currency(t.total):>12}")

    if summary_only:
        return

    try:
        generated = service.generate(start, end, fmt=fmt, categories=categories, report_name=report_name)
    except ValueError as e:
        handle_domain_error(ctx, e)

    directory = Path(output)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / generated.filename
    path.write_text(generated.content, encoding="utf-8")
    source = "backend" if generated.source == "remote" else "local"
    click.echo(f"\nWrote {path} ({source} {generated.format.upper()})")


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(report)
