"""CLI helpers for amounts and line item options."""

from decimal import Decimal
from typing import Optional, Sequence

import click

from sparkreceipt.domain.entities import LineItem
from sparkreceipt.domain.errors import ValidationError
from sparkreceipt.domain.line_items import make_line_item
from sparkreceipt.utils.amount_parser import parse_amount, parse_positive_amount
from sparkreceipt.utils.formatting import format_currency

ITEM_HELP = "Line item as NAME:RATE or NAME:QTY:RATE (repeatable)"


def parse_amount_or_exit(
    ctx: click.Context, value: Optional[str], label: str = "amount", allow_negative: bool = False
) -> Optional[Decimal]:
    """Parse an optional amount option, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_amount(value) if allow_negative else parse_positive_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_line_item(text: str) -> LineItem:
    """Parse NAME:RATE or NAME:QTY:RATE into a line item.

    Raises:
        ValidationError: If the text is malformed
    """
    parts = [part.strip() for part in text.rsplit(":", 2)]
    if len(parts) < 2 or not parts[0]:
        raise ValidationError(f"Invalid line item '{text}'. Use NAME:RATE or NAME:QTY:RATE")
    try:
        if len(parts) == 2:
            name, rate = parts
            return make_line_item(name, quantity=1, rate=parse_amount(rate))
        name, quantity, rate = parts
        return make_line_item(name, quantity=parse_amount(quantity), rate=parse_amount(rate))
    except ValueError as e:
        raise ValidationError(f"Invalid line item '{text}': {e}")


def parse_line_items_or_exit(ctx: click.Context, values: Sequence[str]) -> Optional[tuple[LineItem, ...]]:
    """Parse repeated --item options; None when none were given."""
    if not values:
        return None
    try:
        return tuple(parse_line_item(text) for text in values)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def print_line_items(items: Sequence[LineItem]) -> None:
    """Print line items as a small table."""
    click.echo(f"  {'Item':<30} {'Qty':>8} {'Rate':>12} {'Amount':>12}")
    for item in items:
        quantity = f"{item.quantity.normalize():f}"
        click.echo(
            f"  {item.name[:30]:<30} {quantity:>8} "
            f"{format_currency(item.rate):>12} {format_currency(item.amount):>12}"
        )
        if item.description:
            click.echo(f"    {item.description}")
