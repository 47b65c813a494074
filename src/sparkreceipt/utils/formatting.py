"""Display formatting helpers."""

from decimal import Decimal


def format_currency(amount: Decimal | float | int) -> str:
    """Format an amount as US dollars, e.g. "$1,234.50" or "-$12.00"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
