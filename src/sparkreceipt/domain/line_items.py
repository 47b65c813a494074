"""Line item arithmetic shared by invoices, client services and receipts."""

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Sequence

from sparkreceipt.domain.entities import LineItem
from sparkreceipt.domain.errors import ValidationError

EDITABLE_FIELDS = ("name", "description", "quantity", "rate", "amount")
CENT = Decimal("0.01")


def round_cents(value: Decimal) -> Decimal:
    """Round a money value to whole cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid {field_name} '{value}': {e}")


def make_line_item(
    name: str,
    quantity: Any = 1,
    rate: Any = 0,
    description: str = "",
) -> LineItem:
    """Create a line item with its amount computed from quantity and rate.

    The amount is rounded to cents.
    """
    qty = _to_decimal(quantity, "quantity")
    unit_rate = _to_decimal(rate, "rate")
    return LineItem(
        name=name,
        description=description or "",
        quantity=qty,
        rate=unit_rate,
        amount=round_cents(qty * unit_rate),
    )


def update_line_item(item: LineItem, field_name: str, value: Any) -> LineItem:
    """Return a copy of ``item`` with one field changed.

    The amount is recomputed from quantity x rate after every edit, so a
    direct write to ``amount`` does not survive.

    Raises:
        ValidationError: If the field is unknown or the value is not numeric
    """
    if field_name not in EDITABLE_FIELDS:
        raise ValidationError(f"Unknown line item field '{field_name}'")

    if field_name in ("quantity", "rate", "amount"):
        value = _to_decimal(value, field_name)
    else:
        value = "" if value is None else str(value)

    updated = replace(item, **{field_name: value})
    return replace(updated, amount=round_cents(updated.quantity * updated.rate))


def line_items_subtotal(items: Iterable[LineItem]) -> Decimal:
    """Sum of line item amounts."""
    return sum((item.amount for item in items), Decimal("0"))


def line_item_to_dict(item: LineItem) -> dict[str, Any]:
    """Serialize a line item into a JSON-friendly dict."""
    return {
        "name": item.name,
        "description": item.description,
        "quantity": str(item.quantity),
        "rate": str(item.rate),
        "amount": str(item.amount),
    }


def line_item_from_dict(data: Mapping[str, Any]) -> LineItem:
    """Build a line item from a stored or remote dict.

    The amount is always recomputed; a stored amount that disagrees with
    quantity x rate is ignored.
    """
    quantity = data.get("quantity")
    rate = data.get("rate")
    if rate is None and data.get("amount") is not None:
        # Extracted receipt lines often carry only a price.
        rate = data.get("amount")
    return make_line_item(
        name=str(data.get("name") or ""),
        quantity=1 if quantity in (None, "") else quantity,
        rate=0 if rate in (None, "") else rate,
        description=str(data.get("description") or ""),
    )


def line_items_to_json(items: Sequence[LineItem]) -> list[dict[str, Any]]:
    """Serialize a sequence of line items."""
    return [line_item_to_dict(item) for item in items]


def line_items_from_json(data: Sequence[Mapping[str, Any]] | None) -> tuple[LineItem, ...]:
    """Deserialize a sequence of line items; ``None`` gives an empty tuple."""
    return tuple(line_item_from_dict(d) for d in (data or []))
