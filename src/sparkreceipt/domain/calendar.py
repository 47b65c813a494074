"""Month grid construction for the calendar and dashboard views.

The grid is always six weeks of seven days starting on Sunday. Cells outside
the requested month are padding and carry no items. Each in-month cell lists
the events on that date followed by pseudo-items for invoices due that day.
"""

import calendar
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from sparkreceipt.domain.entities import (
    CalendarDay,
    CalendarEvent,
    CalendarItem,
    Invoice,
    InvoiceStatus,
)
from sparkreceipt.domain.errors import ValidationError
from sparkreceipt.domain.event import INVOICE_ITEM_PREFIX

GRID_CELLS = 42

PAID_COLOR = "#10B981"
PARTIAL_COLOR = "#F59E0B"
DUE_COLOR = "#EF4444"


def invoice_due_color(status: InvoiceStatus) -> str:
    """Color of an invoice due-date item."""
    if status == InvoiceStatus.PAID:
        return PAID_COLOR
    if status == InvoiceStatus.PARTIAL:
        return PARTIAL_COLOR
    return DUE_COLOR


def event_to_item(event: CalendarEvent) -> CalendarItem:
    """Calendar item for a stored event."""
    return CalendarItem(
        id=str(event.id),
        title=event.title,
        date=event.event_date,
        color=event.color,
        is_payment_due=event.is_payment_due,
        source="event",
        start_time=event.start_time,
        event_type=event.event_type,
    )


def invoice_to_item(invoice: Invoice) -> CalendarItem:
    """Read-only calendar item for an invoice due date.

    Raises:
        ValidationError: If the invoice has no due date
    """
    if invoice.due_date is None:
        raise ValidationError(f"Invoice {invoice.invoice_number} has no due date")
    return CalendarItem(
        id=f"{INVOICE_ITEM_PREFIX}{invoice.id}",
        title=f"Payment Due: {invoice.invoice_number}",
        date=invoice.due_date,
        color=invoice_due_color(invoice.status),
        is_payment_due=True,
        source="invoice",
    )


def build_month_grid(
    year: int,
    month: int,
    events: Iterable[CalendarEvent],
    invoices: Iterable[Invoice],
    include_paid: bool = False,
) -> list[CalendarDay]:
    """Build the 42-cell grid for a month.

    Args:
        year: Year
        month: Month (1-12)
        events: Calendar events to place
        invoices: Invoices whose due dates become items
        include_paid: Also show due dates of paid invoices

    Returns:
        List of exactly 42 CalendarDay cells
    """
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]

    events_by_date: dict[date, list[CalendarItem]] = {}
    for event in events:
        events_by_date.setdefault(event.event_date, []).append(event_to_item(event))

    due_by_date: dict[date, list[CalendarItem]] = {}
    for invoice in invoices:
        if invoice.due_date is None:
            continue
        if invoice.status == InvoiceStatus.PAID and not include_paid:
            continue
        due_by_date.setdefault(invoice.due_date, []).append(invoice_to_item(invoice))

    # date.weekday() is Monday=0; shift so Sunday starts the week.
    leading = (first.weekday() + 1) % 7
    cells: list[CalendarDay] = []

    for offset in range(leading, 0, -1):
        cells.append(CalendarDay(date=first - timedelta(days=offset), is_current_month=False))

    for day in range(1, days_in_month + 1):
        current = date(year, month, day)
        items = tuple(events_by_date.get(current, ())) + tuple(due_by_date.get(current, ()))
        cells.append(CalendarDay(date=current, is_current_month=True, items=items))

    last = date(year, month, days_in_month)
    for offset in range(1, GRID_CELLS - len(cells) + 1):
        cells.append(CalendarDay(date=last + timedelta(days=offset), is_current_month=False))

    return cells


def items_on(grid: Sequence[CalendarDay], day: date) -> tuple[CalendarItem, ...]:
    """Items shown on a given day of a grid (empty for padding days)."""
    for cell in grid:
        if cell.date == day:
            return cell.items
    return ()


def upcoming_events(
    events: Iterable[CalendarEvent], today: Optional[date] = None, limit: Optional[int] = 10
) -> list[CalendarEvent]:
    """Events on or after today, earliest first."""
    today = today or date.today()
    upcoming = sorted((e for e in events if e.event_date >= today), key=lambda e: e.event_date)
    if limit is not None:
        upcoming = upcoming[:limit]
    return upcoming
