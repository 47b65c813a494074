"""Calendar event domain service."""

from datetime import date
from typing import Any, Optional

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import CalendarEvent
from sparkreceipt.domain.errors import (
    NotFoundError,
    ValidationError,
    client_not_found,
    read_only_calendar_item,
    record_not_found,
)

EVENT_TYPES = ("Event", "Wedding", "Corporate", "Birthday", "Meeting", "Reminder")

DEFAULT_EVENT_COLOR = "#8B5CF6"

INVOICE_ITEM_PREFIX = "inv-"

EVENT_FIELDS = (
    "title",
    "description",
    "event_date",
    "start_time",
    "end_time",
    "event_type",
    "client_id",
    "location",
    "color",
    "is_payment_due",
    "status",
)


def parse_event_id(item_id: int | str) -> int:
    """Turn a calendar item ID into an event ID.

    Raises:
        ValidationError: If the ID belongs to an invoice due-date item or is
            not numeric
    """
    if isinstance(item_id, int):
        return item_id
    text = str(item_id).strip()
    if text.startswith(INVOICE_ITEM_PREFIX):
        raise ValidationError(read_only_calendar_item(text))
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"Invalid event ID '{item_id}'")


class EventService:
    """Service for managing calendar events."""

    def __init__(self, db: Database):
        """Initialize event service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_event(
        self,
        title: str,
        event_date: date,
        description: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        event_type: str = "Event",
        client_id: Optional[int] = None,
        location: Optional[str] = None,
        color: Optional[str] = None,
        is_payment_due: bool = False,
    ) -> int:
        """Create a calendar event.

        Returns:
            Event ID

        Raises:
            ValidationError: If the title is empty
            NotFoundError: If the linked client doesn't exist
        """
        if not title or not title.strip():
            raise ValidationError("Event title cannot be empty")
        if client_id is not None and self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        return self.db.create_event(
            {
                "title": title.strip(),
                "description": description,
                "event_date": event_date,
                "start_time": start_time,
                "end_time": end_time,
                "event_type": event_type or "Event",
                "client_id": client_id,
                "location": location,
                "color": color or DEFAULT_EVENT_COLOR,
                "is_payment_due": is_payment_due,
                "status": "scheduled",
            }
        )

    def get_event(self, event_id: int | str) -> Optional[CalendarEvent]:
        """Get event by ID."""
        return self.db.get_event(parse_event_id(event_id))

    def list_events(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[CalendarEvent]:
        """List events in date order."""
        return self.db.list_events(start_date=start_date, end_date=end_date)

    def update_event(self, event_id: int | str, **fields: Any) -> None:
        """Update event fields.

        Raises:
            ValidationError: If the ID is an invoice due-date item or a field
                is unknown
            NotFoundError: If the event doesn't exist
        """
        event_id = parse_event_id(event_id)
        self._require_event(event_id)
        unknown = sorted(set(fields) - set(EVENT_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown event field(s): {', '.join(unknown)}")
        if "title" in fields and not (fields["title"] or "").strip():
            raise ValidationError("Event title cannot be empty")
        client_id = fields.get("client_id")
        if client_id is not None and self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        if fields:
            self.db.update_event(event_id, fields)

    def delete_event(self, event_id: int | str) -> None:
        """Delete an event.

        Raises:
            ValidationError: If the ID is an invoice due-date item
            NotFoundError: If the event doesn't exist
        """
        event_id = parse_event_id(event_id)
        self._require_event(event_id)
        self.db.delete_event(event_id)

    def _require_event(self, event_id: int) -> CalendarEvent:
        event = self.db.get_event(event_id)
        if event is None:
            raise NotFoundError(record_not_found("Event", event_id))
        return event
