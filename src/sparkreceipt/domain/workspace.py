"""In-memory snapshot of every collection, used by the read-only views."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import (
    BusinessProfile,
    CalendarEvent,
    Client,
    Expense,
    ExpenseCategory,
    IncomeEntry,
    Invoice,
    Payment,
)
from sparkreceipt.domain.errors import DomainError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """All records as loaded by one refresh."""

    profile: Optional[BusinessProfile] = None
    clients: tuple[Client, ...] = ()
    invoices: tuple[Invoice, ...] = ()
    expenses: tuple[Expense, ...] = ()
    income: tuple[IncomeEntry, ...] = ()
    events: tuple[CalendarEvent, ...] = ()
    categories: tuple[ExpenseCategory, ...] = ()
    payments: tuple[Payment, ...] = ()
    loaded: bool = field(default=False)


class Workspace:
    """Holds the latest snapshot of the record store."""

    def __init__(self, db: Database):
        self.db = db
        self.snapshot = Snapshot()

    def refresh(self) -> bool:
        """Reload every collection.

        On failure the error is logged and the previous snapshot is kept.

        Returns:
            True if the snapshot was replaced
        """
        try:
            snapshot = Snapshot(
                profile=self.db.get_business_profile(),
                clients=tuple(self.db.list_clients()),
                invoices=tuple(self.db.list_invoices()),
                expenses=tuple(self.db.list_expenses()),
                income=tuple(self.db.list_income()),
                events=tuple(self.db.list_events()),
                categories=tuple(self.db.list_categories()),
                payments=tuple(self.db.list_payments()),
                loaded=True,
            )
        except (SQLAlchemyError, DomainError) as e:
            logger.error("Could not refresh records, keeping previous data: %s", e)
            return False

        self.snapshot = snapshot
        return True

    def client_name(self, client_id: Optional[int]) -> str:
        """Name of a client in the snapshot, or "" when unknown."""
        for client in self.snapshot.clients:
            if client.id == client_id:
                return client.name
        return ""
