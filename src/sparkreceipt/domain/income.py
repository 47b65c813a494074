"""Income domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import IncomeEntry
from sparkreceipt.domain.errors import (
    NotFoundError,
    ValidationError,
    client_not_found,
    invoice_not_found,
    record_not_found,
)

INCOME_CATEGORIES = ("Service", "Product", "Retainer", "Deposit", "Final Payment", "Tip", "Other")

PAYMENT_METHODS = ("zelle", "venmo", "cashapp", "paypal", "cash", "check", "credit", "transfer")

INCOME_FIELDS = (
    "description",
    "amount",
    "income_date",
    "category",
    "client_id",
    "invoice_id",
    "payment_method",
    "notes",
)


class IncomeService:
    """Service for managing income entries."""

    def __init__(self, db: Database):
        self.db = db

    def create_income(
        self,
        description: str,
        amount: Decimal,
        income_date: Optional[date] = None,
        category: str = "Service",
        client_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create an income entry.

        Returns:
            Income entry ID

        Raises:
            ValidationError: If the description is empty or the amount negative
            NotFoundError: If the linked client or invoice doesn't exist
        """
        if not description or not description.strip():
            raise ValidationError("Income description cannot be empty")
        if amount < 0:
            raise ValidationError("Income amount cannot be negative")
        self._check_links(client_id, invoice_id)

        return self.db.create_income(
            {
                "description": description.strip(),
                "amount": amount,
                "income_date": income_date or date.today(),
                "category": category or "Service",
                "client_id": client_id,
                "invoice_id": invoice_id,
                "payment_method": payment_method,
                "notes": notes,
            }
        )

    def get_income(self, income_id: int) -> Optional[IncomeEntry]:
        """Get income entry by ID."""
        return self.db.get_income(income_id)

    def list_income(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[int] = None,
    ) -> list[IncomeEntry]:
        """List income entries, most recent first."""
        return self.db.list_income(start_date=start_date, end_date=end_date, client_id=client_id)

    def update_income(self, income_id: int, **fields: Any) -> None:
        """Update income entry fields.

        Raises:
            NotFoundError: If the entry or a linked record doesn't exist
            ValidationError: If a field is unknown or invalid
        """
        if self.db.get_income(income_id) is None:
            raise NotFoundError(record_not_found("Income entry", income_id))
        unknown = sorted(set(fields) - set(INCOME_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown income field(s): {', '.join(unknown)}")
        if "description" in fields and not (fields["description"] or "").strip():
            raise ValidationError("Income description cannot be empty")
        amount = fields.get("amount")
        if amount is not None and amount < 0:
            raise ValidationError("Income amount cannot be negative")
        self._check_links(fields.get("client_id"), fields.get("invoice_id"))

        if fields:
            self.db.update_income(income_id, fields)

    def delete_income(self, income_id: int) -> None:
        """Delete an income entry."""
        if self.db.get_income(income_id) is None:
            raise NotFoundError(record_not_found("Income entry", income_id))
        self.db.delete_income(income_id)

    def _check_links(self, client_id: Optional[int], invoice_id: Optional[int]) -> None:
        if client_id is not None and self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))
        if invoice_id is not None and self.db.get_invoice(invoice_id) is None:
            raise NotFoundError(invoice_not_found(invoice_id))
