"""Expense domain service."""

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import Expense, ReviewStatus
from sparkreceipt.domain.errors import (
    NotFoundError,
    ValidationError,
    client_not_found,
    record_not_found,
)

EXPENSE_FIELDS = (
    "merchant_name",
    "transaction_date",
    "category_name",
    "total_amount",
    "tax_amount",
    "payment_method",
    "client_id",
    "notes",
    "is_tax_deductible",
    "is_business",
    "currency",
    "country",
    "receipt_type",
    "review_status",
    "line_items",
    "receipt_url",
    "ai_confidence",
    "ai_raw_response",
    "irs_category",
)

SORT_KEYS = ("date", "amount")

EXPORT_HEADER = ["Date", "Merchant", "Category", "Amount", "Tax", "Payment Method", "Status", "Notes"]


def filter_expenses(
    expenses: Iterable[Expense],
    query: str = "",
    category: Optional[str] = None,
    review_status: Optional[ReviewStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    receipts_only: bool = False,
) -> list[Expense]:
    """Filter expenses the way the expense list does.

    ``query`` matches merchant, category name and notes case-insensitively.
    The date range only applies to expenses that have a date.
    """
    needle = query.strip().lower()
    results = []
    for expense in expenses:
        if receipts_only and not expense.receipt_url:
            continue
        if needle and not any(
            needle in (text or "").lower()
            for text in (expense.merchant_name, expense.category_name, expense.notes)
        ):
            continue
        if category is not None and expense.category_name != category:
            continue
        if review_status is not None and expense.review_status != review_status:
            continue
        if expense.transaction_date is not None:
            if start_date is not None and expense.transaction_date < start_date:
                continue
            if end_date is not None and expense.transaction_date > end_date:
                continue
        results.append(expense)
    return results


def sort_expenses(expenses: Iterable[Expense], sort_by: str = "date", descending: bool = True) -> list[Expense]:
    """Sort expenses by date or amount. Undated expenses sort as the oldest."""
    if sort_by not in SORT_KEYS:
        raise ValidationError(f"Unknown sort key '{sort_by}'. Use one of: {', '.join(SORT_KEYS)}")
    if sort_by == "date":
        return sorted(expenses, key=lambda e: e.transaction_date or date.min, reverse=descending)
    return sorted(expenses, key=lambda e: e.total_amount, reverse=descending)


def expenses_to_csv(expenses: Iterable[Expense]) -> str:
    """Render expenses as an export CSV."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for expense in expenses:
        writer.writerow(
            [
                expense.transaction_date.isoformat() if expense.transaction_date else "",
                expense.merchant_name or "",
                expense.category_name or "",
                f"{expense.total_amount:.2f}",
                f"{expense.tax_amount:.2f}",
                expense.payment_method or "",
                expense.review_status.value,
                expense.notes or "",
            ]
        )
    return output.getvalue()


class ExpenseService:
    """Service for managing expenses and reviewed receipts."""

    def __init__(self, db: Database):
        """Initialize expense service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_expense(
        self,
        total_amount: Decimal,
        merchant_name: Optional[str] = None,
        transaction_date: Optional[date] = None,
        category_name: Optional[str] = None,
        **fields: Any,
    ) -> int:
        """Create an expense.

        A category given by name is looked up: a known category fills in
        ``category_id`` and, unless given explicitly, the IRS category and
        tax deductibility. Unknown names are stored as plain text.

        Args:
            total_amount: Amount spent
            merchant_name: Optional merchant
            transaction_date: Optional transaction date
            category_name: Optional category name
            **fields: Any other of EXPENSE_FIELDS

        Returns:
            Expense ID

        Raises:
            ValidationError: If the amount is negative or a field is unknown
            NotFoundError: If the linked client doesn't exist
        """
        if total_amount < 0:
            raise ValidationError("Expense amount cannot be negative")
        self._check_fields(fields)

        values: dict[str, Any] = {
            "merchant_name": merchant_name,
            "transaction_date": transaction_date,
            "total_amount": total_amount,
        }
        values.update(fields)
        values.update(
            self._category_values(
                category_name,
                is_tax_deductible=fields.get("is_tax_deductible"),
                irs_category=fields.get("irs_category"),
            )
        )
        if values.get("is_tax_deductible") is None:
            values["is_tax_deductible"] = False
        return self.db.create_expense(values)

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        return self.db.get_expense(expense_id)

    def require_expense(self, expense_id: int) -> Expense:
        """Get expense by ID or raise NotFoundError."""
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(record_not_found("Expense", expense_id))
        return expense

    def list_expenses(
        self,
        query: str = "",
        category: Optional[str] = None,
        review_status: Optional[ReviewStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sort_by: str = "date",
        descending: bool = True,
        receipts_only: bool = False,
        client_id: Optional[int] = None,
    ) -> list[Expense]:
        """List expenses with search, filters and sorting.

        Args:
            query: Text matched against merchant, category and notes
            category: Exact category name
            review_status: Review status filter
            start_date: Earliest transaction date (inclusive)
            end_date: Latest transaction date (inclusive)
            sort_by: "date" or "amount"
            descending: Largest/newest first when True
            receipts_only: Only expenses with a stored receipt image
            client_id: Only expenses linked to this client
        """
        expenses = self.db.list_expenses(client_id=client_id)
        filtered = filter_expenses(
            expenses,
            query=query,
            category=category,
            review_status=review_status,
            start_date=start_date,
            end_date=end_date,
            receipts_only=receipts_only,
        )
        return sort_expenses(filtered, sort_by=sort_by, descending=descending)

    def update_expense(self, expense_id: int, **fields: Any) -> None:
        """Update expense fields.

        Changing ``category_name`` re-resolves the category link.

        Raises:
            NotFoundError: If the expense or linked client doesn't exist
            ValidationError: If a field is unknown
        """
        self.require_expense(expense_id)
        self._check_fields(fields)
        amount = fields.get("total_amount")
        if amount is not None and amount < 0:
            raise ValidationError("Expense amount cannot be negative")

        values = dict(fields)
        if "category_name" in fields:
            values.update(
                self._category_values(
                    fields["category_name"],
                    is_tax_deductible=fields.get("is_tax_deductible"),
                    irs_category=fields.get("irs_category"),
                )
            )
            if values.get("is_tax_deductible") is None:
                values.pop("is_tax_deductible")
            if values.get("irs_category") is None and "irs_category" not in fields:
                values.pop("irs_category", None)
        if values:
            self.db.update_expense(expense_id, values)

    def set_review_status(self, expense_id: int, status: ReviewStatus) -> None:
        """Approve or reject an expense."""
        self.require_expense(expense_id)
        self.db.update_expense(expense_id, {"review_status": status})

    def approve_expense(self, expense_id: int) -> None:
        self.set_review_status(expense_id, ReviewStatus.APPROVED)

    def reject_expense(self, expense_id: int) -> None:
        self.set_review_status(expense_id, ReviewStatus.REJECTED)

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense."""
        self.require_expense(expense_id)
        self.db.delete_expense(expense_id)

    def _check_fields(self, fields: dict[str, Any]) -> None:
        unknown = sorted(set(fields) - set(EXPENSE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown expense field(s): {', '.join(unknown)}")
        client_id = fields.get("client_id")
        if client_id is not None and self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

    def _category_values(
        self,
        category_name: Optional[str],
        is_tax_deductible: Optional[bool] = None,
        irs_category: Optional[str] = None,
    ) -> dict[str, Any]:
        values: dict[str, Any] = {
            "category_id": None,
            "category_name": category_name or None,
            "is_tax_deductible": is_tax_deductible,
            "irs_category": irs_category,
        }
        if not category_name:
            return values

        category = self.db.get_category_by_name(category_name)
        if category is None:
            return values

        values["category_id"] = category.id
        if is_tax_deductible is None:
            values["is_tax_deductible"] = category.is_tax_deductible
        if irs_category is None:
            values["irs_category"] = category.irs_category
        return values
