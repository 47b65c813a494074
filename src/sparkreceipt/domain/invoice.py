"""Invoice domain service."""

import random
import string
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import Invoice, InvoiceStatus, InvoiceType, LineItem
from sparkreceipt.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    client_not_found,
    invoice_not_found,
)
from sparkreceipt.domain.line_items import line_items_subtotal, round_cents

DEFAULT_TERMS = (
    "A non-refundable retainer of $250 is required to secure your date.\n"
    "Remaining balance due 14 days before event.\n"
    "Please be advised that personal and business checks are not accepted under any circumstances.\n"
    "Payment Methods: Cash | Zelle | Venmo | Cash App | PayPal."
)

NUMBER_SUFFIXES = {
    InvoiceType.INVOICE: "INV",
    InvoiceType.QUOTE: "Q",
    InvoiceType.RECEIPT: "R",
}


def generate_invoice_number(invoice_type: InvoiceType, today: Optional[date] = None) -> str:
    """Generate an invoice number like ``03-14-2025-INV-7QX2``."""
    today = today or date.today()
    suffix = NUMBER_SUFFIXES[invoice_type]
    token = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"{today:%m-%d-%Y}-{suffix}-{token}"


def derive_invoice_status(balance_due: Decimal, amount_paid: Decimal) -> InvoiceStatus:
    """Status implied by the payment figures."""
    if balance_due <= 0:
        return InvoiceStatus.PAID
    if amount_paid > 0:
        return InvoiceStatus.PARTIAL
    return InvoiceStatus.PENDING


def compute_invoice_totals(
    line_items: Sequence[LineItem], tax_rate: Decimal, amount_paid: Decimal = Decimal("0")
) -> dict[str, Decimal]:
    """Compute subtotal, tax, total and balance due.

    Args:
        line_items: Invoice lines
        tax_rate: Tax rate in percent
        amount_paid: Amount already paid

    Returns:
        Dict with subtotal, tax_rate, tax_amount, total, amount_paid, balance_due
    """
    subtotal = round_cents(line_items_subtotal(line_items))
    tax_amount = round_cents(subtotal * tax_rate / Decimal("100"))
    total = subtotal + tax_amount
    amount_paid = round_cents(amount_paid)
    return {
        "subtotal": subtotal,
        "tax_rate": tax_rate,
        "tax_amount": tax_amount,
        "total": total,
        "amount_paid": amount_paid,
        "balance_due": total - amount_paid,
    }


def apply_payment(invoice: Invoice, amount: Decimal) -> dict[str, Any]:
    """Field values for ``invoice`` after a payment of ``amount``."""
    amount_paid = round_cents(invoice.amount_paid + amount)
    balance_due = round_cents(invoice.total) - amount_paid
    return {
        "amount_paid": amount_paid,
        "balance_due": balance_due,
        "status": derive_invoice_status(balance_due, amount_paid),
    }


class InvoiceService:
    """Service for managing invoices, quotes and sales receipts."""

    def __init__(self, db: Database):
        """Initialize invoice service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_invoice(
        self,
        invoice_type: InvoiceType = InvoiceType.INVOICE,
        client_id: Optional[int] = None,
        issue_date: Optional[date] = None,
        due_date: Optional[date] = None,
        line_items: Optional[Sequence[LineItem]] = None,
        tax_rate: Decimal = Decimal("0"),
        notes: Optional[str] = None,
        terms: Optional[str] = None,
        invoice_number: Optional[str] = None,
    ) -> int:
        """Create an invoice.

        When no line items are given and the invoice is for a client, the
        client's booked services become the line items.

        Args:
            invoice_type: invoice, quote or receipt
            client_id: Optional client ID
            issue_date: Issue date (defaults to today)
            due_date: Optional due date
            line_items: Optional line items
            tax_rate: Tax rate in percent
            notes: Optional notes
            terms: Payment terms (defaults to DEFAULT_TERMS)
            invoice_number: Explicit invoice number (generated if omitted)

        Returns:
            Invoice ID

        Raises:
            NotFoundError: If the client doesn't exist
            ConflictError: If the invoice number is already used
            ValidationError: If dates or tax rate are invalid
        """
        issue_date = issue_date or date.today()
        if due_date is not None and due_date < issue_date:
            raise ValidationError("Due date cannot be before the issue date")
        if tax_rate < 0:
            raise ValidationError("Tax rate cannot be negative")

        if client_id is not None:
            client = self.db.get_client(client_id)
            if client is None:
                raise NotFoundError(client_not_found(client_id))
            if line_items is None:
                line_items = client.services_booked

        if invoice_number is None:
            invoice_number = self._unique_invoice_number(invoice_type)
        elif self.db.get_invoice_by_number(invoice_number) is not None:
            raise ConflictError(f"Invoice number '{invoice_number}' already exists")

        items = tuple(line_items or ())
        values: dict[str, Any] = {
            "invoice_number": invoice_number,
            "invoice_type": invoice_type,
            "client_id": client_id,
            "issue_date": issue_date,
            "due_date": due_date,
            "line_items": items,
            "status": InvoiceStatus.PENDING,
            "notes": notes,
            "terms": DEFAULT_TERMS if terms is None else terms,
        }
        values.update(compute_invoice_totals(items, tax_rate))
        return self.db.create_invoice(values)

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        return self.db.get_invoice(invoice_id)

    def require_invoice(self, invoice_id: int) -> Invoice:
        """Get invoice by ID or raise NotFoundError."""
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def resolve_invoice(self, reference: str | int) -> Invoice:
        """Find an invoice by ID or invoice number.

        Raises:
            NotFoundError: If nothing matches
        """
        if isinstance(reference, int) or str(reference).isdigit():
            invoice = self.db.get_invoice(int(reference))
            if invoice is not None:
                return invoice
        invoice = self.db.get_invoice_by_number(str(reference))
        if invoice is None:
            raise NotFoundError(f"Invoice '{reference}' not found")
        return invoice

    def list_invoices(self, client_id: Optional[int] = None) -> list[Invoice]:
        """List invoices, newest first."""
        return self.db.list_invoices(client_id=client_id)

    def search_invoices(
        self,
        query: str = "",
        invoice_type: Optional[InvoiceType] = None,
        status: Optional[InvoiceStatus] = None,
    ) -> list[Invoice]:
        """Filter invoices by number/client name text, type and status."""
        needle = query.strip().lower()
        client_names = {c.id: c.name.lower() for c in self.db.list_clients()}

        results = []
        for invoice in self.db.list_invoices():
            client_name = client_names.get(invoice.client_id, "")
            matches_search = (
                not needle
                or needle in invoice.invoice_number.lower()
                or needle in client_name
            )
            matches_type = invoice_type is None or invoice.invoice_type == invoice_type
            matches_status = status is None or invoice.status == status
            if matches_search and matches_type and matches_status:
                results.append(invoice)
        return results

    def update_invoice(
        self,
        invoice_id: int,
        line_items: Optional[Sequence[LineItem]] = None,
        tax_rate: Optional[Decimal] = None,
        **fields: Any,
    ) -> None:
        """Update an invoice.

        Totals are recomputed from the (new) line items and tax rate, keeping
        the amount already paid. A cancelled invoice stays cancelled.

        Raises:
            NotFoundError: If the invoice or a new client doesn't exist
            ValidationError: If an unsupported field is given
        """
        invoice = self.require_invoice(invoice_id)
        allowed = {"invoice_type", "client_id", "issue_date", "due_date", "notes", "terms"}
        unknown = sorted(set(fields) - allowed)
        if unknown:
            raise ValidationError(f"Unknown invoice field(s): {', '.join(unknown)}")

        client_id = fields.get("client_id")
        if client_id is not None and self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        values: dict[str, Any] = dict(fields)
        if line_items is not None or tax_rate is not None:
            items = tuple(line_items) if line_items is not None else invoice.line_items
            rate = tax_rate if tax_rate is not None else invoice.tax_rate
            if rate < 0:
                raise ValidationError("Tax rate cannot be negative")
            totals = compute_invoice_totals(items, rate, invoice.amount_paid)
            values["line_items"] = items
            values.update(totals)
            if invoice.status != InvoiceStatus.CANCELLED:
                values["status"] = derive_invoice_status(
                    totals["balance_due"], totals["amount_paid"]
                )

        if values:
            self.db.update_invoice(invoice_id, values)

    def set_status(self, invoice_id: int, status: InvoiceStatus) -> None:
        """Set the status explicitly (e.g. cancelled or overdue)."""
        self.require_invoice(invoice_id)
        self.db.update_invoice(invoice_id, {"status": status})

    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice. Recorded payments are kept."""
        self.require_invoice(invoice_id)
        self.db.delete_invoice(invoice_id)

    def _unique_invoice_number(self, invoice_type: InvoiceType) -> str:
        for _ in range(10):
            number = generate_invoice_number(invoice_type)
            if self.db.get_invoice_by_number(number) is None:
                return number
        raise ConflictError("Could not generate a unique invoice number")
