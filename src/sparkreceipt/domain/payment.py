"""Payment domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import Payment
from sparkreceipt.domain.errors import (
    NotFoundError,
    ValidationError,
    client_not_found,
    invoice_not_found,
    payment_amount_invalid,
)
from sparkreceipt.domain.invoice import apply_payment
from sparkreceipt.domain.line_items import round_cents

logger = logging.getLogger(__name__)


class PaymentService:
    """Service for recording payments and settling invoices."""

    def __init__(self, db: Database):
        """Initialize payment service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_payment(
        self,
        amount: Decimal,
        invoice_id: Optional[int] = None,
        client_id: Optional[int] = None,
        payment_date: Optional[date] = None,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Record a payment.

        When the payment is for an invoice, the invoice's amount paid,
        balance due and status are updated afterwards. The client defaults
        to the invoice's client.

        Args:
            amount: Amount received, rounded to cents; must be greater than zero
            invoice_id: Optional invoice being paid
            client_id: Optional paying client
            payment_date: Date received (defaults to today)
            payment_method: Optional method (cash, zelle, ...)
            notes: Optional notes

        Returns:
            Payment ID

        Raises:
            ValidationError: If the amount is not positive
            NotFoundError: If the invoice or client doesn't exist
        """
        if round_cents(amount) <= 0:
            raise ValidationError(payment_amount_invalid(amount))
        amount = round_cents(amount)

        invoice = None
        if invoice_id is not None:
            invoice = self.db.get_invoice(invoice_id)
            if invoice is None:
                raise NotFoundError(invoice_not_found(invoice_id))
            if client_id is None:
                client_id = invoice.client_id
        if client_id is not None and self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        payment_id = self.db.create_payment(
            {
                "invoice_id": invoice_id,
                "client_id": client_id,
                "amount": amount,
                "payment_date": payment_date or date.today(),
                "payment_method": payment_method,
                "notes": notes,
            }
        )

        if invoice is not None:
            values = apply_payment(invoice, amount)
            self.db.update_invoice(invoice.id, values)
            logger.debug(
                "Invoice %s: paid %s, balance %s, status %s",
                invoice.invoice_number,
                values["amount_paid"],
                values["balance_due"],
                values["status"].value,
            )
        return payment_id

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID."""
        return self.db.get_payment(payment_id)

    def list_payments(self, invoice_id: Optional[int] = None) -> list[Payment]:
        """List payments, most recent first."""
        return self.db.list_payments(invoice_id=invoice_id)
