"""Tests for invoice domain service."""

import re
from datetime import date
from decimal import Decimal

import pytest

from sparkreceipt.domain.entities import InvoiceStatus, InvoiceType
from sparkreceipt.domain.errors import ConflictError, NotFoundError, ValidationError
from sparkreceipt.domain.invoice import (
    DEFAULT_TERMS,
    compute_invoice_totals,
    derive_invoice_status,
    generate_invoice_number,
)
from sparkreceipt.domain.line_items import line_items_subtotal, make_line_item


class TestInvoiceNumbers:
    """Tests for invoice number generation."""

    @pytest.mark.parametrize(
        "invoice_type,suffix",
        [(InvoiceType.INVOICE, "INV"), (InvoiceType.QUOTE, "Q"), (InvoiceType.RECEIPT, "R")],
    )
    def test_number_format(self, invoice_type, suffix):
        number = generate_invoice_number(invoice_type, today=date(2025, 3, 14))
        assert re.fullmatch(rf"03-14-2025-{suffix}-[A-Z0-9]{{4}}", number)


class TestTotals:
    """Tests for total computation."""

    def test_tax_is_rounded_to_cents(self):
        items = [make_line_item("DJ", 1, "99.99")]
        totals = compute_invoice_totals(items, Decimal("8.25"))
        assert totals["subtotal"] == Decimal("99.99")
        assert totals["tax_amount"] == Decimal("8.25")
        assert totals["total"] == Decimal("108.24")
        assert totals["balance_due"] == Decimal("108.24")

    def test_balance_keeps_amount_paid(self):
        items = [make_line_item("DJ", 1, "500")]
        totals = compute_invoice_totals(items, Decimal("0"), Decimal("200"))
        assert totals["balance_due"] == Decimal("300")

    def test_status_from_figures(self):
        assert derive_invoice_status(Decimal("100"), Decimal("0")) == InvoiceStatus.PENDING
        assert derive_invoice_status(Decimal("50"), Decimal("50")) == InvoiceStatus.PARTIAL
        assert derive_invoice_status(Decimal("0"), Decimal("100")) == InvoiceStatus.PAID
        assert derive_invoice_status(Decimal("-5"), Decimal("105")) == InvoiceStatus.PAID


class TestInvoiceService:
    """Tests for InvoiceService."""

    def test_create_invoice_copies_client_services(self, invoice_service, sample_client):
        invoice_id = invoice_service.create_invoice(client_id=sample_client.id)
        invoice = invoice_service.get_invoice(invoice_id)

        assert len(invoice.line_items) == 2
        assert invoice.subtotal == Decimal("2800")
        assert invoice.total == Decimal("2800")
        assert invoice.balance_due == Decimal("2800")
        assert invoice.amount_paid == Decimal("0")
        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.issue_date == date.today()
        assert invoice.terms == DEFAULT_TERMS
        assert "-INV-" in invoice.invoice_number

    def test_create_quote_with_items_and_tax(self, invoice_service):
        invoice_id = invoice_service.create_invoice(
            invoice_type=InvoiceType.QUOTE,
            line_items=[make_line_item("DJ", 6, "150")],
            tax_rate=Decimal("10"),
            terms="",
        )
        invoice = invoice_service.get_invoice(invoice_id)
        assert invoice.invoice_type == InvoiceType.QUOTE
        assert invoice.tax_amount == Decimal("90")
        assert invoice.total == Decimal("990")
        assert invoice.terms == ""

    def test_create_invoice_unknown_client(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.create_invoice(client_id=999)

    def test_due_date_before_issue_date(self, invoice_service):
        with pytest.raises(ValidationError, match="Due date"):
            invoice_service.create_invoice(issue_date=date(2025, 5, 10), due_date=date(2025, 5, 1))

    def test_negative_tax_rate(self, invoice_service):
        with pytest.raises(ValidationError, match="Tax rate"):
            invoice_service.create_invoice(tax_rate=Decimal("-1"))

    def test_duplicate_number(self, invoice_service):
        invoice_service.create_invoice(invoice_number="A-1")
        with pytest.raises(ConflictError):
            invoice_service.create_invoice(invoice_number="A-1")

    def test_saved_subtotal_matches_line_items(self, invoice_service):
        invoice_id = invoice_service.create_invoice(
            line_items=[make_line_item("Hours", "1.5", "33.333"), make_line_item("Travel", 3, "0.555")],
            tax_rate=Decimal("7.5"),
        )
        invoice = invoice_service.get_invoice(invoice_id)
        assert invoice.subtotal == line_items_subtotal(invoice.line_items)
        assert invoice.subtotal == Decimal("51.67")
        assert invoice.tax_amount == Decimal("3.88")
        assert invoice.total == Decimal("55.55")
        assert invoice.balance_due == invoice.total

    def test_resolve_by_id_or_number(self, invoice_service, sample_invoice):
        assert invoice_service.resolve_invoice(sample_invoice.id).id == sample_invoice.id
        assert invoice_service.resolve_invoice(str(sample_invoice.id)).id == sample_invoice.id
        assert invoice_service.resolve_invoice(sample_invoice.invoice_number).id == sample_invoice.id
        with pytest.raises(NotFoundError):
            invoice_service.resolve_invoice("nope")

    def test_search_by_client_name_type_and_status(self, invoice_service, sample_invoice):
        invoice_service.create_invoice(invoice_type=InvoiceType.QUOTE)

        assert [i.id for i in invoice_service.search_invoices(query="jane")] == [sample_invoice.id]
        assert len(invoice_service.search_invoices(invoice_type=InvoiceType.QUOTE)) == 1
        assert len(invoice_service.search_invoices(status=InvoiceStatus.PAID)) == 0
        number_part = sample_invoice.invoice_number[-4:].lower()
        assert sample_invoice.id in [i.id for i in invoice_service.search_invoices(query=number_part)]

    def test_update_line_items_keeps_payments(self, invoice_service, payment_service, sample_invoice):
        payment_service.record_payment(Decimal("800"), invoice_id=sample_invoice.id)

        invoice_service.update_invoice(
            sample_invoice.id, line_items=[make_line_item("Photography", 1, "3000")]
        )
        invoice = invoice_service.get_invoice(sample_invoice.id)
        assert invoice.total == Decimal("3000")
        assert invoice.amount_paid == Decimal("800")
        assert invoice.balance_due == Decimal("2200")
        assert invoice.status == InvoiceStatus.PARTIAL

    def test_update_tax_rate_only(self, invoice_service, sample_invoice):
        invoice_service.update_invoice(sample_invoice.id, tax_rate=Decimal("5"))
        invoice = invoice_service.get_invoice(sample_invoice.id)
        assert invoice.tax_amount == Decimal("140")
        assert invoice.total == Decimal("2940")
        assert len(invoice.line_items) == 2

    def test_update_keeps_cancelled_status(self, invoice_service, sample_invoice):
        invoice_service.set_status(sample_invoice.id, InvoiceStatus.CANCELLED)
        invoice_service.update_invoice(sample_invoice.id, tax_rate=Decimal("5"))
        assert invoice_service.get_invoice(sample_invoice.id).status == InvoiceStatus.CANCELLED

    def test_update_plain_fields(self, invoice_service, sample_invoice):
        invoice_service.update_invoice(sample_invoice.id, notes="Thanks!", due_date=date(2025, 6, 1))
        invoice = invoice_service.get_invoice(sample_invoice.id)
        assert invoice.notes == "Thanks!"
        assert invoice.due_date == date(2025, 6, 1)
        assert invoice.total == Decimal("2800")

    def test_update_unknown_field(self, invoice_service, sample_invoice):
        with pytest.raises(ValidationError, match="Unknown invoice field"):
            invoice_service.update_invoice(sample_invoice.id, total=Decimal("1"))

    def test_delete_keeps_payments(self, invoice_service, payment_service, sample_invoice):
        payment_service.record_payment(Decimal("100"), invoice_id=sample_invoice.id)
        invoice_service.delete_invoice(sample_invoice.id)

        assert invoice_service.get_invoice(sample_invoice.id) is None
        assert len(payment_service.list_payments()) == 1
        with pytest.raises(NotFoundError):
            invoice_service.delete_invoice(sample_invoice.id)
