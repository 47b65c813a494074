"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from sparkreceipt.domain import entities
from sparkreceipt.domain.errors import ConflictError, NotFoundError, ValidationError
from sparkreceipt.domain.line_items import make_line_item


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_client_returns_domain_model(self, temp_db):
        """Test that get_client returns a domain Client entity."""
        client_id = temp_db.create_client(
            {
                "name": "Jane Doe",
                "services_booked": (make_line_item("Photography", 1, "2500"),),
                "contract_amount": Decimal("2500"),
                "balance_due": Decimal("2500"),
            }
        )

        client = temp_db.get_client(client_id)

        assert isinstance(client, entities.Client)
        assert client.id == client_id
        assert client.name == "Jane Doe"
        assert client.payment_status == "pending"
        assert client.services_booked[0].amount == Decimal("2500")
        assert isinstance(client.created_at, datetime)

    def test_get_missing_returns_none(self, temp_db):
        """Test that missing records come back as None."""
        assert temp_db.get_client(42) is None
        assert temp_db.get_invoice(42) is None
        assert temp_db.get_expense(42) is None
        assert temp_db.get_event(42) is None

    def test_invoice_enums_round_trip(self, temp_db):
        """Test that invoice type and status come back as enums."""
        invoice_id = temp_db.create_invoice(
            {
                "invoice_number": "05-01-2025-Q-AB12",
                "invoice_type": entities.InvoiceType.QUOTE,
                "issue_date": date(2025, 5, 1),
                "line_items": (),
                "status": entities.InvoiceStatus.PENDING,
            }
        )
        invoice = temp_db.get_invoice_by_number("05-01-2025-Q-AB12")
        assert invoice.id == invoice_id
        assert invoice.invoice_type is entities.InvoiceType.QUOTE
        assert invoice.status is entities.InvoiceStatus.PENDING
        assert invoice.total == Decimal("0")

    def test_duplicate_invoice_number(self, temp_db):
        """Test that invoice numbers are unique."""
        values = {"invoice_number": "N-1", "issue_date": date(2025, 5, 1), "line_items": ()}
        temp_db.create_invoice(values)
        with pytest.raises(ConflictError):
            temp_db.create_invoice(values)

    def test_list_expenses_with_date_range(self, temp_db):
        """Test that date filters exclude undated expenses."""
        temp_db.create_expense({"total_amount": Decimal("1"), "transaction_date": date(2025, 1, 5)})
        temp_db.create_expense({"total_amount": Decimal("2"), "transaction_date": date(2025, 2, 5)})
        temp_db.create_expense({"total_amount": Decimal("3")})

        everything = temp_db.list_expenses()
        assert len(everything) == 3
        assert all(isinstance(e, entities.Expense) for e in everything)

        january = temp_db.list_expenses(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))
        assert [e.total_amount for e in january] == [Decimal("1")]

    def test_list_events_in_date_order(self, temp_db):
        """Test that events are listed earliest first."""
        temp_db.create_event({"title": "B", "event_date": date(2025, 6, 2)})
        temp_db.create_event({"title": "A", "event_date": date(2025, 6, 1)})
        assert [e.title for e in temp_db.list_events()] == ["A", "B"]

    def test_update_unknown_field(self, temp_db):
        """Test that updates reject unknown columns."""
        client_id = temp_db.create_client({"name": "Jane"})
        with pytest.raises(ValidationError):
            temp_db.update_client(client_id, {"nickname": "J"})

    def test_update_and_delete_missing(self, temp_db):
        """Test that updating or deleting a missing record raises NotFoundError."""
        with pytest.raises(NotFoundError):
            temp_db.update_client(9, {"name": "Nobody"})
        with pytest.raises(NotFoundError):
            temp_db.delete_expense(9)

    def test_create_unknown_field(self, temp_db):
        """Test that inserts reject unknown columns."""
        with pytest.raises(ValidationError, match="Unknown field"):
            temp_db.create_income({"description": "Tip", "amount": Decimal("5"), "tip": True})

    def test_payments_for_invoice(self, temp_db):
        """Test listing payments filtered by invoice."""
        temp_db.create_payment({"invoice_id": 1, "amount": Decimal("10"), "payment_date": date(2025, 5, 1)})
        temp_db.create_payment({"invoice_id": 2, "amount": Decimal("20"), "payment_date": date(2025, 5, 2)})
        payments = temp_db.list_payments(invoice_id=2)
        assert len(payments) == 1
        assert isinstance(payments[0], entities.Payment)
        assert payments[0].amount == Decimal("20")
