"""Tests for income domain service."""

from datetime import date
from decimal import Decimal

import pytest

from sparkreceipt.domain.errors import NotFoundError, ValidationError


def test_create_income_defaults(income_service):
    income_id = income_service.create_income("  Wedding deposit ", Decimal("1000"))
    entry = income_service.get_income(income_id)
    assert entry.description == "Wedding deposit"
    assert entry.income_date == date.today()
    assert entry.category == "Service"
    assert entry.amount == Decimal("1000")


def test_create_income_linked(income_service, sample_client, sample_invoice):
    income_id = income_service.create_income(
        "Final payment",
        Decimal("1800"),
        income_date=date(2025, 6, 1),
        category="Final Payment",
        client_id=sample_client.id,
        invoice_id=sample_invoice.id,
        payment_method="zelle",
    )
    entry = income_service.get_income(income_id)
    assert entry.client_id == sample_client.id
    assert entry.invoice_id == sample_invoice.id
    assert entry.payment_method == "zelle"


@pytest.mark.parametrize(
    "kwargs,error",
    [
        ({"client_id": 9}, NotFoundError),
        ({"invoice_id": 9}, NotFoundError),
    ],
)
def test_create_income_unknown_links(income_service, kwargs, error):
    with pytest.raises(error):
        income_service.create_income("Tip", Decimal("20"), **kwargs)


def test_create_income_invalid(income_service):
    with pytest.raises(ValidationError):
        income_service.create_income("", Decimal("20"))
    with pytest.raises(ValidationError):
        income_service.create_income("Refund", Decimal("-5"))


def test_list_income_by_range_and_client(income_service, sample_client):
    income_service.create_income("March", Decimal("100"), income_date=date(2025, 3, 15))
    income_service.create_income("April", Decimal("200"), income_date=date(2025, 4, 15), client_id=sample_client.id)
    income_service.create_income("May", Decimal("300"), income_date=date(2025, 5, 15))

    in_range = income_service.list_income(start_date=date(2025, 4, 1), end_date=date(2025, 5, 31))
    assert [e.description for e in in_range] == ["May", "April"]
    assert [e.description for e in income_service.list_income(client_id=sample_client.id)] == ["April"]


def test_update_and_delete_income(income_service):
    income_id = income_service.create_income("Tip", Decimal("20"))
    income_service.update_income(income_id, amount=Decimal("25"), category="Tip")
    entry = income_service.get_income(income_id)
    assert entry.amount == Decimal("25")
    assert entry.category == "Tip"

    with pytest.raises(ValidationError, match="Unknown income field"):
        income_service.update_income(income_id, source="cash")
    with pytest.raises(ValidationError):
        income_service.update_income(income_id, description=" ")

    income_service.delete_income(income_id)
    assert income_service.get_income(income_id) is None
    with pytest.raises(NotFoundError):
        income_service.delete_income(income_id)
