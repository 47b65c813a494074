"""Tests for receipt scanning."""

from datetime import date
from decimal import Decimal

import pytest

from sparkreceipt.domain.entities import ReviewStatus
from sparkreceipt.domain.errors import BackendError, ValidationError
from sparkreceipt.domain.receipt_scan import ReceiptScanService, extraction_from_data

EXTRACTED = {
    "merchant_name": "Blue Bottle",
    "transaction_date": "2025-03-14",
    "category_suggestion": "Meals",
    "total_amount": 18.5,
    "tax_amount": "1.50",
    "payment_method": "credit_card",
    "is_tax_deductible": True,
    "line_items": [{"name": "Latte", "quantity": 2, "rate": 4.5}],
    "confidence": 0.92,
    "raw_response": {"model": "vision"},
}


@pytest.fixture
def scan_service(temp_db, fake_functions, local_storage):
    fake_functions.responses["extract-receipt"] = {"success": True, "data": dict(EXTRACTED)}
    return ReceiptScanService(temp_db, fake_functions, local_storage)


def test_extraction_defaults():
    extraction = extraction_from_data({}, today=date(2025, 5, 1))
    assert extraction.merchant_name == ""
    assert extraction.transaction_date == date(2025, 5, 1)
    assert extraction.payment_method == "other"
    assert extraction.currency == "USD"
    assert extraction.country == "US"
    assert extraction.receipt_type == "receipt"
    assert extraction.total_amount == Decimal("0")
    assert extraction.is_tax_deductible is False
    assert extraction.line_items == ()
    assert extraction.confidence is None


def test_extraction_mapping():
    extraction = extraction_from_data(EXTRACTED, receipt_url="file:///r.jpg")
    assert extraction.merchant_name == "Blue Bottle"
    assert extraction.transaction_date == date(2025, 3, 14)
    assert extraction.total_amount == Decimal("18.5")
    assert extraction.tax_amount == Decimal("1.50")
    assert extraction.line_items[0].amount == Decimal("9.0")
    assert extraction.confidence == pytest.approx(0.92)
    assert extraction.raw_response == '{"model": "vision"}'
    assert extraction.receipt_url == "file:///r.jpg"


def test_unreadable_date_falls_back_to_today():
    extraction = extraction_from_data({"transaction_date": "smudged"}, today=date(2025, 5, 1))
    assert extraction.transaction_date == date(2025, 5, 1)


def test_non_numeric_amount_rejected():
    with pytest.raises(BackendError, match="not a number"):
        extraction_from_data({"total_amount": "twelve"})


def test_non_numeric_confidence_rejected():
    with pytest.raises(BackendError, match="confidence is not a number"):
        extraction_from_data({"confidence": "high"})


@pytest.mark.parametrize("raw,expected", [(1.7, 1.0), (-0.2, 0.0), ("0.5", 0.5)])
def test_confidence_clamped(raw, expected):
    assert extraction_from_data({"confidence": raw}).confidence == pytest.approx(expected)


def test_scan_uploads_and_extracts(scan_service, fake_functions, tmp_path):
    extraction = scan_service.scan(b"\xff\xd8jpeg", "receipt.jpg")

    name, body = fake_functions.calls[0]
    assert name == "extract-receipt"
    assert body["imageBase64"] == "/9hqcGVn"
    assert extraction.receipt_url.startswith("file://")
    assert extraction.receipt_url.endswith("-receipt.jpg")
    stored = list((tmp_path / "storage" / "receipts").iterdir())
    assert len(stored) == 1
    assert stored[0].read_bytes() == b"\xff\xd8jpeg"


def test_scan_file(scan_service, tmp_path):
    image = tmp_path / "lunch.png"
    image.write_bytes(b"png")
    extraction = scan_service.scan_file(image)
    assert extraction.receipt_url.endswith("-lunch.png")


def test_scan_missing_file(scan_service, tmp_path):
    with pytest.raises(ValidationError, match="Could not read"):
        scan_service.scan_file(tmp_path / "missing.jpg")


def test_scan_needs_backend(temp_db, local_storage):
    service = ReceiptScanService(temp_db, None, local_storage)
    with pytest.raises(BackendError, match="needs a backend"):
        service.scan(b"img", "r.jpg")


def test_scan_reports_failed_extraction(temp_db, fake_functions, local_storage):
    fake_functions.responses["extract-receipt"] = {"success": False, "error": "Blurry image"}
    service = ReceiptScanService(temp_db, fake_functions, local_storage)
    with pytest.raises(BackendError, match="Blurry image"):
        service.scan(b"img", "r.jpg")


def test_save_extraction(scan_service, sample_categories):
    extraction = scan_service.scan(b"img", "receipt.jpg")
    expense_id = scan_service.save_extraction(extraction, notes="team coffee")

    expense = scan_service.expenses.get_expense(expense_id)
    assert expense.review_status == ReviewStatus.APPROVED
    assert expense.is_business is True
    assert expense.category_name == "Meals"
    assert expense.category_id == sample_categories["Meals"].id
    assert expense.irs_category == "Deductible meals"
    assert expense.is_tax_deductible is True
    assert expense.total_amount == Decimal("18.50")
    assert expense.receipt_url == extraction.receipt_url
    assert expense.notes == "team coffee"
    assert len(expense.line_items) == 1


def test_save_extraction_with_review_edits(scan_service):
    extraction = scan_service.scan(b"img", "receipt.jpg")
    expense_id = scan_service.save_extraction(
        extraction,
        category_name="Travel",
        merchant_name="Blue Bottle Coffee",
        total_amount=Decimal("20"),
        transaction_date=None,
    )
    expense = scan_service.expenses.get_expense(expense_id)
    assert expense.merchant_name == "Blue Bottle Coffee"
    assert expense.total_amount == Decimal("20")
    assert expense.transaction_date == date(2025, 3, 14)
    assert expense.category_name == "Travel"


def test_save_extraction_unknown_field(scan_service):
    extraction = scan_service.scan(b"img", "receipt.jpg")
    with pytest.raises(ValidationError, match="Unknown receipt field"):
        scan_service.save_extraction(extraction, currency="EUR")
