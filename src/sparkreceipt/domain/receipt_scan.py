"""Receipt scanning: upload the image, extract fields, save as an expense."""

import base64
import json
import logging
import mimetypes
import time
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping, Optional

from sparkreceipt.backend.functions import BackendFunctions
from sparkreceipt.backend.storage import RECEIPTS_BUCKET, BlobStorage
from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import ReceiptExtraction, ReviewStatus
from sparkreceipt.domain.errors import BackendError, ValidationError
from sparkreceipt.domain.expense import ExpenseService
from sparkreceipt.domain.line_items import line_items_from_json
from sparkreceipt.utils.date_parser import parse_date

logger = logging.getLogger(__name__)


def _decimal(value: Any, field_name: str) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise BackendError(f"Extracted {field_name} is not a number: {value!r}")


def _confidence(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        raise BackendError(f"Extracted confidence is not a number: {value!r}")
    return min(max(confidence, 0.0), 1.0)


def _extracted_date(value: Any, today: date) -> date:
    if not value:
        return today
    try:
        return parse_date(str(value), today=today)
    except ValueError:
        logger.warning("Ignoring unreadable extracted date %r", value)
        return today


def extraction_from_data(
    data: Mapping[str, Any], receipt_url: Optional[str] = None, today: Optional[date] = None
) -> ReceiptExtraction:
    """Map the ``data`` object of an extraction response to a ReceiptExtraction.

    Missing fields get the review-form defaults: today for the date, "other"
    for the payment method, USD/US and a plain receipt.
    """
    today = today or date.today()
    raw_response = data.get("raw_response")
    if raw_response is not None and not isinstance(raw_response, str):
        raw_response = json.dumps(raw_response)
    try:
        line_items = line_items_from_json(data.get("line_items") or [])
    except ValidationError as e:
        logger.warning("Dropping unreadable extracted line items: %s", e)
        line_items = ()

    return ReceiptExtraction(
        merchant_name=str(data.get("merchant_name") or ""),
        transaction_date=_extracted_date(data.get("transaction_date"), today),
        category_suggestion=str(data.get("category_suggestion") or ""),
        total_amount=_decimal(data.get("total_amount"), "total amount"),
        tax_amount=_decimal(data.get("tax_amount"), "tax amount"),
        payment_method=str(data.get("payment_method") or "other"),
        currency=str(data.get("currency") or "USD"),
        country=str(data.get("country") or "US"),
        receipt_type=str(data.get("receipt_type") or "receipt"),
        is_tax_deductible=bool(data.get("is_tax_deductible")),
        line_items=line_items,
        confidence=_confidence(data.get("confidence")),
        irs_category=data.get("irs_category") or None,
        raw_response=raw_response,
        receipt_url=receipt_url,
    )


class ReceiptScanService:
    """Service that turns receipt images into reviewed expenses."""

    def __init__(
        self,
        db: Database,
        functions: Optional[BackendFunctions],
        storage: BlobStorage,
    ):
        """Initialize receipt scan service.

        Args:
            db: Database instance
            functions: Remote functions client (None when no backend is configured)
            storage: Blob storage for the receipt images
        """
        self.db = db
        self.functions = functions
        self.storage = storage
        self.expenses = ExpenseService(db)

    def scan_file(self, path: str | Path) -> ReceiptExtraction:
        """Scan a receipt image file.

        Raises:
            ValidationError: If the file can't be read
            BackendError: If upload or extraction fails
        """
        image_path = Path(path)
        try:
            data = image_path.read_bytes()
        except OSError as e:
            raise ValidationError(f"Could not read receipt image '{path}': {e}")
        return self.scan(data, image_path.name)

    def scan(self, image: bytes, filename: str) -> ReceiptExtraction:
        """Upload a receipt image and extract its fields.

        The image is stored as ``<epoch-ms>-<filename>`` in the receipts
        bucket; its public URL is carried on the extraction.

        Raises:
            BackendError: If no backend is configured, or upload/extraction fails
        """
        if self.functions is None:
            raise BackendError(
                "Receipt scanning needs a backend; set SPARKRECEIPT_BACKEND_URL or --backend-url"
            )
        if not image:
            raise ValidationError("Receipt image is empty")

        key = f"{int(time.time() * 1000)}-{filename}"
        content_type = mimetypes.guess_type(filename)[0]
        receipt_url = self.storage.upload(RECEIPTS_BUCKET, key, image, content_type)
        logger.info("Uploaded receipt image to %s", receipt_url)

        encoded = base64.b64encode(image).decode("ascii")
        data = self.functions.extract_receipt(encoded)
        return extraction_from_data(data, receipt_url=receipt_url)

    def save_extraction(
        self,
        extraction: ReceiptExtraction,
        category_name: Optional[str] = None,
        client_id: Optional[int] = None,
        notes: Optional[str] = None,
        **overrides: Any,
    ) -> int:
        """Save a reviewed extraction as an approved business expense.

        Args:
            extraction: Extraction, possibly edited during review
            category_name: Category to use (defaults to the suggestion)
            client_id: Optional client the expense belongs to
            notes: Optional notes
            **overrides: Reviewed values for merchant_name, transaction_date,
                total_amount, tax_amount, payment_method, is_tax_deductible

        Returns:
            Expense ID
        """
        allowed = {
            "merchant_name",
            "transaction_date",
            "total_amount",
            "tax_amount",
            "payment_method",
            "is_tax_deductible",
        }
        unknown = sorted(set(overrides) - allowed)
        if unknown:
            raise ValidationError(f"Unknown receipt field(s): {', '.join(unknown)}")
        reviewed = {
            "merchant_name": extraction.merchant_name,
            "transaction_date": extraction.transaction_date,
            "total_amount": extraction.total_amount,
            "tax_amount": extraction.tax_amount,
            "payment_method": extraction.payment_method,
            "is_tax_deductible": extraction.is_tax_deductible,
        }
        reviewed.update({k: v for k, v in overrides.items() if v is not None})

        return self.expenses.create_expense(
            category_name=category_name or extraction.category_suggestion or None,
            client_id=client_id,
            notes=notes,
            is_business=True,
            currency=extraction.currency,
            country=extraction.country,
            receipt_type=extraction.receipt_type,
            review_status=ReviewStatus.APPROVED,
            line_items=extraction.line_items,
            receipt_url=extraction.receipt_url,
            ai_confidence=extraction.confidence,
            ai_raw_response=extraction.raw_response,
            irs_category=extraction.irs_category,
            **reviewed,
        )
