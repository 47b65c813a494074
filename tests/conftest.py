"""Shared pytest fixtures for sparkreceipt tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal
from typing import Any, Mapping

import pytest

from sparkreceipt.backend.functions import BackendFunctions
from sparkreceipt.backend.storage import LocalBlobStorage
from sparkreceipt.database.factories import create_sqlite_database
from sparkreceipt.domain.category import CategoryService
from sparkreceipt.domain.client import ClientService
from sparkreceipt.domain.errors import BackendError
from sparkreceipt.domain.event import EventService
from sparkreceipt.domain.expense import ExpenseService
from sparkreceipt.domain.income import IncomeService
from sparkreceipt.domain.invoice import InvoiceService
from sparkreceipt.domain.line_items import make_line_item
from sparkreceipt.domain.payment import PaymentService


class FakeBackendFunctions(BackendFunctions):
    """Records invocations and answers from canned responses."""

    def __init__(self, responses: Mapping[str, Any] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, dict]] = []

    def invoke(self, name: str, body: Mapping[str, Any]) -> Any:
        self.calls.append((name, dict(body)))
        response = self.responses.get(name)
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise BackendError(f"{name} is not available")
        return response


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def client_service(temp_db):
    """Create a ClientService with a temporary database."""
    return ClientService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db)


@pytest.fixture
def payment_service(temp_db):
    """Create a PaymentService with a temporary database."""
    return PaymentService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def income_service(temp_db):
    """Create an IncomeService with a temporary database."""
    return IncomeService(temp_db)


@pytest.fixture
def event_service(temp_db):
    """Create an EventService with a temporary database."""
    return EventService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def sample_client(client_service):
    """Create a client with two booked services (contract $2,800)."""
    client_id = client_service.create_client(
        name="Jane Doe",
        email="jane@example.com",
        phone="555-0100",
        event_date=date(2025, 6, 14),
        services=(
            make_line_item("Photography", quantity=1, rate="2500"),
            make_line_item("Album", quantity=2, rate="150"),
        ),
    )
    return client_service.get_client(client_id)


@pytest.fixture
def sample_invoice(invoice_service, sample_client):
    """Create a $2,800 invoice for the sample client."""
    invoice_id = invoice_service.create_invoice(
        client_id=sample_client.id,
        issue_date=date(2025, 5, 1),
        due_date=date(2025, 5, 31),
        tax_rate=Decimal("0"),
    )
    return invoice_service.get_invoice(invoice_id)


@pytest.fixture
def sample_categories(category_service):
    """Seed the default categories and return them by name."""
    category_service.seed_default_categories()
    return {cat.name: cat for cat in category_service.list_categories()}


@pytest.fixture
def fake_functions():
    """Remote functions that answer extraction and report calls."""
    return FakeBackendFunctions()


@pytest.fixture
def local_storage(tmp_path):
    """Blob storage in a temporary directory."""
    return LocalBlobStorage(tmp_path / "storage")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_obj(temp_db, local_storage):
    """Context object shared with CLI invocations, with no backend."""
    return {"db": temp_db, "functions": None, "storage": local_storage}


@pytest.fixture
def make_expense():
    """Build Expense entities without touching the database."""
    from datetime import datetime

    from sparkreceipt.domain.entities import Expense, ReviewStatus

    counter = iter(range(1, 10_000))

    def _make(total="10", transaction_date=date(2025, 5, 10), **overrides):
        values = dict(
            id=next(counter),
            merchant_name="Merchant",
            transaction_date=transaction_date,
            category_id=None,
            category_name=None,
            total_amount=Decimal(total),
            tax_amount=Decimal("0"),
            payment_method=None,
            client_id=None,
            notes=None,
            is_tax_deductible=False,
            is_business=True,
            currency="USD",
            country="US",
            receipt_type="receipt",
            review_status=ReviewStatus.APPROVED,
            line_items=(),
            receipt_url=None,
            ai_confidence=None,
            ai_raw_response=None,
            irs_category=None,
            created_at=datetime(2025, 1, 1),
        )
        values.update(overrides)
        return Expense(**values)

    return _make


@pytest.fixture
def make_income():
    """Build IncomeEntry entities without touching the database."""
    from datetime import datetime

    from sparkreceipt.domain.entities import IncomeEntry

    counter = iter(range(1, 10_000))

    def _make(amount="100", income_date=date(2025, 5, 10), **overrides):
        values = dict(
            id=next(counter),
            description="Income",
            amount=Decimal(amount),
            income_date=income_date,
            category="Service",
            client_id=None,
            invoice_id=None,
            payment_method=None,
            notes=None,
            created_at=datetime(2025, 1, 1),
        )
        values.update(overrides)
        return IncomeEntry(**values)

    return _make


@pytest.fixture
def make_invoice():
    """Build Invoice entities without touching the database."""
    from datetime import datetime

    from sparkreceipt.domain.entities import Invoice, InvoiceStatus, InvoiceType

    counter = iter(range(1, 10_000))

    def _make(total="500", due_date=date(2025, 5, 20), status=InvoiceStatus.PENDING, paid="0", **overrides):
        invoice_id = next(counter)
        values = dict(
            id=invoice_id,
            invoice_number=f"05-01-2025-INV-{invoice_id:04d}",
            invoice_type=InvoiceType.INVOICE,
            client_id=None,
            issue_date=date(2025, 5, 1),
            due_date=due_date,
            line_items=(),
            subtotal=Decimal(total),
            tax_rate=Decimal("0"),
            tax_amount=Decimal("0"),
            total=Decimal(total),
            amount_paid=Decimal(paid),
            balance_due=Decimal(total) - Decimal(paid),
            status=status,
            notes=None,
            terms=None,
            created_at=datetime(2025, 1, 1),
        )
        values.update(overrides)
        return Invoice(**values)

    return _make


@pytest.fixture
def make_event():
    """Build CalendarEvent entities without touching the database."""
    from datetime import datetime

    from sparkreceipt.domain.entities import CalendarEvent

    counter = iter(range(1, 10_000))

    def _make(event_date=date(2025, 5, 10), title="Event", **overrides):
        values = dict(
            id=next(counter),
            title=title,
            description=None,
            event_date=event_date,
            start_time=None,
            end_time=None,
            event_type="Event",
            client_id=None,
            location=None,
            color="#8B5CF6",
            is_payment_due=False,
            status="scheduled",
            created_at=datetime(2025, 1, 1),
        )
        values.update(overrides)
        return CalendarEvent(**values)

    return _make
