"""SQLAlchemy models for the sparkreceipt record store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Date,
    Numeric,
    Float,
    Boolean,
    JSON,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class BusinessProfile(Base):
    """Business profile model (one row)."""

    __tablename__ = "business_profile"

    id = Column(Integer, primary_key=True)
    business_name = Column(String, nullable=False, default="")
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    website = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip = Column(String, nullable=True)
    event_date = Column(Date, nullable=True)
    event_type = Column(String, nullable=True)
    venue = Column(String, nullable=True)
    ceremony_time = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    services_booked = Column(JSON, nullable=False, default=list)
    contract_amount = Column(Numeric(12, 2), nullable=False, default=0)
    balance_due = Column(Numeric(12, 2), nullable=False, default=0)
    payment_status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, default=_now, nullable=False)


class Invoice(Base):
    """Invoice/quote model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String, nullable=False, unique=True)
    invoice_type = Column(String, nullable=False, default="invoice")
    # Plain integer references: the store does not enforce relationships.
    client_id = Column(Integer, nullable=True)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    line_items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    amount_paid = Column(Numeric(12, 2), nullable=False, default=0)
    balance_due = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default="pending")
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class Expense(Base):
    """Expense/receipt model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    merchant_name = Column(String, nullable=True)
    transaction_date = Column(Date, nullable=True)
    category_id = Column(Integer, nullable=True)
    category_name = Column(String, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    payment_method = Column(String, nullable=True)
    client_id = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    is_tax_deductible = Column(Boolean, nullable=False, default=False)
    is_business = Column(Boolean, nullable=False, default=True)
    currency = Column(String, nullable=False, default="USD")
    country = Column(String, nullable=False, default="US")
    receipt_type = Column(String, nullable=False, default="receipt")
    review_status = Column(String, nullable=False, default="pending")
    line_items = Column(JSON, nullable=False, default=list)
    receipt_url = Column(String, nullable=True)
    ai_confidence = Column(Float, nullable=True)
    ai_raw_response = Column(Text, nullable=True)
    irs_category = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class IncomeEntry(Base):
    """Income entry model."""

    __tablename__ = "income_entries"

    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    income_date = Column(Date, nullable=True)
    category = Column(String, nullable=False, default="Service")
    client_id = Column(Integer, nullable=True)
    invoice_id = Column(Integer, nullable=True)
    payment_method = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class Event(Base):
    """Calendar event model."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    event_date = Column(Date, nullable=False)
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
    event_type = Column(String, nullable=False, default="Event")
    client_id = Column(Integer, nullable=True)
    location = Column(String, nullable=True)
    color = Column(String, nullable=False, default="#8B5CF6")
    is_payment_due = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False, default="scheduled")
    created_at = Column(DateTime, default=_now, nullable=False)


class ExpenseCategory(Base):
    """Expense category model."""

    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    color = Column(String, nullable=True)
    is_tax_deductible = Column(Boolean, nullable=False, default=True)
    irs_category = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class Payment(Base):
    """Payment model."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, nullable=True)
    client_id = Column(Integer, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
