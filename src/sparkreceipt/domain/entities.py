"""Domain model entities for sparkreceipt.

These are pure data classes representing business records, independent of
the storage schema. Derived values (dashboard statistics, report breakdowns,
calendar cells) live here too so the presentation layer only deals with
plain, immutable objects.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class InvoiceType(str, Enum):
    """Kind of billable document."""

    INVOICE = "invoice"
    QUOTE = "quote"
    RECEIPT = "receipt"


class InvoiceStatus(str, Enum):
    """Payment status of an invoice."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class ReviewStatus(str, Enum):
    """Review state of an expense/receipt."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class LineItem:
    """A billable or purchased line: amount is always quantity x rate."""

    name: str
    description: str = ""
    quantity: Decimal = Decimal("1")
    rate: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class BusinessProfile:
    """Business profile shown on invoices and quotes."""

    id: int
    business_name: str
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    website: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Client:
    """Client domain entity."""

    id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip: Optional[str]
    event_date: Optional[date]
    event_type: Optional[str]
    venue: Optional[str]
    ceremony_time: Optional[str]
    notes: Optional[str]
    services_booked: tuple[LineItem, ...]
    contract_amount: Decimal
    balance_due: Decimal
    payment_status: str
    created_at: datetime


@dataclass(frozen=True)
class Invoice:
    """Invoice, quote or sales receipt."""

    id: int
    invoice_number: str
    invoice_type: InvoiceType
    client_id: Optional[int]
    issue_date: date
    due_date: Optional[date]
    line_items: tuple[LineItem, ...]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    status: InvoiceStatus
    notes: Optional[str]
    terms: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Expense:
    """Expense domain entity; a scanned receipt is an expense with AI metadata."""

    id: int
    merchant_name: Optional[str]
    transaction_date: Optional[date]
    category_id: Optional[int]
    category_name: Optional[str]
    total_amount: Decimal
    tax_amount: Decimal
    payment_method: Optional[str]
    client_id: Optional[int]
    notes: Optional[str]
    is_tax_deductible: bool
    is_business: bool
    currency: str
    country: str
    receipt_type: str
    review_status: ReviewStatus
    line_items: tuple[LineItem, ...]
    receipt_url: Optional[str]
    ai_confidence: Optional[float]
    ai_raw_response: Optional[str]
    irs_category: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class IncomeEntry:
    """Income domain entity."""

    id: int
    description: str
    amount: Decimal
    income_date: Optional[date]
    category: str
    client_id: Optional[int]
    invoice_id: Optional[int]
    payment_method: Optional[str]
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class CalendarEvent:
    """Calendar event domain entity."""

    id: int
    title: str
    description: Optional[str]
    event_date: date
    start_time: Optional[str]
    end_time: Optional[str]
    event_type: str
    client_id: Optional[int]
    location: Optional[str]
    color: str
    is_payment_due: bool
    status: str
    created_at: datetime


@dataclass(frozen=True)
class ExpenseCategory:
    """Expense category with its optional IRS deduction label."""

    id: int
    name: str
    color: Optional[str]
    is_tax_deductible: bool
    irs_category: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Payment:
    """Payment received, usually against an invoice."""

    id: int
    invoice_id: Optional[int]
    client_id: Optional[int]
    amount: Decimal
    payment_date: date
    payment_method: Optional[str]
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class DashboardStats:
    """Headline numbers for the dashboard."""

    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    pending_invoices: int
    pending_amount: Decimal
    upcoming_events: int
    receipts_this_month: int


@dataclass(frozen=True)
class CategoryTotal:
    """Expense total for one category name."""

    name: str
    total: Decimal
    count: int
    tax_deductible: Decimal
    percentage: float


@dataclass(frozen=True)
class MonthlyTotal:
    """Expense and income totals for one YYYY-MM key."""

    month: str
    expenses: Decimal
    income: Decimal


@dataclass(frozen=True)
class IrsCategoryTotal:
    """Deductible expense total for one IRS category label."""

    irs_category: str
    total: Decimal


@dataclass(frozen=True)
class MonthlySnapshot:
    """Income and expenses for a single month."""

    year: int
    month: int
    expenses: Decimal
    income: Decimal
    expense_count: int
    income_count: int


@dataclass(frozen=True)
class FinancialReport:
    """Report over a date range, with category, month and IRS breakdowns."""

    start_date: Optional[date]
    end_date: Optional[date]
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    total_tax: Decimal
    tax_deductible: Decimal
    expense_count: int
    income_count: int
    category_breakdown: tuple[CategoryTotal, ...]
    monthly_breakdown: tuple[MonthlyTotal, ...]
    irs_breakdown: tuple[IrsCategoryTotal, ...]
    expenses: tuple[Expense, ...] = ()
    income: tuple[IncomeEntry, ...] = ()


@dataclass(frozen=True)
class CalendarItem:
    """Something shown on a calendar day: an event or an invoice due date."""

    id: str
    title: str
    date: date
    color: str
    is_payment_due: bool
    source: str
    start_time: Optional[str] = None
    event_type: Optional[str] = None


@dataclass(frozen=True)
class CalendarDay:
    """One cell of the month grid."""

    date: date
    is_current_month: bool
    items: tuple[CalendarItem, ...] = ()


@dataclass(frozen=True)
class ReceiptExtraction:
    """Receipt fields extracted by the AI backend, ready for review."""

    merchant_name: str
    transaction_date: date
    category_suggestion: str
    total_amount: Decimal
    tax_amount: Decimal
    payment_method: str
    currency: str
    country: str
    receipt_type: str
    is_tax_deductible: bool
    line_items: tuple[LineItem, ...] = ()
    confidence: Optional[float] = None
    irs_category: Optional[str] = None
    raw_response: Optional[str] = None
    receipt_url: Optional[str] = None


@dataclass(frozen=True)
class ClientActivity:
    """Invoices and expenses linked to a client, with totals."""

    client: Client
    invoices: tuple[Invoice, ...]
    expenses: tuple[Expense, ...]
    total_invoiced: Decimal
    total_paid: Decimal
    outstanding: Decimal


@dataclass(frozen=True)
class GeneratedReport:
    """Report file content returned by the backend or rendered locally."""

    content: str
    format: str
    filename: str
    source: str
    metadata: dict[str, Any] = field(default_factory=dict)
