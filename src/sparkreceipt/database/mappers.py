"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: JSON line item columns, string
status columns and numeric columns become domain types here, and domain
values become column values in ``values_to_columns``.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from sparkreceipt.domain import entities as domain
from sparkreceipt.domain.line_items import line_items_from_json, line_items_to_json
from sparkreceipt.database.models import (
    BusinessProfile as ORMBusinessProfile,
    Client as ORMClient,
    Invoice as ORMInvoice,
    Expense as ORMExpense,
    IncomeEntry as ORMIncomeEntry,
    Event as ORMEvent,
    ExpenseCategory as ORMExpenseCategory,
    Payment as ORMPayment,
)

LINE_ITEM_COLUMNS = {"line_items", "services_booked"}


def _money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def values_to_columns(values: Mapping[str, Any]) -> dict[str, Any]:
    """Convert domain field values into column values."""
    columns: dict[str, Any] = {}
    for key, value in values.items():
        if key in LINE_ITEM_COLUMNS:
            value = line_items_to_json(value or ())
        elif isinstance(value, Enum):
            value = value.value
        columns[key] = value
    return columns


def business_profile_to_domain(orm_profile: ORMBusinessProfile) -> domain.BusinessProfile:
    """Convert SQLAlchemy BusinessProfile model to domain entity."""
    return domain.BusinessProfile(
        id=orm_profile.id,
        business_name=orm_profile.business_name,
        address=orm_profile.address,
        city=orm_profile.city,
        state=orm_profile.state,
        zip=orm_profile.zip,
        phone=orm_profile.phone,
        email=orm_profile.email,
        website=orm_profile.website,
        created_at=orm_profile.created_at,
    )


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        email=orm_client.email,
        phone=orm_client.phone,
        address=orm_client.address,
        city=orm_client.city,
        state=orm_client.state,
        zip=orm_client.zip,
        event_date=orm_client.event_date,
        event_type=orm_client.event_type,
        venue=orm_client.venue,
        ceremony_time=orm_client.ceremony_time,
        notes=orm_client.notes,
        services_booked=line_items_from_json(orm_client.services_booked),
        contract_amount=_money(orm_client.contract_amount),
        balance_due=_money(orm_client.balance_due),
        payment_status=orm_client.payment_status,
        created_at=orm_client.created_at,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        invoice_number=orm_invoice.invoice_number,
        invoice_type=domain.InvoiceType(orm_invoice.invoice_type),
        client_id=orm_invoice.client_id,
        issue_date=orm_invoice.issue_date,
        due_date=orm_invoice.due_date,
        line_items=line_items_from_json(orm_invoice.line_items),
        subtotal=_money(orm_invoice.subtotal),
        tax_rate=_money(orm_invoice.tax_rate),
        tax_amount=_money(orm_invoice.tax_amount),
        total=_money(orm_invoice.total),
        amount_paid=_money(orm_invoice.amount_paid),
        balance_due=_money(orm_invoice.balance_due),
        status=domain.InvoiceStatus(orm_invoice.status),
        notes=orm_invoice.notes,
        terms=orm_invoice.terms,
        created_at=orm_invoice.created_at,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        merchant_name=orm_expense.merchant_name,
        transaction_date=orm_expense.transaction_date,
        category_id=orm_expense.category_id,
        category_name=orm_expense.category_name,
        total_amount=_money(orm_expense.total_amount),
        tax_amount=_money(orm_expense.tax_amount),
        payment_method=orm_expense.payment_method,
        client_id=orm_expense.client_id,
        notes=orm_expense.notes,
        is_tax_deductible=bool(orm_expense.is_tax_deductible),
        is_business=bool(orm_expense.is_business),
        currency=orm_expense.currency,
        country=orm_expense.country,
        receipt_type=orm_expense.receipt_type,
        review_status=domain.ReviewStatus(orm_expense.review_status),
        line_items=line_items_from_json(orm_expense.line_items),
        receipt_url=orm_expense.receipt_url,
        ai_confidence=orm_expense.ai_confidence,
        ai_raw_response=orm_expense.ai_raw_response,
        irs_category=orm_expense.irs_category,
        created_at=orm_expense.created_at,
    )


def income_to_domain(orm_income: ORMIncomeEntry) -> domain.IncomeEntry:
    """Convert SQLAlchemy IncomeEntry model to domain IncomeEntry entity."""
    return domain.IncomeEntry(
        id=orm_income.id,
        description=orm_income.description,
        amount=_money(orm_income.amount),
        income_date=orm_income.income_date,
        category=orm_income.category,
        client_id=orm_income.client_id,
        invoice_id=orm_income.invoice_id,
        payment_method=orm_income.payment_method,
        notes=orm_income.notes,
        created_at=orm_income.created_at,
    )


def event_to_domain(orm_event: ORMEvent) -> domain.CalendarEvent:
    """Convert SQLAlchemy Event model to domain CalendarEvent entity."""
    return domain.CalendarEvent(
        id=orm_event.id,
        title=orm_event.title,
        description=orm_event.description,
        event_date=orm_event.event_date,
        start_time=orm_event.start_time,
        end_time=orm_event.end_time,
        event_type=orm_event.event_type,
        client_id=orm_event.client_id,
        location=orm_event.location,
        color=orm_event.color,
        is_payment_due=bool(orm_event.is_payment_due),
        status=orm_event.status,
        created_at=orm_event.created_at,
    )


def category_to_domain(orm_category: ORMExpenseCategory) -> domain.ExpenseCategory:
    """Convert SQLAlchemy ExpenseCategory model to domain entity."""
    return domain.ExpenseCategory(
        id=orm_category.id,
        name=orm_category.name,
        color=orm_category.color,
        is_tax_deductible=bool(orm_category.is_tax_deductible),
        irs_category=orm_category.irs_category,
        created_at=orm_category.created_at,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        invoice_id=orm_payment.invoice_id,
        client_id=orm_payment.client_id,
        amount=_money(orm_payment.amount),
        payment_date=orm_payment.payment_date,
        payment_method=orm_payment.payment_method,
        notes=orm_payment.notes,
        created_at=orm_payment.created_at,
    )
