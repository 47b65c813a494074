"""Derived statistics for the dashboard and report views.

Everything here is a pure function over in-memory records, re-run whenever a
view needs fresh numbers. Nothing is persisted.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from sparkreceipt.domain.entities import (
    CalendarEvent,
    CategoryTotal,
    DashboardStats,
    Expense,
    FinancialReport,
    IncomeEntry,
    Invoice,
    InvoiceStatus,
    IrsCategoryTotal,
    MonthlySnapshot,
    MonthlyTotal,
)
from sparkreceipt.domain.errors import ValidationError

UNCATEGORIZED = "Uncategorized"
UNKNOWN_MONTH = "Unknown"
OPEN_STATUSES = (InvoiceStatus.PENDING, InvoiceStatus.PARTIAL)

ZERO = Decimal("0")


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _month_key(day: Optional[date]) -> str:
    return day.strftime("%Y-%m") if day is not None else UNKNOWN_MONTH


def open_invoices(invoices: Iterable[Invoice]) -> list[Invoice]:
    """Invoices that are still awaiting payment (pending or partial)."""
    return [inv for inv in invoices if inv.status in OPEN_STATUSES]


def compute_dashboard_stats(
    expenses: Sequence[Expense],
    income: Sequence[IncomeEntry],
    invoices: Sequence[Invoice],
    events: Sequence[CalendarEvent],
    today: Optional[date] = None,
) -> DashboardStats:
    """Headline dashboard numbers.

    Args:
        expenses: All expenses
        income: All income entries
        invoices: All invoices
        events: All calendar events
        today: Reference date (defaults to today)

    Returns:
        DashboardStats where net_profit == total_income - total_expenses
    """
    today = today or date.today()
    total_income = _sum(i.amount for i in income)
    total_expenses = _sum(e.total_amount for e in expenses)
    pending = open_invoices(invoices)

    return DashboardStats(
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
        pending_invoices=len(pending),
        pending_amount=_sum(inv.balance_due for inv in pending),
        upcoming_events=sum(1 for e in events if e.event_date >= today),
        receipts_this_month=sum(
            1
            for e in expenses
            if e.transaction_date is not None
            and (e.transaction_date.year, e.transaction_date.month) == (today.year, today.month)
        ),
    )


def category_totals(expenses: Iterable[Expense]) -> list[CategoryTotal]:
    """Expense totals per category name, largest first.

    Expenses without a category are grouped under "Uncategorized". The
    percentage is each category's share of the overall total.
    """
    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    deductible: dict[str, Decimal] = {}
    for expense in expenses:
        name = expense.category_name or UNCATEGORIZED
        totals[name] = totals.get(name, ZERO) + expense.total_amount
        counts[name] = counts.get(name, 0) + 1
        if expense.is_tax_deductible:
            deductible[name] = deductible.get(name, ZERO) + expense.total_amount
        else:
            deductible.setdefault(name, ZERO)

    overall = _sum(totals.values())
    results = [
        CategoryTotal(
            name=name,
            total=total,
            count=counts[name],
            tax_deductible=deductible[name],
            percentage=float(total / overall * 100) if overall else 0.0,
        )
        for name, total in totals.items()
    ]
    results.sort(key=lambda c: (-c.total, c.name))
    return results


def monthly_totals(
    expenses: Iterable[Expense], income: Iterable[IncomeEntry]
) -> list[MonthlyTotal]:
    """Expenses and income per YYYY-MM, oldest month first."""
    expense_totals: dict[str, Decimal] = {}
    income_totals: dict[str, Decimal] = {}
    for expense in expenses:
        key = _month_key(expense.transaction_date)
        expense_totals[key] = expense_totals.get(key, ZERO) + expense.total_amount
    for entry in income:
        key = _month_key(entry.income_date)
        income_totals[key] = income_totals.get(key, ZERO) + entry.amount

    months = sorted(set(expense_totals) | set(income_totals))
    return [
        MonthlyTotal(
            month=month,
            expenses=expense_totals.get(month, ZERO),
            income=income_totals.get(month, ZERO),
        )
        for month in months
    ]


def irs_category_totals(expenses: Iterable[Expense]) -> list[IrsCategoryTotal]:
    """Deductible expense totals per IRS category, largest first."""
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        if expense.is_tax_deductible and expense.irs_category:
            totals[expense.irs_category] = (
                totals.get(expense.irs_category, ZERO) + expense.total_amount
            )
    results = [IrsCategoryTotal(irs_category=k, total=v) for k, v in totals.items()]
    results.sort(key=lambda t: (-t.total, t.irs_category))
    return results


def monthly_snapshot(
    expenses: Iterable[Expense], income: Iterable[IncomeEntry], year: int, month: int
) -> MonthlySnapshot:
    """Income and expense totals and counts for one month."""
    month_expenses = [
        e
        for e in expenses
        if e.transaction_date is not None
        and (e.transaction_date.year, e.transaction_date.month) == (year, month)
    ]
    month_income = [
        i
        for i in income
        if i.income_date is not None and (i.income_date.year, i.income_date.month) == (year, month)
    ]
    return MonthlySnapshot(
        year=year,
        month=month,
        expenses=_sum(e.total_amount for e in month_expenses),
        income=_sum(i.amount for i in month_income),
        expense_count=len(month_expenses),
        income_count=len(month_income),
    )


def recent_expenses(expenses: Iterable[Expense], limit: int = 5) -> list[Expense]:
    """Most recent expenses by transaction date."""
    ordered = sorted(expenses, key=lambda e: e.transaction_date or date.min, reverse=True)
    return ordered[:limit]


def filter_by_range(
    expenses: Iterable[Expense],
    income: Iterable[IncomeEntry],
    start_date: date,
    end_date: date,
    categories: Optional[Sequence[str]] = None,
) -> tuple[list[Expense], list[IncomeEntry]]:
    """Records within an inclusive date range.

    Records without a date are dropped. A non-empty ``categories`` keeps
    only expenses with one of those category names; income is not filtered
    by category.
    """
    wanted = set(categories or ())
    kept_expenses = [
        e
        for e in expenses
        if e.transaction_date is not None
        and start_date <= e.transaction_date <= end_date
        and (not wanted or (e.category_name or "") in wanted)
    ]
    kept_income = [
        i for i in income if i.income_date is not None and start_date <= i.income_date <= end_date
    ]
    return kept_expenses, kept_income


def build_financial_report(
    expenses: Iterable[Expense],
    income: Iterable[IncomeEntry],
    start_date: date,
    end_date: date,
    categories: Optional[Sequence[str]] = None,
) -> FinancialReport:
    """Build a financial report for a date range.

    Args:
        expenses: All expenses
        income: All income entries
        start_date: First day of the report (inclusive)
        end_date: Last day of the report (inclusive)
        categories: Optional expense category names to include

    Returns:
        FinancialReport with totals and category, month and IRS breakdowns
    """
    if end_date < start_date:
        raise ValidationError(f"Report end date {end_date} is before start date {start_date}")

    kept_expenses, kept_income = filter_by_range(
        expenses, income, start_date, end_date, categories
    )
    total_expenses = _sum(e.total_amount for e in kept_expenses)
    total_income = _sum(i.amount for i in kept_income)

    return FinancialReport(
        start_date=start_date,
        end_date=end_date,
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
        total_tax=_sum(e.tax_amount for e in kept_expenses),
        tax_deductible=_sum(e.total_amount for e in kept_expenses if e.is_tax_deductible),
        expense_count=len(kept_expenses),
        income_count=len(kept_income),
        category_breakdown=tuple(category_totals(kept_expenses)),
        monthly_breakdown=tuple(monthly_totals(kept_expenses, kept_income)),
        irs_breakdown=tuple(irs_category_totals(kept_expenses)),
        expenses=tuple(kept_expenses),
        income=tuple(kept_income),
    )
