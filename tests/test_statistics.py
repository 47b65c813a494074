"""Tests for dashboard and report statistics."""

from datetime import date
from decimal import Decimal

import pytest

from sparkreceipt.domain.entities import InvoiceStatus
from sparkreceipt.domain.errors import ValidationError
from sparkreceipt.domain.statistics import (
    UNCATEGORIZED,
    build_financial_report,
    category_totals,
    compute_dashboard_stats,
    irs_category_totals,
    monthly_snapshot,
    monthly_totals,
    open_invoices,
    recent_expenses,
)


@pytest.fixture
def records(make_expense, make_income):
    expenses = [
        make_expense("100", date(2025, 5, 3), category_name="Travel", is_tax_deductible=True,
                     irs_category="Travel", tax_amount=Decimal("8")),
        make_expense("50", date(2025, 5, 20), category_name="Meals", is_tax_deductible=True,
                     irs_category="Meals (50% deductible)"),
        make_expense("50", date(2025, 4, 11)),
        make_expense("25", None, category_name="Travel"),
    ]
    income = [
        make_income("1000", date(2025, 5, 1)),
        make_income("500", date(2025, 3, 15)),
    ]
    return expenses, income


class TestDashboardStats:
    """Tests for compute_dashboard_stats."""

    def test_totals(self, records, make_invoice, make_event):
        expenses, income = records
        invoices = [
            make_invoice("500"),
            make_invoice("300", status=InvoiceStatus.PARTIAL, paid="100"),
            make_invoice("200", status=InvoiceStatus.PAID, paid="200"),
            make_invoice("900", status=InvoiceStatus.CANCELLED),
        ]
        events = [make_event(event_date=date(2025, 5, 30)), make_event(event_date=date(2025, 5, 1))]

        stats = compute_dashboard_stats(expenses, income, invoices, events, today=date(2025, 5, 25))

        assert stats.total_income == Decimal("1500")
        assert stats.total_expenses == Decimal("225")
        assert stats.net_profit == stats.total_income - stats.total_expenses
        assert stats.pending_invoices == 2
        assert stats.pending_amount == Decimal("700")
        assert stats.upcoming_events == 1
        assert stats.receipts_this_month == 2

    def test_empty(self):
        stats = compute_dashboard_stats([], [], [], [], today=date(2025, 5, 25))
        assert stats.net_profit == Decimal("0")
        assert stats.pending_invoices == 0


def test_open_invoices(make_invoice):
    invoices = [
        make_invoice(status=InvoiceStatus.PENDING),
        make_invoice(status=InvoiceStatus.OVERDUE),
        make_invoice(status=InvoiceStatus.PARTIAL),
    ]
    assert [inv.status for inv in open_invoices(invoices)] == [InvoiceStatus.PENDING, InvoiceStatus.PARTIAL]


def test_category_totals(records):
    expenses, _ = records
    totals = category_totals(expenses)

    assert [c.name for c in totals] == ["Travel", "Meals", UNCATEGORIZED]
    travel = totals[0]
    assert travel.total == Decimal("125")
    assert travel.count == 2
    assert travel.tax_deductible == Decimal("100")
    assert totals[2].tax_deductible == Decimal("0")
    assert sum(c.percentage for c in totals) == pytest.approx(100.0)
    assert travel.percentage == pytest.approx(125 / 225 * 100)


def test_category_totals_empty():
    assert category_totals([]) == []


def test_monthly_totals(records):
    expenses, income = records
    months = monthly_totals(expenses, income)
    assert [m.month for m in months] == ["2025-03", "2025-04", "2025-05", "Unknown"]
    may = months[2]
    assert may.expenses == Decimal("150")
    assert may.income == Decimal("1000")
    assert months[0].expenses == Decimal("0")


def test_irs_category_totals(records):
    expenses, _ = records
    totals = irs_category_totals(expenses)
    assert [(t.irs_category, t.total) for t in totals] == [
        ("Travel", Decimal("100")),
        ("Meals (50% deductible)", Decimal("50")),
    ]


def test_monthly_snapshot(records):
    expenses, income = records
    snapshot = monthly_snapshot(expenses, income, 2025, 5)
    assert snapshot.expenses == Decimal("150")
    assert snapshot.income == Decimal("1000")
    assert snapshot.expense_count == 2
    assert snapshot.income_count == 1


def test_recent_expenses(records):
    expenses, _ = records
    recent = recent_expenses(expenses, limit=2)
    assert [e.transaction_date for e in recent] == [date(2025, 5, 20), date(2025, 5, 3)]


class TestFinancialReport:
    """Tests for build_financial_report."""

    def test_range_totals(self, records):
        expenses, income = records
        report = build_financial_report(expenses, income, date(2025, 4, 1), date(2025, 5, 31))

        assert report.total_expenses == Decimal("200")
        assert report.total_income == Decimal("1000")
        assert report.net_profit == Decimal("800")
        assert report.total_tax == Decimal("8")
        assert report.tax_deductible == Decimal("150")
        assert report.expense_count == 3
        assert report.income_count == 1
        assert [m.month for m in report.monthly_breakdown] == ["2025-04", "2025-05"]
        assert len(report.irs_breakdown) == 2

    def test_category_filter(self, records):
        expenses, income = records
        report = build_financial_report(
            expenses, income, date(2025, 1, 1), date(2025, 12, 31), categories=["Meals"]
        )
        assert report.total_expenses == Decimal("50")
        assert [c.name for c in report.category_breakdown] == ["Meals"]
        assert report.total_income == Decimal("1500")

    def test_end_before_start(self, records):
        expenses, income = records
        with pytest.raises(ValidationError, match="before start date"):
            build_financial_report(expenses, income, date(2025, 5, 2), date(2025, 5, 1))
