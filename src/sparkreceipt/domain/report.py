"""Financial report generation.

Reports are generated by the backend's ``generate-report`` function. When no
backend is configured, or the call fails, the same report is rendered
locally so the user always gets a file.
"""

import csv
import io
import json
import logging
import re
from datetime import date
from typing import Any, Optional, Sequence

from sparkreceipt.backend.functions import BackendFunctions
from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import Expense, FinancialReport, GeneratedReport, IncomeEntry
from sparkreceipt.domain.errors import BackendError, ValidationError
from sparkreceipt.domain.line_items import line_items_to_json
from sparkreceipt.domain.statistics import build_financial_report
from sparkreceipt.utils.formatting import format_currency

logger = logging.getLogger(__name__)

REPORT_FORMATS = ("csv", "json")


def report_filename(start_date: date, end_date: date, fmt: str, report_name: Optional[str] = None) -> str:
    """File name for a report, e.g. ``sparkreceipt-report-2025-01-01-to-2025-03-31.csv``."""
    prefix = "sparkreceipt-report"
    if report_name:
        slug = re.sub(r"[^a-z0-9]+", "-", report_name.lower()).strip("-")
        prefix = slug or prefix
    return f"{prefix}-{start_date.isoformat()}-to-{end_date.isoformat()}.{fmt}"


def expense_payload(expense: Expense) -> dict[str, Any]:
    """JSON-friendly expense record."""
    return {
        "id": expense.id,
        "merchant_name": expense.merchant_name,
        "transaction_date": expense.transaction_date.isoformat() if expense.transaction_date else None,
        "category_name": expense.category_name,
        "total_amount": float(expense.total_amount),
        "tax_amount": float(expense.tax_amount),
        "payment_method": expense.payment_method,
        "client_id": expense.client_id,
        "notes": expense.notes,
        "is_tax_deductible": expense.is_tax_deductible,
        "is_business": expense.is_business,
        "currency": expense.currency,
        "review_status": expense.review_status.value,
        "irs_category": expense.irs_category,
        "line_items": line_items_to_json(expense.line_items),
    }


def income_payload(entry: IncomeEntry) -> dict[str, Any]:
    """JSON-friendly income record."""
    return {
        "id": entry.id,
        "description": entry.description,
        "amount": float(entry.amount),
        "income_date": entry.income_date.isoformat() if entry.income_date else None,
        "category": entry.category,
        "client_id": entry.client_id,
        "invoice_id": entry.invoice_id,
        "payment_method": entry.payment_method,
    }


def render_csv(report: FinancialReport) -> str:
    """Render the locally generated CSV report."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["SparkReceipt Financial Report"])
    writer.writerow([f"Report Period: {report.start_date} to {report.end_date}"])
    writer.writerow([])

    writer.writerow(["SUMMARY"])
    writer.writerow(["Total Income", format_currency(report.total_income)])
    writer.writerow(["Total Expenses", format_currency(report.total_expenses)])
    writer.writerow(["Net Profit", format_currency(report.net_profit)])
    writer.writerow(["Tax Deductible", format_currency(report.tax_deductible)])
    writer.writerow([])

    writer.writerow(["EXPENSES BY CATEGORY"])
    writer.writerow(["Category", "Amount", "Count", "Tax Deductible"])
    for cat in report.category_breakdown:
        writer.writerow([cat.name, f"{cat.total:.2f}", cat.count, f"{cat.tax_deductible:.2f}"])
    writer.writerow([])

    writer.writerow(["EXPENSE DETAILS"])
    writer.writerow(["Date", "Merchant", "Category", "Amount", "Tax", "Deductible"])
    for expense in report.expenses:
        writer.writerow(
            [
                expense.transaction_date.isoformat() if expense.transaction_date else "",
                expense.merchant_name or "",
                expense.category_name or "",
                f"{expense.total_amount:.2f}",
                f"{expense.tax_amount:.2f}",
                "Yes" if expense.is_tax_deductible else "No",
            ]
        )
    return output.getvalue()


def render_json(report: FinancialReport) -> str:
    """Render the locally generated JSON report."""
    document = {
        "title": "SparkReceipt Financial Report",
        "period": {"start": str(report.start_date), "end": str(report.end_date)},
        "summary": {
            "total_income": float(report.total_income),
            "total_expenses": float(report.total_expenses),
            "net_profit": float(report.net_profit),
            "total_tax": float(report.total_tax),
            "tax_deductible": float(report.tax_deductible),
            "expense_count": report.expense_count,
            "income_count": report.income_count,
        },
        "categories": [
            {
                "category": cat.name,
                "amount": float(cat.total),
                "count": cat.count,
                "tax_deductible": float(cat.tax_deductible),
                "percentage": round(cat.percentage, 2),
            }
            for cat in report.category_breakdown
        ],
        "monthly": [
            {"month": m.month, "expenses": float(m.expenses), "income": float(m.income)}
            for m in report.monthly_breakdown
        ],
        "irs_categories": [
            {"irs_category": t.irs_category, "amount": float(t.total)} for t in report.irs_breakdown
        ],
        "expenses": [expense_payload(e) for e in report.expenses],
        "income": [income_payload(i) for i in report.income],
    }
    return json.dumps(document, indent=2)


class ReportService:
    """Service for building and exporting financial reports."""

    def __init__(self, db: Database, functions: Optional[BackendFunctions] = None):
        """Initialize report service.

        Args:
            db: Database instance
            functions: Remote functions client; reports are rendered locally
                when None
        """
        self.db = db
        self.functions = functions

    def build_report(
        self,
        start_date: date,
        end_date: date,
        categories: Optional[Sequence[str]] = None,
    ) -> FinancialReport:
        """Build the in-memory report for a date range."""
        return build_financial_report(
            self.db.list_expenses(),
            self.db.list_income(),
            start_date,
            end_date,
            categories,
        )

    def generate(
        self,
        start_date: date,
        end_date: date,
        fmt: str = "csv",
        categories: Optional[Sequence[str]] = None,
        report_name: Optional[str] = None,
    ) -> GeneratedReport:
        """Generate a report file.

        Args:
            start_date: First day of the report (inclusive)
            end_date: Last day of the report (inclusive)
            fmt: "csv" or "json"
            categories: Optional expense category names to include
            report_name: Optional name, also used for the file name

        Returns:
            GeneratedReport whose ``source`` is "remote" or "local"

        Raises:
            ValidationError: If the format or date range is invalid
        """
        fmt = fmt.lower()
        if fmt not in REPORT_FORMATS:
            raise ValidationError(
                f"Unknown report format '{fmt}'. Use one of: {', '.join(REPORT_FORMATS)}"
            )

        report = self.build_report(start_date, end_date, categories)
        filename = report_filename(start_date, end_date, fmt, report_name)
        metadata = {
            "expense_count": report.expense_count,
            "income_count": report.income_count,
            "net_profit": report.net_profit,
        }

        if self.functions is not None:
            body = {
                "format": fmt,
                "startDate": start_date.isoformat(),
                "endDate": end_date.isoformat(),
                "reportName": report_name or "SparkReceipt Financial Report",
                "expenses": [expense_payload(e) for e in report.expenses],
                "income": [income_payload(i) for i in report.income],
            }
            try:
                response = self.functions.generate_report(body)
                return GeneratedReport(
                    content=self._response_content(response),
                    format=fmt,
                    filename=filename,
                    source="remote",
                    metadata=metadata,
                )
            except BackendError as e:
                logger.warning("Remote report generation failed, rendering locally: %s", e)
        else:
            logger.info("No backend configured, rendering report locally")

        content = render_csv(report) if fmt == "csv" else render_json(report)
        return GeneratedReport(
            content=content, format=fmt, filename=filename, source="local", metadata=metadata
        )

    @staticmethod
    def _response_content(response: Any) -> str:
        if isinstance(response, str):
            return response
        if isinstance(response, (dict, list)):
            if isinstance(response, dict) and response.get("success") is False:
                raise BackendError(response.get("error") or "Report generation failed")
            return json.dumps(response, indent=2)
        raise BackendError(f"Unexpected report response: {response!r}")
