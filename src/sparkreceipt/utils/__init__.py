"""Utility functions for sparkreceipt."""

from sparkreceipt.utils.date_parser import parse_date, parse_month, get_report_period
from sparkreceipt.utils.amount_parser import parse_amount, parse_positive_amount
from sparkreceipt.utils.formatting import format_currency

__all__ = [
    "parse_date",
    "parse_month",
    "get_report_period",
    "parse_amount",
    "parse_positive_amount",
    "format_currency",
]
