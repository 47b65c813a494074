"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

REPORT_PERIODS = ("week", "month", "quarter", "year")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _relative_date(text: str, today: date) -> Optional[date]:
    simple = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in simple:
        return simple[text]

    direction, _, period = text.partition(" ")
    if direction not in ("last", "this", "next") or not period:
        return None

    shift = {"last": -1, "this": 0, "next": 1}[direction]
    if period == "week":
        return today - timedelta(days=today.weekday()) + timedelta(weeks=shift)
    if period == "month":
        return (today + relativedelta(months=shift)).replace(day=1)
    if period == "year":
        return today.replace(month=1, day=1) + relativedelta(years=shift)
    if period in WEEKDAYS and shift != 0:
        target = WEEKDAYS.index(period)
        if shift > 0:
            return today + timedelta(days=(target - today.weekday()) % 7 or 7)
        return today - timedelta(days=(today.weekday() - target) % 7 or 7)
    return None


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Accepts absolute dates ("2025-03-14", "March 14, 2025") and relative
    ones ("today", "yesterday", "tomorrow", "last month", "this week",
    "next year", "last friday").

    Args:
        date_str: Date string
        today: Reference date for relative dates (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    relative = _relative_date(text, today or date.today())
    if relative is not None:
        return relative

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse "YYYY-MM" (or anything dateutil reads) into (year, month)."""
    text = month_str.strip()
    try:
        year, month = (int(part) for part in text.split("-"))
        if 1 <= month <= 12:
            return year, month
    except ValueError:
        pass
    try:
        parsed = date_parser.parse(text, default=date.today().replace(day=1))
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse month '{month_str}': {e}")
    return parsed.year, parsed.month


def get_report_period(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get the date range of a report period ending today.

    Args:
        period: "week" (last 7 days), "month", "quarter" or "year" (to date)
        today: Reference date (defaults to today)

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If the period is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "week":
        return today - timedelta(days=7), today
    if period == "month":
        return today.replace(day=1), today
    if period == "quarter":
        first_month = (today.month - 1) // 3 * 3 + 1
        return today.replace(month=first_month, day=1), today
    if period == "year":
        return today.replace(month=1, day=1), today

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(REPORT_PERIODS)}"
    )
