"""Date parsing utilities."""

import calendar
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from accountshelper.domain.errors import ValidationError

_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2025-09-15", "15/09/2025", "15 Sep 2025", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates (defaults to today)

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)
        elif period in _WEEKDAYS:
            days_ago = (today.weekday() - _WEEKDAYS.index(period)) % 7
            return today - timedelta(days=days_ago or 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    # UK statements write dates day first
    try:
        return date_parser.parse(date_str, dayfirst=not date_str[:4].isdigit()).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}") from e


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: this-month, this-year, last-month, last-year or YYYY-MM
        today: Reference date (defaults to today)

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValidationError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return today.replace(day=1), today
    elif period == "this-year":
        return today.replace(month=1, day=1), today
    elif period == "last-month":
        last = today - relativedelta(months=1)
        return month_bounds(last.year, last.month)
    elif period == "last-year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)

    year, sep, month = period.partition("-")
    if sep and year.isdigit() and month.isdigit() and 1 <= int(month) <= 12:
        return month_bounds(int(year), int(month))

    raise ValidationError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, "
        "last-month, last-year, YYYY-MM"
    )
