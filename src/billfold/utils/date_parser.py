"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2026-01-17", "January 17, 2026") and the
    relative words "today", "yesterday", "tomorrow", plus "last month",
    "this month" and "next month" (first day of that month).

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this month": today.replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_reference_month(month_str: str) -> date:
    """Parse a billing month given as "YYYY-MM" (or any date) into its first day.

    Raises:
        ValueError: If the month cannot be parsed
    """
    month_str = month_str.strip()
    match = _MONTH_PATTERN.match(month_str)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month '{month_str}'")
        return date(year, month, 1)
    return parse_date(month_str).replace(day=1)


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: this-month, this-year, last-month or last-year

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)
    elif period == "this-year":
        return (today.replace(month=1, day=1), today)
    elif period == "last-month":
        first_of_month = today.replace(day=1)
        return (first_of_month - relativedelta(months=1), first_of_month - timedelta(days=1))
    elif period == "last-year":
        first_of_year = today.replace(month=1, day=1)
        return (first_of_year - relativedelta(years=1), first_of_year - timedelta(days=1))
    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, this-year, last-month, last-year"
        )
