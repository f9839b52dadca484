"""Date helpers shared by schedules.

Dates are stored as ``YYYY-MM-DD`` and compared in the local calendar.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"


def today() -> date:
    return datetime.now().date()


def parse_date(value: str) -> date | None:
    """Parse a stored date, returning None for empty or invalid input."""
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def format_date(value: date | None) -> str:
    if value is None:
        return ""
    return value.strftime(DATE_FORMAT)


def diff_days(first: date | None, second: date | None) -> int:
    """Days from ``second`` to ``first``; 0 when either side is missing."""
    if first is None or second is None:
        return 0
    return (first - second).days


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)
