"""Date and month key helpers.

Day logs are keyed by ``YYYY-MM-DD`` and goals by ``YYYY-MM``.
"""

import calendar
from datetime import date, datetime
from typing import Optional


def date_key(day: date) -> str:
    """Format a date as a day log key."""
    return day.strftime("%Y-%m-%d")


def month_key(day: date) -> str:
    """Format a date as a month key."""
    return day.strftime("%Y-%m")


def today_key() -> str:
    return date_key(date.today())


def current_month_key() -> str:
    return month_key(date.today())


def parse_date_key(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` key.

    Raises:
        ValueError: If the value is not a valid date key.
    """
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date '{value}'. Expected YYYY-MM-DD.") from None


def parse_month_key(value: str) -> tuple[int, int]:
    """Parse a ``YYYY-MM`` key into (year, month).

    Raises:
        ValueError: If the value is not a valid month key.
    """
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except (TypeError, ValueError):
        raise ValueError(f"Invalid month '{value}'. Expected YYYY-MM.") from None
    return parsed.year, parsed.month


def normalize_date_key(value: Optional[str]) -> str:
    """Validate a date key, defaulting to today."""
    if not value or value == "today":
        return today_key()
    return date_key(parse_date_key(value))


def shift_month(key: str, delta: int) -> str:
    """Move a month key forwards or backwards by whole months."""
    year, month = parse_month_key(key)
    index = year * 12 + (month - 1) + delta
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def days_in_month(key: str) -> list[date]:
    """Get every date of a month, in order."""
    year, month = parse_month_key(key)
    _, count = calendar.monthrange(year, month)
    return [date(year, month, d) for d in range(1, count + 1)]


def month_weeks(key: str) -> list[list[Optional[date]]]:
    """Get the Sunday-first weeks of a month.

    Days outside the month are None.
    """
    year, month = parse_month_key(key)
    cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
    return [
        [day if day.month == month else None for day in week]
        for week in cal.monthdatescalendar(year, month)
    ]


def format_month(key: str) -> str:
    """Format a month key for display (e.g., 'February 2026')."""
    year, month = parse_month_key(key)
    return f"{calendar.month_name[month]} {year}"
