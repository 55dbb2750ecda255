from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def is_working_day(day: date) -> bool:
    """Monday to Friday, holiday calendars are not considered."""
    return day.weekday() < 5


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def inclusive_days(start: date, end: date) -> int:
    if end < start:
        return 0
    return (end - start).days + 1


def working_days(start: date, end: date) -> int:
    """Count Monday-Friday dates in the inclusive range [start, end].

    An empty range (end before start) gives 0.
    """

    total = inclusive_days(start, end)
    if total == 0:
        return 0

    full_weeks, remainder = divmod(total, 7)
    count = full_weeks * 5
    weekday = start.weekday()
    for offset in range(remainder):
        if (weekday + offset) % 7 < 5:
            count += 1
    return count


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    try:
        month = int(month)
        year = int(year)
    except (TypeError, ValueError):
        raise ValidationError("Month and year must be integers")
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {month}")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year {year}")
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)
