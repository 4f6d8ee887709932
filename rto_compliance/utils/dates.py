"""Calendar helpers for week-based compliance calculations.

Every helper returns a new ``date``; nothing here mutates its input.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Iterator, List, Optional

WORKDAYS_PER_WEEK = 5


def normalize_date(value: Any) -> Optional[date]:
    """Coerce datetimes, dates and ISO strings to a midnight-aligned ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    text = str(value).strip()
    # ISO timestamps carry the calendar date in their first ten characters.
    for candidate, fmt in ((text[:10], "%Y-%m-%d"), (text, "%m/%d/%Y")):
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    return None


def is_weekday(day: date) -> bool:
    return day.weekday() < WORKDAYS_PER_WEEK


def week_start(day: date) -> date:
    # Monday of the same week; Sunday belongs to the week that started six days earlier.
    return day - timedelta(days=day.weekday())


def add_weeks(day: date, weeks: int) -> date:
    return day + timedelta(weeks=weeks)


def week_dates(start: date, weekdays: int = WORKDAYS_PER_WEEK) -> List[date]:
    """Return the counted weekdays of the week beginning at ``start``."""
    monday = week_start(start)
    return [monday + timedelta(days=offset) for offset in range(min(weekdays, WORKDAYS_PER_WEEK))]


def iter_week_starts(start: date, end: date) -> Iterator[date]:
    """Yield every Monday from the week of ``start`` to the week of ``end`` inclusive."""
    current = week_start(start)
    last = week_start(end)
    while current <= last:
        yield current
        current = add_weeks(current, 1)
