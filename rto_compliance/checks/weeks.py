"""Aggregate day selections into one compliance record per calendar week."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import AbstractSet, Dict, Iterable, List, Optional, Set, Tuple

from ..config.settings import PolicyConfig
from ..utils.cache import WeekComplianceCache
from ..utils.dates import is_weekday, iter_week_starts, normalize_date, week_dates, week_start
from ..utils.records import DaySelection, SelectionInput, normalize_selections
from ..utils.results import WeekCompliance

logger = logging.getLogger(__name__)


def normalize_holidays(holidays: Optional[Iterable[object]]) -> Set[date]:
    """Normalize a holiday collection to midnight-aligned weekday dates."""
    normalized: Set[date] = set()
    for value in holidays or []:
        parsed = normalize_date(value)
        if parsed is not None and is_weekday(parsed):
            normalized.add(parsed)
    return normalized


def build_week_index(selections: Iterable[DaySelection]) -> Dict[date, Set[date]]:
    """Group work-from-home weekday dates by the Monday of their week."""
    index: Dict[date, Set[date]] = defaultdict(set)
    for selection in selections:
        if not selection.is_work_from_home:
            continue
        day = selection.date
        if not is_weekday(day):
            continue
        index[week_start(day)].add(day)
    return index


def calculate_week_compliance(
    start: date,
    wfh_dates: AbstractSet[date],
    holidays: AbstractSet[date],
    policy: PolicyConfig,
    week_number: int = 1,
) -> WeekCompliance:
    counted_days = week_dates(start, policy.total_weekdays_per_week)
    holiday_days = {day for day in counted_days if day in holidays}
    # A holiday is never a voluntary absence, even when tagged work-from-home.
    wfh_days = sum(1 for day in counted_days if day in wfh_dates and day not in holiday_days)

    total_days = policy.total_weekdays_per_week - len(holiday_days)
    office_days = max(0, total_days - wfh_days)
    percentage = office_days * 100 / total_days if total_days > 0 else 100.0

    return WeekCompliance(
        week_start=week_start(start),
        week_number=week_number,
        total_days=total_days,
        work_from_home_days=wfh_days,
        office_days=office_days,
        # A week with no effective weekdays is vacuously compliant.
        is_compliant=total_days <= 0 or office_days >= policy.min_office_days_per_week,
        percentage=percentage,
    )


def evaluation_horizon(
    selections: List[DaySelection],
    calendar_start: Optional[date] = None,
    calendar_end: Optional[date] = None,
) -> Optional[Tuple[date, date]]:
    """Return the first and last week start of the evaluated range."""
    dates = [selection.date for selection in selections]
    first = calendar_start or (min(dates) if dates else None)
    last = calendar_end or (max(dates) if dates else None)
    if first is None or last is None:
        return None
    if last < first:
        first, last = last, first
    return week_start(first), week_start(last)


def week_record(
    start: date,
    wfh_index: Dict[date, Set[date]],
    holidays: Set[date],
    policy: PolicyConfig,
    week_number: int,
    cache: Optional[WeekComplianceCache],
) -> WeekCompliance:
    start = week_start(start)
    wfh_dates = wfh_index.get(start, set())
    if cache is None:
        return calculate_week_compliance(start, wfh_dates, holidays, policy, week_number)
    week_holidays = frozenset(day for day in week_dates(start) if day in holidays)
    key = (start, policy.fingerprint(), week_number, frozenset(wfh_dates), week_holidays)
    return cache.get_or_compute(
        key,
        lambda: calculate_week_compliance(start, wfh_dates, holidays, policy, week_number),
    )


def aggregate_weeks(
    selections: Iterable[SelectionInput],
    holidays: Optional[Iterable[object]],
    policy: PolicyConfig,
    calendar_start: Optional[date] = None,
    calendar_end: Optional[date] = None,
    cache: Optional[WeekComplianceCache] = None,
) -> List[WeekCompliance]:
    """Produce the ordered week records covering the evaluated range."""
    normalized = normalize_selections(selections)
    holiday_set = normalize_holidays(holidays)
    horizon = evaluation_horizon(normalized, normalize_date(calendar_start), normalize_date(calendar_end))
    if horizon is None:
        return []

    wfh_index = build_week_index(normalized)
    weeks = [
        week_record(start, wfh_index, holiday_set, policy, number, cache)
        for number, start in enumerate(iter_week_starts(*horizon), start=1)
    ]
    logger.debug(
        "Aggregated weeks",
        extra={"weeks": len(weeks), "selections": len(normalized), "holidays": len(holiday_set)},
    )
    return weeks
