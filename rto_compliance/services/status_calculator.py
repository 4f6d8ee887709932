"""Calculate the displayed status of each week from a validation result."""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..utils.dates import week_start
from ..utils.results import ValidationResult, WeekCompliance, WindowCompliance

logger = logging.getLogger(__name__)


class WeekStatus(str, Enum):
    IGNORED = "ignored"
    PENDING = "pending"
    COMPLIANT = "compliant"
    INVALID = "invalid"


def _enclosing_windows(week: WeekCompliance, result: ValidationResult) -> List[WindowCompliance]:
    index = {entry.week_start: position for position, entry in enumerate(result.weeks)}
    position = index.get(week.week_start)
    if position is None:
        return []
    return [
        window
        for window in result.window_results
        if window.window_start <= position <= window.window_end
    ]


def calculate_week_status(
    week: Optional[WeekCompliance],
    result: ValidationResult,
) -> WeekStatus:
    """Resolve one week's status.

    Rules are applied in priority order and the first match wins:

    1. The week is outside every evaluated window: ``ignored``.
    2. The week misses the weekly minimum on its own: ``invalid``. This is
       checked before any window outcome so that a favourable average
       elsewhere can never show a failing week as compliant.
    3. The overall result, or every window enclosing the week, is valid:
       ``compliant``.
    4. The week is the highlighted worst performer of the first failing
       window: ``invalid``.
    5. Otherwise the week is adequate but sits in a failing window: ``pending``.
    """
    if week is None or week.week_start not in result.evaluated_week_starts:
        return WeekStatus.IGNORED

    if not week.is_compliant:
        return WeekStatus.INVALID

    if result.is_valid:
        return WeekStatus.COMPLIANT
    windows = _enclosing_windows(week, result)
    if windows and all(window.is_compliant for window in windows):
        return WeekStatus.COMPLIANT

    if result.invalid_week_start is not None and week.week_start == result.invalid_week_start:
        return WeekStatus.INVALID

    return WeekStatus.PENDING


def calculate_week_statuses(
    result: ValidationResult,
    week_starts: Optional[Iterable[date]] = None,
) -> Dict[date, WeekStatus]:
    """Map each displayed week start to its status.

    Args:
        result: Validation result produced for the current selections.
        week_starts: Week starts shown by the caller. Defaults to the weeks
            the result was computed over; unknown weeks resolve to ``ignored``.

    Returns:
        Ordered mapping of week start to ``WeekStatus``.
    """
    by_start = {week.week_start: week for week in result.weeks}
    targets = list(week_starts) if week_starts is not None else list(by_start)

    statuses: Dict[date, WeekStatus] = {}
    for start in targets:
        statuses[start] = calculate_week_status(by_start.get(week_start(start)), result)

    logger.debug(
        "Week statuses calculated",
        extra={
            "weeks": len(statuses),
            "invalid": sum(1 for status in statuses.values() if status is WeekStatus.INVALID),
            "is_valid": result.is_valid,
        },
    )
    return statuses
