"""Evaluate week records in strict or rolling-average mode.

Strict mode checks every week against the weekly minimum on its own. Average
mode slides a window of ``window_weeks`` consecutive weeks one week at a time
and requires the best ``top_weeks`` of each window to reach the threshold
percentage of their combined effective weekdays.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Union

from ..config.settings import PolicyConfig
from ..utils.errors import UnsupportedModeError
from ..utils.results import ValidationResult, WeekCompliance, WindowCompliance

logger = logging.getLogger(__name__)

AVAILABLE_MODES = ["strict", "average", "rolling", "first-weeks"]


@dataclass(frozen=True)
class StrictMode:
    name: ClassVar[str] = "strict"


@dataclass(frozen=True)
class AverageMode:
    window_weeks: int
    top_weeks: int
    threshold_percentage: float
    anchored: bool = False
    name: ClassVar[str] = "average"

    def __post_init__(self) -> None:
        if self.window_weeks < 1 or self.top_weeks < 1:
            raise ValueError("window_weeks and top_weeks must be positive")
        if self.top_weeks > self.window_weeks:
            raise ValueError(
                f"top_weeks ({self.top_weeks}) cannot exceed window_weeks ({self.window_weeks})"
            )
        if not 0 < self.threshold_percentage <= 1:
            raise ValueError("threshold_percentage must be within (0, 1]")

    @classmethod
    def from_policy(cls, policy: PolicyConfig, anchored: bool = False) -> "AverageMode":
        return cls(
            window_weeks=policy.rolling_window_weeks,
            top_weeks=policy.top_weeks_to_count,
            threshold_percentage=policy.threshold_percentage,
            anchored=anchored,
        )

    @property
    def required_percentage(self) -> float:
        return self.threshold_percentage * 100


Mode = Union[StrictMode, AverageMode]


def parse_mode(name: str, policy: PolicyConfig) -> Mode:
    normalized = (name or "").strip().lower()
    if normalized == "strict":
        return StrictMode()
    if normalized in ("average", "rolling"):
        return AverageMode.from_policy(policy)
    if normalized == "first-weeks":
        return AverageMode.from_policy(policy, anchored=True)
    raise UnsupportedModeError(name, AVAILABLE_MODES)


def rank_weeks(weeks: List[WeekCompliance]) -> List[WeekCompliance]:
    """Order weeks by office days descending, earliest week first on ties."""
    return sorted(weeks, key=lambda week: (-week.office_days, week.week_start))


def evaluate_window(
    weeks: List[WeekCompliance],
    start: int,
    size: int,
    mode: Mode,
    policy: PolicyConfig,
) -> WindowCompliance:
    start = max(start, 0)
    window = weeks[start : start + max(size, 0)]

    if isinstance(mode, AverageMode):
        selected = rank_weeks(window)[: mode.top_weeks]
        divisor = mode.top_weeks
        required_percentage = mode.required_percentage
    else:
        selected = list(window)
        divisor = max(len(window), 1)
        required_percentage = policy.required_weekly_percentage

    total_office_days = sum(week.office_days for week in selected)
    total_weekdays = sum(week.total_days for week in selected)
    compliance_percentage = (
        total_office_days * 100 / total_weekdays if total_weekdays > 0 else 100.0
    )

    if isinstance(mode, AverageMode):
        is_compliant = compliance_percentage >= required_percentage
    else:
        is_compliant = all(week.is_compliant for week in selected)

    return WindowCompliance(
        window_start=start,
        window_end=start + max(len(window), 1) - 1,
        weeks=selected,
        total_office_days=total_office_days,
        total_weekdays=total_weekdays,
        average_office_days_per_week=total_office_days / divisor,
        compliance_percentage=compliance_percentage,
        is_compliant=is_compliant,
        required_office_days=policy.min_office_days_per_week,
        required_percentage=required_percentage,
    )


def empty_result(mode: Mode) -> ValidationResult:
    return ValidationResult(
        is_valid=True,
        message="No selections to validate",
        overall_compliance=100.0,
        mode=mode.name,
    )


def evaluate_strict(weeks: List[WeekCompliance], policy: PolicyConfig) -> ValidationResult:
    mode = StrictMode()
    windows = [evaluate_window(weeks, index, 1, mode, policy) for index in range(len(weeks))]
    violating = [window for window in windows if not window.is_compliant]
    compliant = [window for window in windows if window.is_compliant]
    overall = (
        sum(window.compliance_percentage for window in windows) / len(windows) if windows else 100.0
    )

    worst: Optional[WeekCompliance] = None
    if violating:
        worst = min(
            (window.weeks[0] for window in violating),
            key=lambda week: (week.office_days, week.week_start),
        )
        message = (
            f"Week starting {worst.week_start.isoformat()} has only {worst.office_days} office days, "
            f"required: {policy.min_office_days_per_week}"
        )
    else:
        message = (
            f"All weeks meet the minimum office day requirement "
            f"({policy.min_office_days_per_week} days)"
        )

    return ValidationResult(
        is_valid=not violating,
        message=message,
        overall_compliance=overall,
        mode=mode.name,
        window_results=windows,
        violating_windows=violating,
        compliant_windows=compliant,
        evaluated_week_starts={week.week_start for week in weeks},
        invalid_week_start=worst.week_start if worst else None,
        weeks=list(weeks),
    )


def _window_positions(week_count: int, mode: AverageMode) -> List[int]:
    if mode.anchored or week_count <= mode.window_weeks:
        return [0]
    return list(range(week_count - mode.window_weeks + 1))


def _format_average_message(window: WindowCompliance, mode: AverageMode) -> str:
    label = "RTO Compliant" if window.is_compliant else "RTO Violation"
    return (
        f"{label}: Best {mode.top_weeks} of {mode.window_weeks} weeks average "
        f"{window.average_office_days_per_week:.1f} office days "
        f"({window.compliance_percentage:.0f}%) of {window.total_weekdays} weekdays. "
        f"Required: {mode.required_percentage:.0f}%"
    )


def evaluate_average(
    weeks: List[WeekCompliance],
    policy: PolicyConfig,
    mode: Optional[AverageMode] = None,
) -> ValidationResult:
    mode = mode or AverageMode.from_policy(policy)
    if not weeks:
        return empty_result(mode)

    windows = [
        evaluate_window(weeks, position, mode.window_weeks, mode, policy)
        for position in _window_positions(len(weeks), mode)
    ]
    violating = [window for window in windows if not window.is_compliant]
    compliant = [window for window in windows if window.is_compliant]

    evaluated = set()
    for window in windows:
        evaluated.update(week.week_start for week in weeks[window.window_start : window.window_end + 1])

    reported = violating[0] if violating else windows[-1]
    invalid_week_start = None
    if violating and reported.weeks:
        # Lowest-ranked of the counted weeks drags the window below threshold.
        invalid_week_start = reported.weeks[-1].week_start
        logger.debug(
            "Rolling window below threshold",
            extra={
                "window_start": reported.window_start,
                "compliance_percentage": reported.compliance_percentage,
                "violating_windows": len(violating),
            },
        )

    return ValidationResult(
        is_valid=not violating,
        message=_format_average_message(reported, mode),
        overall_compliance=reported.compliance_percentage,
        mode=mode.name,
        window_results=windows,
        violating_windows=violating,
        compliant_windows=compliant,
        evaluated_week_starts=evaluated,
        invalid_week_start=invalid_week_start,
        weeks=list(weeks),
    )


def evaluate(weeks: List[WeekCompliance], mode: Mode, policy: PolicyConfig) -> ValidationResult:
    if isinstance(mode, AverageMode):
        return evaluate_average(weeks, policy, mode)
    return evaluate_strict(weeks, policy)
