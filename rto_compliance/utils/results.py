"""Dataclasses describing compliance records produced by the checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Set


@dataclass(frozen=True)
class WeekCompliance:
    week_start: date
    week_number: int
    total_days: int
    work_from_home_days: int
    office_days: int
    is_compliant: bool
    percentage: float


@dataclass
class WindowCompliance:
    window_start: int
    window_end: int
    weeks: List[WeekCompliance]
    total_office_days: int
    total_weekdays: int
    average_office_days_per_week: float
    compliance_percentage: float
    is_compliant: bool
    required_office_days: int
    required_percentage: float

    @property
    def week_starts(self) -> List[date]:
        return [week.week_start for week in self.weeks]


@dataclass
class ValidationResult:
    is_valid: bool
    message: str
    overall_compliance: float
    mode: str
    window_results: List[WindowCompliance] = field(default_factory=list)
    violating_windows: List[WindowCompliance] = field(default_factory=list)
    compliant_windows: List[WindowCompliance] = field(default_factory=list)
    evaluated_week_starts: Set[date] = field(default_factory=set)
    invalid_week_start: Optional[date] = None
    weeks: List[WeekCompliance] = field(default_factory=list)
