"""Entry points that run a complete compliance validation."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

from ..analyzers import scorer
from ..checks.weeks import aggregate_weeks, build_week_index, normalize_holidays, week_record
from ..checks.windows import AverageMode, Mode, StrictMode, empty_result, evaluate, evaluate_window, parse_mode
from ..clients.logging import get_logger, log_cache, log_validation
from ..config.config_loader import load_runtime_config
from ..config.settings import PolicyConfig, RuntimeConfig
from ..fetchers.holidays import HolidayFetcher
from ..fetchers.registry import build_holiday_fetcher
from ..utils.cache import WeekComplianceCache
from ..utils.dates import normalize_date
from ..utils.records import DaySelection, SelectionInput, normalize_selections, work_from_home_dates
from ..utils.results import ValidationResult, WeekCompliance, WindowCompliance
from ..utils.timing import timed
from .status_calculator import WeekStatus, calculate_week_statuses

logger = get_logger(__name__)

HolidayInput = Optional[Iterable[Any]]


def compute_overall_compliance(
    selections: Iterable[SelectionInput],
    holidays: HolidayInput,
    policy: PolicyConfig,
    mode: Optional[Mode] = None,
    *,
    calendar_start: Optional[date] = None,
    calendar_end: Optional[date] = None,
    cache: Optional[WeekComplianceCache] = None,
) -> ValidationResult:
    """Validate selections against the policy in the requested mode.

    Selections without a single work-from-home day short-circuit to a valid
    result with 100% compliance and empty collections.
    """
    mode = mode or AverageMode.from_policy(policy)
    normalized = normalize_selections(selections)
    if not work_from_home_dates(normalized):
        return empty_result(mode)

    weeks = aggregate_weeks(normalized, holidays, policy, calendar_start, calendar_end, cache)
    return evaluate(weeks, mode, policy)


def compute_week_compliance(
    week_start: date,
    selections: Iterable[SelectionInput],
    holidays: HolidayInput,
    policy: PolicyConfig,
    *,
    cache: Optional[WeekComplianceCache] = None,
) -> WeekCompliance:
    """Compliance of the single week containing ``week_start``."""
    index = build_week_index(normalize_selections(selections))
    return week_record(week_start, index, normalize_holidays(holidays), policy, 1, cache)


def compute_window_compliance(
    window_start: int,
    window_size: int,
    selections: Iterable[SelectionInput],
    holidays: HolidayInput,
    policy: PolicyConfig,
    mode: Optional[Mode] = None,
    *,
    calendar_start: Optional[date] = None,
    calendar_end: Optional[date] = None,
    cache: Optional[WeekComplianceCache] = None,
) -> WindowCompliance:
    """Aggregate the window of ``window_size`` weeks starting at week index ``window_start``."""
    mode = mode or AverageMode.from_policy(policy)
    weeks = aggregate_weeks(selections, holidays, policy, calendar_start, calendar_end, cache)
    return evaluate_window(weeks, window_start, window_size, mode, policy)


@dataclass
class ComplianceReport:
    run_id: str
    result: ValidationResult
    statuses: Dict[date, WeekStatus] = field(default_factory=dict)
    summary: Dict[str, int] = field(default_factory=dict)
    holiday_count: int = 0
    metrics: Dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.result.is_valid


class ComplianceRunner:
    """Runs validations with a fixed runtime config and a caller-owned cache."""

    def __init__(
        self,
        runtime_config: Optional[RuntimeConfig] = None,
        holiday_fetcher: Optional[HolidayFetcher] = None,
        cache: Optional[WeekComplianceCache] = None,
    ):
        self._runtime_config = runtime_config if runtime_config is not None else load_runtime_config()
        self._policy = self._runtime_config.policy
        if holiday_fetcher is None:
            holiday_fetcher = build_holiday_fetcher(self._runtime_config.holidays)
        self._holiday_fetcher = holiday_fetcher
        self._cache = cache if cache is not None else WeekComplianceCache()

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    @property
    def cache(self) -> WeekComplianceCache:
        return self._cache

    def update_policy(self, policy: PolicyConfig) -> None:
        """Swap the policy; cached weeks computed under the old one are dropped."""
        self._policy = policy
        self._runtime_config = self._runtime_config.model_copy(update={"policy": policy})
        self._cache.reset()

    def resolve_mode(self, mode: Union[Mode, str, None] = None) -> Mode:
        if isinstance(mode, (StrictMode, AverageMode)):
            return mode
        return parse_mode(mode or self._runtime_config.validation.default_mode, self._policy)

    def load_holidays(self, years: Iterable[int]) -> List[date]:
        """Holiday dates for the configured country; empty when none is configured."""
        holiday_config = self._runtime_config.holidays
        if self._holiday_fetcher is None or not holiday_config.country_code:
            return []
        dates = self._holiday_fetcher.get_holiday_dates(
            holiday_config.country_code,
            years,
            company_name=holiday_config.company_name,
            only_weekdays=holiday_config.only_weekdays,
        )
        return sorted(dates)

    def run(
        self,
        selections: Iterable[SelectionInput],
        mode: Union[Mode, str, None] = None,
        calendar_start: Optional[date] = None,
        calendar_end: Optional[date] = None,
        holidays: HolidayInput = None,
        displayed_weeks: Optional[Iterable[date]] = None,
    ) -> ComplianceReport:
        run_id = uuid.uuid4().hex[:12]
        resolved_mode = self.resolve_mode(mode)
        normalized = normalize_selections(selections)
        metrics: Dict[str, int] = {}

        if holidays is None:
            with timed("holidays", metrics):
                holidays = self.load_holidays(_years_touched(normalized, calendar_start, calendar_end))
        holiday_dates = normalize_holidays(holidays)

        with timed("validation", metrics):
            result = compute_overall_compliance(
                normalized,
                holiday_dates,
                self._policy,
                resolved_mode,
                calendar_start=calendar_start,
                calendar_end=calendar_end,
                cache=self._cache,
            )
            statuses = calculate_week_statuses(result, displayed_weeks)

        summary = scorer.summarize(result, statuses)
        log_validation(
            logger,
            result.mode,
            result.is_valid,
            result.overall_compliance,
            len(result.weeks),
            len(result.window_results),
            metrics.get("duration_validation", 0),
            {key: value for key, value in summary.items() if key.startswith("status:")},
        )
        log_cache(
            logger,
            self._cache.fingerprint,
            len(self._cache),
            self._cache.hits,
            self._cache.misses,
            level=logging.INFO if self._runtime_config.validation.debug else logging.DEBUG,
        )

        return ComplianceReport(
            run_id=run_id,
            result=result,
            statuses=statuses,
            summary=summary,
            holiday_count=len(holiday_dates),
            metrics=metrics,
        )


def _years_touched(
    selections: List[DaySelection],
    calendar_start: Optional[date],
    calendar_end: Optional[date],
) -> List[int]:
    years = {selection.year for selection in selections}
    for bound in (normalize_date(calendar_start), normalize_date(calendar_end)):
        if bound is not None:
            years.add(bound.year)
    if years:
        years.update(range(min(years), max(years) + 1))
    return sorted(years)
