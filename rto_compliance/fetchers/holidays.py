"""Holiday lookup boundary that feeds holiday dates to the validator.

Any failure raised by a holiday source is caught here and degrades to an empty
collection, so lookup problems never surface inside a validation run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from ..clients.logging import log_holiday_fetch
from ..utils.dates import is_weekday
from .base import Holiday, HolidaySource

logger = logging.getLogger(__name__)

CompanyFilters = Dict[str, Dict[str, List[str]]]


@dataclass
class HolidayResult:
    holidays: List[Holiday] = field(default_factory=list)
    total_holidays: int = 0
    weekday_holidays: int = 0
    filtered_count: int = 0
    years: List[int] = field(default_factory=list)
    country_code: Optional[str] = None
    company_name: Optional[str] = None
    failed: bool = False

    @property
    def dates(self) -> FrozenSet[date]:
        return frozenset(holiday.date for holiday in self.holidays)


class HolidayFetcher:
    """Fetches, filters and memoizes holidays from an injected source."""

    def __init__(self, source: HolidaySource, company_filters: Optional[CompanyFilters] = None):
        self._source = source
        self._company_filters = {code.upper(): companies for code, companies in (company_filters or {}).items()}
        self._cache: Dict[Tuple[str, str, Tuple[int, ...], bool], HolidayResult] = {}

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_available_companies(self, country_code: str) -> List[str]:
        return sorted(self._company_filters.get(country_code.upper(), {}))

    def has_company_filters(self, country_code: str) -> bool:
        return bool(self._company_filters.get(country_code.upper()))

    def _company_holidays(self, country_code: str, company_name: Optional[str]) -> Optional[Set[str]]:
        if not company_name:
            return None
        names = self._company_filters.get(country_code, {}).get(company_name)
        if names is None:
            logger.warning(
                "No holiday filter configured for company",
                extra={"country_code": country_code, "company_name": company_name},
            )
            return None
        return set(names)

    def fetch_holidays(
        self,
        country_code: str,
        years: Iterable[int],
        company_name: Optional[str] = None,
        only_weekdays: bool = False,
    ) -> HolidayResult:
        """Fetch holidays for the given years, never raising.

        Args:
            country_code: ISO country code understood by the source
            years: Calendar years to cover
            company_name: Optional company whose observed holidays are kept
            only_weekdays: Drop holidays that fall on a weekend

        Returns:
            HolidayResult; empty with ``failed=True`` when the source errors
        """
        code = country_code.upper()
        year_list = sorted(set(years))
        cache_key = (code, company_name or "all", tuple(year_list), only_weekdays)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        start = time.perf_counter()
        try:
            fetched: List[Holiday] = []
            for year in year_list:
                fetched.extend(self._source.get_holidays(year, code))
        except Exception as exc:
            logger.error(
                "Holiday lookup failed, continuing without holidays",
                extra={"country_code": code, "years": year_list, "source": self._source.name, "error": str(exc)},
                exc_info=True,
            )
            return HolidayResult(years=year_list, country_code=code, company_name=company_name, failed=True)

        company_holidays = self._company_holidays(code, company_name)
        kept: Dict[date, Holiday] = {}
        for holiday in fetched:
            if company_holidays is not None and holiday.name not in company_holidays:
                continue
            if only_weekdays and not is_weekday(holiday.date):
                continue
            kept.setdefault(holiday.date, holiday)

        holidays = [kept[key] for key in sorted(kept)]
        result = HolidayResult(
            holidays=holidays,
            total_holidays=len(holidays),
            weekday_holidays=sum(1 for holiday in holidays if is_weekday(holiday.date)),
            filtered_count=len(fetched) - len(holidays) if company_holidays is not None else 0,
            years=year_list,
            country_code=code,
            company_name=company_name,
        )
        self._cache[cache_key] = result
        log_holiday_fetch(
            logger,
            code,
            year_list,
            len(holidays),
            int((time.perf_counter() - start) * 1000),
            company_name=company_name,
        )
        return result

    def get_holiday_dates(
        self,
        country_code: str,
        years: Iterable[int],
        company_name: Optional[str] = None,
        only_weekdays: bool = False,
    ) -> FrozenSet[date]:
        return self.fetch_holidays(country_code, years, company_name, only_weekdays).dates

    def is_holiday(self, day: date, country_code: str, company_name: Optional[str] = None) -> bool:
        dates = self.get_holiday_dates(country_code, [day.year], company_name)
        return day in dates


def summarize_holidays(result: HolidayResult) -> str:
    if result.total_holidays == 0:
        return f"No holidays found for {result.country_code}"
    plural = "s" if result.total_holidays != 1 else ""
    summary = f"{result.total_holidays} holiday{plural} found for {result.country_code}"
    if result.weekday_holidays > 0:
        summary += f" ({result.weekday_holidays} on weekdays)"
    if result.company_name:
        summary += f" filtered by {result.company_name}"
    return summary
