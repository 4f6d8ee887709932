"""Base holiday source that concrete holiday providers implement."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class Holiday:
    date: date
    name: str
    local_name: Optional[str] = None
    country_code: Optional[str] = None


class HolidaySource(ABC):
    """Yields public holidays for a country and year."""

    name: str = "base"

    @abstractmethod
    def get_holidays(self, year: int, country_code: str) -> List[Holiday]:
        """Return the holidays observed in ``country_code`` during ``year``.

        Raises:
            HolidayFetchError: The underlying provider could not be reached.
        """

    def get_available_countries(self) -> List[dict]:
        return []


class StaticHolidaySource(HolidaySource):
    """In-memory source, handy for fixed company calendars and tests."""

    name = "static"

    def __init__(self, holidays: List[Holiday]):
        self._holidays = list(holidays)

    def get_holidays(self, year: int, country_code: str) -> List[Holiday]:
        return [
            holiday
            for holiday in self._holidays
            if holiday.date.year == year
            and (holiday.country_code is None or holiday.country_code == country_code)
        ]
