"""Nager.Date public holiday API client."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import HTTPError, RequestException
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from ..fetchers.base import Holiday, HolidaySource
from ..utils.errors import HolidayFetchError

# Constants
DEFAULT_BASE_URL = "https://date.nager.at"
API_TIMEOUT_SECONDS = int(os.getenv("NAGER_API_TIMEOUT_SECONDS", "30"))  # Overall retry budget
REQUEST_TIMEOUT_SECONDS = int(os.getenv("NAGER_REQUEST_TIMEOUT_SECONDS", "10"))

logger = logging.getLogger(__name__)


class NagerDateClient(HolidaySource):
    """Thin wrapper around the Nager.Date v3 API with retry support."""

    name = "nager-date"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @retry(
        retry=retry_if_exception_type((HTTPError, RequestException)),
        stop=(stop_after_attempt(3) | stop_after_delay(API_TIMEOUT_SECONDS)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _get_with_retry(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("Requesting Nager.Date", extra={"url": url})
        response = self._session.get(url, timeout=self._timeout)
        response.raise_for_status()
        if response.status_code == 204 or not response.content:
            return []
        return response.json()

    def get_holidays(self, year: int, country_code: str) -> List[Holiday]:
        """Fetch public holidays for a country and year.

        Args:
            year: Calendar year
            country_code: ISO 3166-1 alpha-2 country code (e.g., "US")

        Returns:
            List of Holiday records ordered as the API returns them
        """
        code = country_code.upper()
        try:
            payload = self._get_with_retry(f"/api/v3/PublicHolidays/{year}/{code}")
        except (RequestException, ValueError) as exc:
            logger.error(
                "Failed to fetch holidays after retries",
                extra={"country_code": code, "year": year, "error": str(exc)},
            )
            raise HolidayFetchError(code, year, str(exc)) from exc

        holidays: List[Holiday] = []
        for item in payload or []:
            parsed = _parse_holiday(item, code)
            if parsed is not None:
                holidays.append(parsed)
        return holidays

    def get_available_countries(self) -> List[Dict[str, str]]:
        """Return supported countries sorted by name."""
        try:
            payload = self._get_with_retry("/api/v3/AvailableCountries")
        except (RequestException, ValueError) as exc:
            raise HolidayFetchError("*", 0, str(exc)) from exc
        countries = [
            {"code": item.get("countryCode", ""), "name": item.get("name", "")}
            for item in payload or []
        ]
        return sorted(countries, key=lambda country: country["name"])


def _parse_holiday(item: Dict[str, Any], country_code: str) -> Optional[Holiday]:
    raw_date = item.get("date")
    if not raw_date:
        return None
    try:
        parsed = datetime.strptime(str(raw_date)[:10], "%Y-%m-%d").date()
    except ValueError:
        logger.debug("Skipping holiday with unparseable date", extra={"date": raw_date})
        return None
    return Holiday(
        date=parsed,
        name=item.get("name") or item.get("localName") or "",
        local_name=item.get("localName"),
        country_code=item.get("countryCode") or country_code,
    )
