"""Factory for the configured holiday fetcher."""

from __future__ import annotations

from typing import Optional

from ..clients.nager_date import NagerDateClient
from ..config.settings import HolidaySourceConfig
from .base import HolidaySource
from .holidays import HolidayFetcher


def build_holiday_fetcher(
    config: HolidaySourceConfig,
    source: Optional[HolidaySource] = None,
) -> Optional[HolidayFetcher]:
    if not config.country_code:
        return None
    source = source or NagerDateClient(base_url=config.base_url, timeout=config.request_timeout_seconds)
    return HolidayFetcher(source, config.company_filters)
