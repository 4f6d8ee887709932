"""Tests for the holiday lookup boundary."""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from rto_compliance.clients.nager_date import NagerDateClient
from rto_compliance.config.settings import HolidaySourceConfig
from rto_compliance.fetchers.base import Holiday, StaticHolidaySource
from rto_compliance.fetchers.holidays import HolidayFetcher, HolidayResult, summarize_holidays
from rto_compliance.fetchers.registry import build_holiday_fetcher
from rto_compliance.utils.errors import HolidayFetchError

COMPANY_FILTERS = {"us": {"Acme": ["Presidents Day"]}}


def _response(payload):
    response = MagicMock()
    response.status_code = 200
    response.content = b"[]" if payload == [] else b"payload"
    response.json.return_value = payload
    return response


def test_nager_client_parses_holidays():
    """Test holiday parsing skips entries without a usable date."""
    session = MagicMock()
    session.get.return_value = _response(
        [
            {"date": "2025-01-20", "localName": "MLK Day", "name": "Martin Luther King Jr. Day", "countryCode": "US"},
            {"date": "garbage", "name": "Broken"},
            {"localName": "No date"},
        ]
    )
    client = NagerDateClient(base_url="https://holidays.example/", session=session)

    holidays = client.get_holidays(2025, "us")

    assert holidays == [
        Holiday(date(2025, 1, 20), "Martin Luther King Jr. Day", "MLK Day", "US"),
    ]
    session.get.assert_called_once_with("https://holidays.example/api/v3/PublicHolidays/2025/US", timeout=10)


def test_nager_client_sorts_available_countries():
    """Test available countries are sorted by name."""
    session = MagicMock()
    session.get.return_value = _response(
        [{"countryCode": "US", "name": "United States"}, {"countryCode": "DE", "name": "Germany"}]
    )
    countries = NagerDateClient(session=session).get_available_countries()
    assert [country["code"] for country in countries] == ["DE", "US"]


def test_nager_client_wraps_request_errors():
    """Test request failures surface as transient HolidayFetchError."""
    client = NagerDateClient(session=MagicMock())
    with patch.object(NagerDateClient, "_get_with_retry", side_effect=requests.ConnectionError("down")):
        with pytest.raises(HolidayFetchError) as exc_info:
            client.get_holidays(2025, "US")

    assert exc_info.value.transient is True
    assert exc_info.value.year == 2025


def test_fetcher_filters_weekends_and_deduplicates(static_source):
    """Test weekday filtering and date deduplication."""
    duplicate = Holiday(date(2025, 1, 20), "Duplicate", country_code="US")
    source = StaticHolidaySource(static_source.get_holidays(2025, "US") + [duplicate])
    result = HolidayFetcher(source).fetch_holidays("us", [2025], only_weekdays=True)

    assert result.dates == frozenset({date(2025, 1, 20), date(2025, 2, 17)})
    assert result.holidays[0].name == "Martin Luther King Jr. Day"
    assert result.failed is False


def test_fetcher_applies_company_filter(static_source):
    """Test company filters keep only the holidays the company observes."""
    fetcher = HolidayFetcher(static_source, COMPANY_FILTERS)
    result = fetcher.fetch_holidays("US", [2025], company_name="Acme")

    assert result.dates == frozenset({date(2025, 2, 17)})
    assert result.filtered_count == 2
    assert fetcher.get_available_companies("us") == ["Acme"]
    assert fetcher.has_company_filters("DE") is False


def test_fetcher_unknown_company_keeps_all_holidays(static_source):
    """Test an unconfigured company keeps every holiday."""
    result = HolidayFetcher(static_source, COMPANY_FILTERS).fetch_holidays("US", [2025], company_name="Globex")
    assert result.total_holidays == 3


def test_fetcher_memoizes_results():
    """Test fetch results are memoized until the cache is cleared."""
    source = MagicMock()
    source.name = "mock"
    source.get_holidays.return_value = [Holiday(date(2025, 1, 1), "New Year's Day")]
    fetcher = HolidayFetcher(source)

    fetcher.fetch_holidays("US", [2025])
    fetcher.fetch_holidays("US", [2025])
    assert source.get_holidays.call_count == 1

    fetcher.clear_cache()
    fetcher.fetch_holidays("US", [2025])
    assert source.get_holidays.call_count == 2


def test_fetcher_degrades_to_empty_on_failure():
    """Test source errors degrade to an empty failed result."""
    source = MagicMock()
    source.name = "mock"
    source.get_holidays.side_effect = HolidayFetchError("US", 2025, "timeout")
    fetcher = HolidayFetcher(source)

    result = fetcher.fetch_holidays("US", [2025, 2026])

    assert result.failed is True
    assert result.dates == frozenset()
    assert fetcher.is_holiday(date(2025, 1, 1), "US") is False


def test_summarize_holidays():
    """Test holiday summary text."""
    assert summarize_holidays(HolidayResult(country_code="US")) == "No holidays found for US"
    result = HolidayResult(
        holidays=[Holiday(date(2025, 2, 17), "Presidents Day")],
        total_holidays=1,
        weekday_holidays=1,
        country_code="US",
        company_name="Acme",
    )
    assert summarize_holidays(result) == "1 holiday found for US (1 on weekdays) filtered by Acme"


def test_registry_builds_fetcher_only_with_country(static_source):
    """Test the registry builds a fetcher only when a country is set."""
    assert build_holiday_fetcher(HolidaySourceConfig()) is None

    fetcher = build_holiday_fetcher(HolidaySourceConfig(country_code="US"), source=static_source)
    assert fetcher.get_holiday_dates("US", [2025], only_weekdays=True) == frozenset(
        {date(2025, 1, 20), date(2025, 2, 17)}
    )
