"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Dict, List

import pytest

from rto_compliance.config.settings import PolicyConfig
from rto_compliance.fetchers.base import Holiday, StaticHolidaySource
from rto_compliance.utils.dates import normalize_date


@pytest.fixture
def policy() -> PolicyConfig:
    return PolicyConfig()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_selections(fixtures_dir: Path) -> List[Dict]:
    """Load sample day selections from fixtures."""
    with open(fixtures_dir / "selections.json") as f:
        return json.load(f)


@pytest.fixture
def sample_holidays(fixtures_dir: Path) -> List[str]:
    """Load sample holiday dates from fixtures."""
    with open(fixtures_dir / "holidays.json") as f:
        return json.load(f)


@pytest.fixture
def static_source(sample_holidays) -> StaticHolidaySource:

    names = ["Martin Luther King Jr. Day", "Presidents Day", "Saturday Observance"]
    return StaticHolidaySource(
        [
            Holiday(date=normalize_date(value), name=name, local_name=name, country_code="US")
            for value, name in zip(sample_holidays, names)
        ]
    )
