"""Regression tests against the fixture calendar."""

from datetime import date

import pytest

from rto_compliance.analyzers.scorer import compliance_summary
from rto_compliance.checks.windows import StrictMode
from rto_compliance.services.compliance_runner import compute_overall_compliance
from rto_compliance.services.status_calculator import WeekStatus, calculate_week_statuses

from rto_compliance.tests.factories import monday

CALENDAR = {"calendar_start": date(2025, 1, 6), "calendar_end": date(2025, 3, 31)}


def test_fixture_calendar_average_mode(sample_selections, sample_holidays, policy):
    """Test the fixture calendar in rolling average mode."""
    result = compute_overall_compliance(sample_selections, sample_holidays, policy, **CALENDAR)

    assert result.is_valid is True
    assert len(result.weeks) == 13
    assert len(result.window_results) == 2
    assert result.violating_windows == []
    assert result.overall_compliance == 100.0
    assert result.message == (
        "RTO Compliant: Best 8 of 12 weeks average 5.0 office days (100%) of 40 weekdays. Required: 60%"
    )
    # Weeks with a partial holiday or short attendance never make the top eight.
    assert monday(6) not in result.window_results[0].week_starts


def test_fixture_calendar_statuses(sample_selections, sample_holidays, policy):
    """Test week statuses for the fixture calendar."""
    result = compute_overall_compliance(sample_selections, sample_holidays, policy, **CALENDAR)
    statuses = calculate_week_statuses(result)

    invalid = [start for start, status in statuses.items() if status is WeekStatus.INVALID]
    assert invalid == [monday(1), monday(6)]
    assert sum(1 for status in statuses.values() if status is WeekStatus.COMPLIANT) == 11


def test_fixture_calendar_strict_mode(sample_selections, sample_holidays, policy):
    """Test the fixture calendar in strict mode."""
    result = compute_overall_compliance(
        sample_selections, sample_holidays, policy, StrictMode(), **CALENDAR
    )

    assert result.is_valid is False
    assert result.invalid_week_start == date(2025, 1, 13)
    assert result.message == "Week starting 2025-01-13 has only 1 office days, required: 3"
    assert result.overall_compliance == pytest.approx(85.0)
    assert compliance_summary(result)["compliance_percentage"] == "85.0%"
