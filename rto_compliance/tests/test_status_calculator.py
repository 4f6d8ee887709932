"""Regression tests for per-week status resolution."""

from datetime import date

from rto_compliance.checks.windows import StrictMode, empty_result, evaluate_average, evaluate_strict
from rto_compliance.config.settings import PolicyConfig
from rto_compliance.services.status_calculator import WeekStatus, calculate_week_status, calculate_week_statuses

from rto_compliance.tests.factories import make_week, make_weeks, monday


def test_failing_week_stays_invalid_when_average_passes(policy):
    """A week below the minimum is never shown compliant, whatever the window average."""
    office_days = [5] * 12
    office_days[5] = 0
    result = evaluate_average(make_weeks(office_days), policy)
    statuses = calculate_week_statuses(result)

    assert result.is_valid is True
    assert statuses[monday(5)] is WeekStatus.INVALID
    assert all(status is WeekStatus.COMPLIANT for start, status in statuses.items() if start != monday(5))


def test_pending_weeks_in_failing_window():
    """Test adequate weeks in a failing window are pending."""
    policy = PolicyConfig(min_office_days_per_week=2)
    result = evaluate_average(make_weeks([5] * 4 + [2] * 10, min_office_days=2), policy)
    statuses = calculate_week_statuses(result)

    assert result.is_valid is False
    assert result.invalid_week_start == monday(9)
    # Only enclosed by compliant windows.
    assert statuses[monday(0)] is WeekStatus.COMPLIANT
    assert statuses[monday(1)] is WeekStatus.COMPLIANT
    # Adequate weeks inside the failing window.
    assert statuses[monday(2)] is WeekStatus.PENDING
    assert statuses[monday(13)] is WeekStatus.PENDING
    assert statuses[monday(9)] is WeekStatus.INVALID


def test_weeks_outside_evaluation_are_ignored(policy):
    """Test displayed weeks outside the evaluation are ignored."""
    result = evaluate_average(make_weeks([5] * 3), policy)
    statuses = calculate_week_statuses(result, [date(2024, 12, 30), monday(1), monday(3)])

    assert statuses == {
        date(2024, 12, 30): WeekStatus.IGNORED,
        monday(1): WeekStatus.COMPLIANT,
        monday(3): WeekStatus.IGNORED,
    }


def test_displayed_dates_resolve_to_their_week(policy):
    """Test a displayed mid-week date takes its week's status."""
    result = evaluate_strict(make_weeks([5, 1]), policy)
    wednesday = date(2025, 1, 15)

    assert calculate_week_statuses(result, [wednesday]) == {wednesday: WeekStatus.INVALID}


def test_missing_week_is_ignored(policy):
    """Test a missing week record is ignored."""
    assert calculate_week_status(None, evaluate_strict(make_weeks([5]), policy)) is WeekStatus.IGNORED


def test_empty_result_marks_everything_ignored():
    """Test the short-circuit result has no evaluated weeks."""
    result = empty_result(StrictMode())
    assert calculate_week_status(make_week(0, 5), result) is WeekStatus.IGNORED
    assert calculate_week_statuses(result) == {}


def test_strict_mode_statuses(policy):
    """Test strict mode statuses follow each week's own result."""
    result = evaluate_strict(make_weeks([5, 2, 4]), policy)
    statuses = calculate_week_statuses(result)

    assert [statuses[monday(index)] for index in range(3)] == [
        WeekStatus.COMPLIANT,
        WeekStatus.INVALID,
        WeekStatus.COMPLIANT,
    ]
