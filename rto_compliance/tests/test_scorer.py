"""Tests for result summaries and structured logging helpers."""

import json
import logging

from rto_compliance.analyzers.scorer import compliance_summary, summarize
from rto_compliance.checks.windows import evaluate_average
from rto_compliance.clients.logging import JSONFormatter, log_validation
from rto_compliance.services.status_calculator import calculate_week_statuses
from rto_compliance.utils.timing import timed

from rto_compliance.tests.factories import make_weeks


def test_summarize_counts(policy):
    """Test summary counts for weeks, windows and statuses."""
    result = evaluate_average(make_weeks([5] * 12 + [1]), policy)
    summary = summarize(result, calculate_week_statuses(result))

    assert summary["weeks"] == 13
    assert summary["weeks:evaluated"] == 13
    assert summary["weeks:individually_compliant"] == 12
    assert summary["windows"] == 2
    assert summary["windows:compliant"] == 2
    assert summary["status:compliant"] == 12
    assert summary["status:invalid"] == 1
    assert "status:pending" not in summary


def test_compliance_summary(policy):
    """Test the display summary."""
    result = evaluate_average(make_weeks([3] * 12), policy)
    assert compliance_summary(result) == {
        "is_valid": True,
        "compliance_percentage": "60.0%",
        "message": result.message,
        "weeks_evaluated": 12,
        "mode": "average",
    }


def test_json_formatter_includes_extra_fields():
    """Test extra fields land in the JSON payload."""
    record = logging.LogRecord("rto", logging.INFO, __file__, 1, "Validation done", None, None)
    record.mode = "strict"
    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Validation done"
    assert payload["level"] == "INFO"
    assert payload["mode"] == "strict"


def test_log_validation_stage(caplog):
    """Test validation stage logging fields."""
    logger = logging.getLogger("rto_compliance.tests.logging")
    with caplog.at_level(logging.INFO, logger=logger.name):
        log_validation(logger, "average", False, 57.456, 13, 2, 4, {"status:invalid": 1})

    record = caplog.records[-1]
    assert record.stage == "validation"
    assert record.overall_compliance == 57.46
    assert record.status_breakdown == {"status:invalid": 1}


def test_timed_records_duration():
    """Test stage timing is recorded."""
    metrics = {}
    with timed("validation", metrics):
        pass
    assert metrics["duration_validation"] >= 0
