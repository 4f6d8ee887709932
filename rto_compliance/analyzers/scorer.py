"""Aggregate validation outcomes into display-ready summaries."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Any, Dict, Mapping, Optional

from ..services.status_calculator import WeekStatus
from ..utils.results import ValidationResult


def summarize(
    result: ValidationResult,
    statuses: Optional[Mapping[date, WeekStatus]] = None,
) -> Dict[str, int]:
    counts: Dict[str, int] = defaultdict(int)
    counts["weeks"] = len(result.weeks)
    counts["weeks:evaluated"] = len(result.evaluated_week_starts)
    counts["weeks:individually_compliant"] = sum(1 for week in result.weeks if week.is_compliant)
    counts["windows"] = len(result.window_results)
    counts["windows:violating"] = len(result.violating_windows)
    counts["windows:compliant"] = len(result.compliant_windows)

    for status in (statuses or {}).values():
        counts[f"status:{status.value}"] += 1

    return dict(counts)


def compliance_summary(result: ValidationResult) -> Dict[str, Any]:
    return {
        "is_valid": result.is_valid,
        "compliance_percentage": f"{result.overall_compliance:.1f}%",
        "message": result.message,
        "weeks_evaluated": len(result.evaluated_week_starts),
        "mode": result.mode,
    }
