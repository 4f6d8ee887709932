"""Structured logging utilities."""

import json
import logging
from typing import Any, Dict, Optional

RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with JSON formatting configured."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def log_holiday_fetch(
    logger: logging.Logger,
    country_code: str,
    years: list,
    holiday_count: int,
    duration_ms: int,
    company_name: Optional[str] = None,
) -> None:
    """Log holiday fetch stage."""
    extra: Dict[str, Any] = {
        "stage": "holiday_fetch",
        "country_code": country_code,
        "years": years,
        "holiday_count": holiday_count,
        "duration_ms": duration_ms,
    }
    if company_name:
        extra["company_name"] = company_name
    logger.info("Holidays fetched", extra=extra)


def log_validation(
    logger: logging.Logger,
    mode: str,
    is_valid: bool,
    overall_compliance: float,
    week_count: int,
    window_count: int,
    duration_ms: int,
    status_breakdown: Optional[Dict[str, int]] = None,
) -> None:
    """Log validation stage."""
    extra: Dict[str, Any] = {
        "stage": "validation",
        "mode": mode,
        "is_valid": is_valid,
        "overall_compliance": round(overall_compliance, 2),
        "week_count": week_count,
        "window_count": window_count,
        "duration_ms": duration_ms,
    }
    if status_breakdown:
        extra["status_breakdown"] = status_breakdown
    logger.info(f"Validation in {mode} mode completed", extra=extra)


def log_cache(
    logger: logging.Logger,
    fingerprint: Optional[str],
    entries: int,
    hits: int,
    misses: int,
    level: int = logging.DEBUG,
) -> None:
    """Log week cache usage."""
    logger.log(
        level,
        "Week cache state",
        extra={
            "stage": "cache",
            "policy_fingerprint": fingerprint,
            "entries": entries,
            "hits": hits,
            "misses": misses,
        },
    )
