"""Custom exception classes for compliance validation errors."""

from __future__ import annotations


class ComplianceError(Exception):
    """Base exception for compliance validation failures."""

    def __init__(self, message: str, transient: bool = False):
        super().__init__(message)
        self.transient = transient


class SelectionRecordError(ComplianceError, ValueError):
    """Raised when a day-selection record cannot be interpreted."""

    def __init__(self, record: object, message: str):
        super().__init__(f"Malformed selection record {record!r}: {message}", transient=False)
        self.record = record


class HolidayFetchError(ComplianceError):
    """Raised when a holiday source fails to return data."""

    def __init__(self, country_code: str, year: int, message: str):
        super().__init__(
            f"Failed to fetch holidays for {country_code} {year}: {message}",
            transient=True,
        )
        self.country_code = country_code
        self.year = year


class UnsupportedModeError(ComplianceError, ValueError):
    """Raised when a validation mode name is not recognised."""

    def __init__(self, mode: str, supported: list[str]):
        super().__init__(
            f"Unsupported validation mode: {mode}. Supported modes are: {', '.join(supported)}",
            transient=False,
        )
        self.mode = mode
