"""Helpers for reading day-selection records supplied by the selection store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .errors import SelectionRecordError

logger = logging.getLogger(__name__)

WORK_FROM_HOME_TYPES = {
    "work-from-home",
    "work_from_home",
    "wfh",
    "out-of-office",
    "remote",
}

SELECTION_TYPE_KEYS = ("selectionType", "selection_type", "type")


class SelectionType(str, Enum):
    WORK_FROM_HOME = "work-from-home"
    NONE = "none"


@dataclass(frozen=True)
class DaySelection:
    year: int
    month: int  # 0-11
    day: int
    selection_type: SelectionType = SelectionType.NONE

    @property
    def date(self) -> date:
        return date(self.year, self.month + 1, self.day)

    @property
    def is_work_from_home(self) -> bool:
        return self.selection_type is SelectionType.WORK_FROM_HOME


SelectionInput = Union[DaySelection, Mapping[str, Any]]


def create_day_selection(
    year: int,
    month: int,
    day: int,
    selection_type: Union[SelectionType, str] = SelectionType.NONE,
) -> DaySelection:
    return DaySelection(year=year, month=month, day=day, selection_type=parse_selection_type(selection_type))


def parse_selection_type(value: Any) -> SelectionType:
    if isinstance(value, SelectionType):
        return value
    if str(value or "").strip().lower() in WORK_FROM_HOME_TYPES:
        return SelectionType.WORK_FROM_HOME
    return SelectionType.NONE


def get_field(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present value among ``keys``."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


def parse_selection(record: SelectionInput) -> DaySelection:
    """Build a validated ``DaySelection`` or raise ``SelectionRecordError``."""
    if isinstance(record, DaySelection):
        selection = record
    elif isinstance(record, Mapping):
        parts: Dict[str, int] = {}
        for key in ("year", "month", "day"):
            value = record.get(key)
            if value is None or value == "" or isinstance(value, bool):
                raise SelectionRecordError(record, f"missing {key}")
            try:
                parts[key] = int(value)
            except (TypeError, ValueError):
                raise SelectionRecordError(record, f"{key} is not an integer") from None
        selection = DaySelection(
            year=parts["year"],
            month=parts["month"],
            day=parts["day"],
            selection_type=parse_selection_type(get_field(record, *SELECTION_TYPE_KEYS)),
        )
    else:
        raise SelectionRecordError(record, "unsupported record type")

    try:
        date(selection.year, selection.month + 1, selection.day)
    except ValueError as exc:
        raise SelectionRecordError(record, str(exc)) from exc
    return selection


def normalize_selections(records: Optional[Iterable[SelectionInput]]) -> List[DaySelection]:
    """Parse selection records, skipping malformed ones.

    When the store holds several entries for the same calendar date the most
    recently produced one (the last in input order) wins. The returned list is
    ordered by date.
    """
    latest: Dict[date, DaySelection] = {}
    skipped = 0
    for record in records or []:
        try:
            selection = parse_selection(record)
        except SelectionRecordError as exc:
            skipped += 1
            logger.debug("Skipping selection record", extra={"error": str(exc)})
            continue
        latest[selection.date] = selection
    if skipped:
        logger.debug("Skipped malformed selection records", extra={"skipped": skipped})
    return [latest[key] for key in sorted(latest)]


def work_from_home_dates(selections: Iterable[DaySelection]) -> List[date]:
    return [selection.date for selection in selections if selection.is_work_from_home]
