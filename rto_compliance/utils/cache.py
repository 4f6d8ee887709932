"""Caller-owned memoization of per-week compliance records."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from .results import WeekCompliance

logger = logging.getLogger(__name__)

CacheKey = Tuple[date, str, int, FrozenSet[date], FrozenSet[date]]


class WeekComplianceCache:
    """Memoizes ``WeekCompliance`` records for one policy fingerprint at a time.

    Entries are keyed by week start, policy fingerprint, week number and the
    work-from-home and holiday dates falling inside that week, so edited
    selections never hit a stale entry. Binding a different fingerprint discards everything cached
    under the previous policy.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, WeekCompliance] = {}
        self._fingerprint: Optional[str] = None
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def fingerprint(self) -> Optional[str]:
        return self._fingerprint

    def bind(self, fingerprint: str) -> None:
        if self._fingerprint is not None and fingerprint != self._fingerprint:
            logger.debug(
                "Policy changed, resetting week cache",
                extra={"previous": self._fingerprint, "current": fingerprint, "entries": len(self._entries)},
            )
            self.reset()
        self._fingerprint = fingerprint

    def reset(self) -> None:
        self._entries.clear()
        self._fingerprint = None
        self.hits = 0
        self.misses = 0

    def get_or_compute(
        self,
        key: CacheKey,
        compute: Callable[[], WeekCompliance],
    ) -> WeekCompliance:
        self.bind(key[1])
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        result = compute()
        self._entries[key] = result
        return result
