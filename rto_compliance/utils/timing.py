"""Timing utilities for validation stages."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict


@contextmanager
def timed(stage: str, metrics: Dict[str, int]):
    start = time.perf_counter()
    try:
        yield
    finally:
        metrics[f"duration_{stage}"] = int((time.perf_counter() - start) * 1000)
