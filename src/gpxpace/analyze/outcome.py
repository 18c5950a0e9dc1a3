# gpxpace/analyze/outcome.py
from __future__ import annotations

from enum import Enum


class Outcome(str, Enum):
    """How an analytics request resolved. Callers branch on this, not on exceptions."""

    OK = "ok"
    NO_DATA = "no_data"                        # valid request, nothing to compute on
    INSUFFICIENT_INPUT = "insufficient_input"  # request itself is unusable
