# gpxpace/pace/parsing.py
"""
Pace / duration strings.

Accepted pace inputs: "ss", "mm:ss" or "hh:mm:ss". Every token must be a
non-negative number; anything else is a parse failure (None), never an
exception.
"""

from __future__ import annotations

import math
from typing import Optional


def parse_pace(text) -> Optional[float]:
    """
    Parse a pace string into seconds.

        parse_pace("90")        -> 90.0
        parse_pace("1:30")      -> 90.0
        parse_pace("01:01:30")  -> 3690.0
        parse_pace("abc")       -> None
    """
    if text is None:
        return None
    s = str(text).strip()
    if not s:
        return None

    parts = s.split(":")
    if len(parts) > 3:
        return None

    total = 0.0
    for part in parts:
        part = part.strip()
        if not part:
            return None
        try:
            v = float(part)
        except ValueError:
            return None
        if not math.isfinite(v) or v < 0:
            return None
        total = total * 60 + v
    return total


def format_duration(seconds: float) -> str:
    """
    Render seconds as "mm:ss", or "h:mm:ss" from one hour up.

    Non-finite or non-positive values render as "--:--".
    """
    try:
        sec = float(seconds)
    except (TypeError, ValueError):
        return "--:--"
    if not math.isfinite(sec) or sec <= 0:
        return "--:--"
    s = int(round(sec))
    hh, rem = divmod(s, 3600)
    mm, ss = divmod(rem, 60)
    if hh > 0:
        return f"{hh}:{mm:02d}:{ss:02d}"
    return f"{mm:02d}:{ss:02d}"
