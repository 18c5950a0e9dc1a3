# gpxpace/formats/gpx.py
"""
GPX helpers for gpxpace

This module is intentionally format-focused:
- namespace-agnostic <trkpt> lookup (GPX 1.0, 1.1, or no namespace)
- safely reading XML text or files
- turning trackpoints into RawPoint tuples (lat, lon, elevation, timestamp)

Key design principle:
  Nothing here computes distances or gradients. The analytics core
  (gpxpace.analyze.track.enrich) starts where this module stops.
"""

from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from gpxpace.errors import InvalidGpxError
from gpxpace.util.logging import log


@dataclass(frozen=True)
class RawPoint:
    """One extracted trackpoint, before any derived fields exist."""
    lat: float
    lon: float
    elevation: float = 0.0
    timestamp: Optional[_dt.datetime] = None


def _local(tag: str) -> str:
    """
    Strip the namespace from an ElementTree tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return tag.rsplit("}", 1)[-1]


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    """Text of the first direct child named `name` (any namespace), if any."""
    for child in elem:
        if _local(child.tag) == name:
            return child.text or ""
    return None


def _parse_gpx_time(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    # GPX times commonly use Z for UTC.
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Ensure tz-aware; if naive, assume UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def _parse_float(text: Optional[str]) -> Optional[float]:
    if text is None:
        return None
    try:
        v = float(text.strip())
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def parse_gpx_root(xml_text: str | bytes) -> ET.Element:
    """
    Parse GPX text into its root element.

    Raises:
      InvalidGpxError if the text is not well-formed XML or is not <gpx>.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise InvalidGpxError(f"GPX payload is not well-formed XML ({e})") from e
    if _local(root.tag) != "gpx":
        raise InvalidGpxError(f"Expected <gpx> root element, found <{_local(root.tag)}>")
    return root


def extract_raw_points(root: ET.Element) -> list[RawPoint]:
    """
    Extract ordered trackpoints from a GPX root.

    - lat/lon attributes are required; points without usable ones are skipped
    - missing or unparseable <ele> gives elevation 0.0
    - <time> is optional
    """
    pts: list[RawPoint] = []
    skipped = 0

    for trkpt in root.iter():
        if _local(trkpt.tag) != "trkpt":
            continue

        lat = _parse_float(trkpt.get("lat"))
        lon = _parse_float(trkpt.get("lon"))
        if lat is None or lon is None:
            skipped += 1
            continue

        ele = _parse_float(_child_text(trkpt, "ele"))
        t = _child_text(trkpt, "time")

        pts.append(RawPoint(
            lat=lat,
            lon=lon,
            elevation=ele if ele is not None else 0.0,
            timestamp=_parse_gpx_time(t) if t else None,
        ))

    if skipped:
        log(f"gpx: skipped {skipped} trackpoint(s) without numeric lat/lon")

    return pts


def parse_gpx_text(xml_text: str | bytes) -> list[RawPoint]:
    """Parse a GPX payload (text) into ordered RawPoints."""
    return extract_raw_points(parse_gpx_root(xml_text))


def read_gpx_points(path: Path) -> list[RawPoint]:
    """
    Read a GPX file into ordered RawPoints.

    Raises:
      InvalidGpxError, OSError
    """
    return parse_gpx_text(Path(path).read_bytes())
