# gpxpace/analyze/track.py
"""
Track enrichment and summary functions for gpxpace
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from gpxpace.analyze.geodesic import distance
from gpxpace.formats.gpx import read_gpx_points
from gpxpace.util.logging import log


@dataclass(frozen=True)
class TrackPoint:
    """
    One recorded position with its derived fields.

    distance_from_previous / cumulative_distance are metres; gradient is
    rise over run (0.05 = 5 %) for the segment ending at this point.
    """
    lat: float
    lon: float
    elevation: float
    timestamp: Optional[dt.datetime] = None
    distance_from_previous: float = 0.0
    cumulative_distance: float = 0.0
    gradient: float = 0.0


def _field(raw: Any, *names: str) -> Any:
    """Read the first present attribute / mapping key out of `names`."""
    for name in names:
        if isinstance(raw, dict):
            if name in raw:
                return raw[name]
        elif hasattr(raw, name):
            return getattr(raw, name)
    return None


def _coord(v: Any, limit: float) -> Optional[float]:
    if isinstance(v, bool):
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f) or abs(f) > limit:
        return None
    return f


def _elevation(v: Any) -> float:
    if v is None or isinstance(v, bool):
        return 0.0
    try:
        f = float(v)
    except (TypeError, ValueError):
        return 0.0
    return f if math.isfinite(f) else 0.0


def enrich(raw_points: Iterable[Any]) -> list[TrackPoint]:
    """
    Turn raw points into TrackPoints with distance, cumulative distance and gradient.

    `raw_points` may hold RawPoint / TrackPoint objects or mappings with
    lat, lon and optional ele|elevation, time|timestamp keys.

    Returns a new list; the input is never modified. An empty input gives
    an empty list, and so does any point with a missing, non-numeric or
    out-of-range coordinate.
    """
    out: list[TrackPoint] = []
    prev: Optional[TrackPoint] = None

    for i, raw in enumerate(raw_points):
        lat = _coord(_field(raw, "lat"), 90.0)
        lon = _coord(_field(raw, "lon"), 180.0)
        if lat is None or lon is None:
            log(f"enrich: point {i} has an invalid coordinate; returning an empty track")
            return []

        ele = _elevation(_field(raw, "elevation", "ele"))
        ts = _field(raw, "timestamp", "time")

        if prev is None:
            point = TrackPoint(lat=lat, lon=lon, elevation=ele, timestamp=ts)
        else:
            d = distance((prev.lat, prev.lon), (lat, lon))
            point = TrackPoint(
                lat=lat,
                lon=lon,
                elevation=ele,
                timestamp=ts,
                distance_from_previous=d,
                cumulative_distance=prev.cumulative_distance + d,
                gradient=(ele - prev.elevation) / d if d > 0 else 0.0,
            )

        out.append(point)
        prev = point

    return out


def summarize_track(points: list[TrackPoint]) -> dict:
    """Return point/segment counts, distance, elevation stats and duration."""
    if not points:
        return {"points": 0, "segments": 0, "distance_m": 0.0}

    gain = 0.0
    loss = 0.0
    for p0, p1 in zip(points, points[1:]):
        delta = p1.elevation - p0.elevation
        if delta > 0:
            gain += delta
        else:
            loss -= delta

    elevations = [p.elevation for p in points]

    duration_s = None
    t0, t1 = points[0].timestamp, points[-1].timestamp
    if isinstance(t0, dt.datetime) and isinstance(t1, dt.datetime):
        duration_s = (t1 - t0).total_seconds()

    return {
        "points": len(points),
        "segments": len(points) - 1,
        "distance_m": points[-1].cumulative_distance,
        "elevation_gain_m": gain,
        "elevation_loss_m": loss,
        "min_elevation_m": min(elevations),
        "max_elevation_m": max(elevations),
        "duration_s": duration_s,
    }


def analyze_track(gpx_path: Path) -> dict:
    points = enrich(read_gpx_points(gpx_path))
    return summarize_track(points)
