# gpxpace/analyze/elevation.py
"""
Elevation lookup along a track by cumulative distance.

Used to sample elevation at exact kilometre marks regardless of where
the recorded points fall.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable

from gpxpace.analyze.track import TrackPoint


@dataclass(frozen=True)
class Checkpoint:
    distance_m: float
    elevation: float


def _interp(cum: list[float], ele: list[float], d: float) -> float:
    if math.isnan(d) or d <= cum[0]:
        return ele[0]
    if d >= cum[-1]:
        return ele[-1]

    # first i with cum[i] > d, so cum[i - 1] is the last point at or
    # before d and a hit on repeated distances lands on the later point
    i = bisect_right(cum, d)
    a, b = cum[i - 1], cum[i]
    ratio = (d - a) / (b - a)
    return ele[i - 1] + (ele[i] - ele[i - 1]) * ratio


def elevations_at(points: list[TrackPoint], distances: Iterable[float]) -> list[float]:
    """Elevation at each of `distances` (metres); the profile is extracted once."""
    distances = list(distances)
    if not points:
        return [0.0 for _ in distances]
    cum = [p.cumulative_distance for p in points]
    ele = [p.elevation for p in points]
    return [_interp(cum, ele, d) for d in distances]


def elevation_at(points: list[TrackPoint], distance_m: float) -> float:
    """
    Linearly interpolated elevation at `distance_m` along the track.

    Below 0 clamps to the first point, beyond the end to the last point.
    A zero-length bracketing segment returns the latter point's elevation.
    An empty track gives 0.0.
    """
    return elevations_at(points, [distance_m])[0]


def km_checkpoints(points: list[TrackPoint], step_m: float = 1000.0) -> list[Checkpoint]:
    """Elevation at 0, step, 2*step, ... and at the finish."""
    if not points or step_m <= 0:
        return []
    total = points[-1].cumulative_distance
    marks = []
    k = 0
    while k * step_m < total:
        marks.append(k * step_m)
        k += 1
    marks.append(total)
    return [Checkpoint(distance_m=d, elevation=e) for d, e in zip(marks, elevations_at(points, marks))]
