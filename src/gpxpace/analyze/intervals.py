# gpxpace/analyze/intervals.py
"""
Gradient-by-distance tables for gpxpace

A track is cut into fixed-width windows of cumulative distance
[k*interval, min((k+1)*interval, total)) and each window gets the
distance-weighted mean of the gradients of the segments overlapping it.
A segment straddling a window boundary contributes to both windows in
proportion to its overlap.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from gpxpace.analyze.outcome import Outcome
from gpxpace.analyze.track import TrackPoint
from gpxpace.util.logging import log


@dataclass(frozen=True)
class IntervalRow:
    from_m: float
    to_m: float
    distance_m: float          # length actually covered inside [from_m, to_m]
    average_gradient: float    # rise/run, distance-weighted


@dataclass(frozen=True)
class IntervalTable:
    outcome: Outcome
    interval_m: float
    rows: tuple[IntervalRow, ...] = ()

    def __iter__(self) -> Iterator[IntervalRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, i):
        return self.rows[i]


def aggregate_by_distance(points: list[TrackPoint], interval_m: float) -> IntervalTable:
    """
    Partition `points` by cumulative distance and average gradient per window.

    Outcomes:
      - INSUFFICIENT_INPUT when interval_m is not a positive finite number
      - NO_DATA with no rows when there are fewer than 2 points
      - OK otherwise (one row per window whose start is below total distance)

    Single pass over the segments; windows are only visited where a
    segment overlaps them.
    """
    try:
        interval = math.nan if isinstance(interval_m, bool) else float(interval_m)
    except (TypeError, ValueError):
        interval = math.nan
    if not math.isfinite(interval) or interval <= 0:
        log(f"aggregate: interval {interval_m!r} is not a positive width")
        return IntervalTable(outcome=Outcome.INSUFFICIENT_INPUT, interval_m=interval)

    if len(points) < 2:
        return IntervalTable(outcome=Outcome.NO_DATA, interval_m=interval)

    total = points[-1].cumulative_distance

    # Window starts are k * interval, computed by multiplication so no
    # floating drift can add a phantom trailing window.
    n_windows = 0
    while n_windows * interval < total:
        n_windows += 1

    weighted = [0.0] * n_windows
    covered = [0.0] * n_windows

    for p0, p1 in zip(points, points[1:]):
        a = p0.cumulative_distance
        b = p1.cumulative_distance
        if b <= a:
            continue
        k = min(int(a // interval), n_windows - 1)
        while k < n_windows and k * interval < b:
            start = k * interval
            end = min((k + 1) * interval, total)
            overlap = min(b, end) - max(a, start)
            if overlap > 0:
                weighted[k] += p1.gradient * overlap
                covered[k] += overlap
            k += 1

    rows = []
    for k in range(n_windows):
        start = k * interval
        end = min((k + 1) * interval, total)
        avg = weighted[k] / covered[k] if covered[k] > 0 else 0.0
        rows.append(IntervalRow(from_m=start, to_m=end, distance_m=covered[k], average_gradient=avg))

    return IntervalTable(outcome=Outcome.OK, interval_m=interval, rows=tuple(rows))
