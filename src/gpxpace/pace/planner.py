# gpxpace/pace/planner.py
"""
Per-kilometre pace plans for gpxpace

Given an enriched track and a goal, the track is cut into 1 km legs (the
last one takes the remainder). Each leg's net elevation change is read
off the interpolated profile at the leg boundaries, not summed from the
recorded points, so points that straddle a kilometre mark are split
correctly.

    leg_time_s = base_pace * distance_km + elevation_delta_m * sensitivity_factor
    pace_s_per_km = leg_time_s / distance_km

The base pace is either target_duration / total_km or a flat-terrain
reference pace. A positive target duration wins when both are given.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Union

from gpxpace.analyze.elevation import elevations_at
from gpxpace.analyze.outcome import Outcome
from gpxpace.analyze.track import TrackPoint
from gpxpace.config import GpxPaceConfig, load_config
from gpxpace.pace.parsing import parse_pace
from gpxpace.util.logging import log

LEG_M = 1000.0
MIN_TOTAL_KM = 0.001
PARTIAL_LEG_KM = 0.999


@dataclass(frozen=True)
class PaceGoal:
    """
    Either a target finish duration (seconds) or a flat-terrain pace.

    flat_pace accepts a pace string ("5:00") or a number of seconds per km.
    """
    target_duration_s: Optional[float] = None
    flat_pace: Optional[Union[str, float]] = None

    @classmethod
    def from_hms(cls, hours=0, minutes=0, seconds=0) -> "PaceGoal":
        """Target duration from three clock fields; blank or negative fields count as 0."""
        total = 0.0
        for value, scale in ((hours, 3600), (minutes, 60), (seconds, 1)):
            try:
                v = float(value or 0)
            except (TypeError, ValueError):
                v = 0.0
            if math.isfinite(v) and v > 0:
                total += v * scale
        return cls(target_duration_s=total)

    def base_pace(self, total_km: float) -> Optional[float]:
        """Seconds per km implied by this goal, or None if it does not resolve to one."""
        target = _positive(self.target_duration_s)
        if target is not None:
            return target / max(MIN_TOTAL_KM, total_km)

        if isinstance(self.flat_pace, (int, float)) and not isinstance(self.flat_pace, bool):
            return _positive(self.flat_pace)
        return _positive(parse_pace(self.flat_pace))


@dataclass(frozen=True)
class PaceLeg:
    index: int                  # 1-based
    start_m: float
    end_m: float
    distance_km: float
    elevation_delta_m: float
    pace_s_per_km: float
    leg_time_s: float
    cumulative_time_s: float
    is_partial: bool


@dataclass(frozen=True)
class PacePlan:
    outcome: Outcome
    legs: tuple[PaceLeg, ...] = ()
    total_time_s: float = 0.0
    total_distance_km: float = 0.0
    base_pace_s_per_km: Optional[float] = None
    sensitivity_factor: Optional[float] = None


def _positive(v) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) and f > 0 else None


def plan_pace(points: list[TrackPoint], goal: PaceGoal, sensitivity_factor: float) -> PacePlan:
    """
    Build a per-kilometre pace plan.

    Outcomes:
      - NO_DATA for an empty track
      - INSUFFICIENT_INPUT when the goal gives no positive base pace, or
        the sensitivity factor is not a finite number
      - OK otherwise
    """
    if not points:
        return PacePlan(outcome=Outcome.NO_DATA)

    try:
        factor = float(sensitivity_factor)
    except (TypeError, ValueError):
        factor = math.nan
    if not math.isfinite(factor):
        log(f"pace: sensitivity factor {sensitivity_factor!r} is not a number")
        return PacePlan(outcome=Outcome.INSUFFICIENT_INPUT)

    total_m = points[-1].cumulative_distance
    total_km = max(MIN_TOTAL_KM, total_m / 1000.0)

    base_pace = goal.base_pace(total_km) if goal is not None else None
    if base_pace is None:
        log("pace: no positive target duration or parseable flat pace supplied")
        return PacePlan(outcome=Outcome.INSUFFICIENT_INPUT, sensitivity_factor=factor)

    n_legs = math.ceil(total_m / LEG_M)
    bounds = []
    for k in range(n_legs):
        start = k * LEG_M
        end = min(start + LEG_M, total_m)
        if end > start:
            bounds.append((start, end))

    marks = [m for bound in bounds for m in bound]
    elevations = elevations_at(points, marks)

    legs = []
    elapsed = 0.0
    for i, (start, end) in enumerate(bounds):
        distance_km = (end - start) / 1000.0
        delta = elevations[2 * i + 1] - elevations[2 * i]
        leg_time = base_pace * distance_km + delta * factor
        elapsed += leg_time
        legs.append(PaceLeg(
            index=i + 1,
            start_m=start,
            end_m=end,
            distance_km=distance_km,
            elevation_delta_m=delta,
            pace_s_per_km=leg_time / distance_km,
            leg_time_s=leg_time,
            cumulative_time_s=elapsed,
            is_partial=distance_km < PARTIAL_LEG_KM,
        ))

    return PacePlan(
        outcome=Outcome.OK,
        legs=tuple(legs),
        total_time_s=sum(leg.leg_time_s for leg in legs),
        total_distance_km=sum(leg.distance_km for leg in legs),
        base_pace_s_per_km=base_pace,
        sensitivity_factor=factor,
    )


def plan_pace_with_preset(
    points: list[TrackPoint],
    goal: PaceGoal,
    preset: Optional[str] = None,
    config: Optional[GpxPaceConfig] = None,
) -> PacePlan:
    """
    plan_pace with the sensitivity factor looked up by preset name.

    preset=None uses the configured default preset. An unknown name raises
    UnknownPresetError, since preset names come from a fixed list.
    """
    cfg = config if config is not None else load_config()
    return plan_pace(points, goal, cfg.pace.factor_for(preset))
