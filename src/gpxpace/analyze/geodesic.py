# gpxpace/analyze/geodesic.py
"""
Great-circle distance for gpxpace

Every distance in the package goes through `distance()`.
"""

from __future__ import annotations

from haversine import haversine, Unit

# Mean Earth radius used for all track distances (m)
EARTH_RADIUS_M = 6_371_000.0


def distance(a, b) -> float:
    """
    Haversine distance in metres between two points.

    `a` and `b` are anything with `.lat` and `.lon` in degrees (RawPoint,
    TrackPoint) or plain (lat, lon) tuples.

    Coordinates are not validated here: NaN in gives NaN out, and callers
    are expected to have rejected bad input already (see track.enrich).
    """
    # Central angle from the haversine package, scaled by our own radius
    # (the package's default radius is 6371.0088 km).
    angle = haversine(_latlon(a), _latlon(b), unit=Unit.RADIANS, check=False)
    return EARTH_RADIUS_M * angle


def _latlon(p) -> tuple[float, float]:
    if isinstance(p, tuple):
        return p
    return (p.lat, p.lon)
