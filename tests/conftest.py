from pathlib import Path
import pytest

from gpxpace.analyze.track import TrackPoint


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture
def profile_track():
    """Build TrackPoints straight from (cumulative_distance, elevation) pairs."""
    def build(profile):
        points = []
        prev = None
        for cum, ele in profile:
            d = cum - prev[0] if prev else 0.0
            grad = (ele - prev[1]) / d if prev and d > 0 else 0.0
            points.append(TrackPoint(
                lat=0.0, lon=0.0, elevation=float(ele),
                distance_from_previous=float(d),
                cumulative_distance=float(cum),
                gradient=grad,
            ))
            prev = (cum, ele)
        return points
    return build


@pytest.fixture(autouse=True)
def _clean_gpxpace_env(monkeypatch):
    monkeypatch.delenv("GPXPACE_INTERVAL_M", raising=False)
    monkeypatch.delenv("GPXPACE_SENSITIVITY_PRESET", raising=False)
