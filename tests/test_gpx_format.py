import datetime as dt
import pytest

from gpxpace.errors import GpxPaceError, InvalidGpxError
from gpxpace.formats.gpx import RawPoint, parse_gpx_text, read_gpx_points


def test_read_sample_gpx(sample_gpx_path):
    points = read_gpx_points(sample_gpx_path)

    assert len(points) == 11
    assert points[0] == RawPoint(
        lat=45.0,
        lon=7.0,
        elevation=100.0,
        timestamp=dt.datetime(2026, 5, 1, 8, 0, tzinfo=dt.timezone.utc),
    )
    assert points[-1].elevation == 110.0


def test_gpx_without_namespace_and_optional_children():
    text = """<gpx version="1.0">
      <trk><trkseg>
        <trkpt lat="10.5" lon="-3.25"/>
        <trkpt lat="10.6" lon="-3.25"><ele>42</ele><time>garbage</time></trkpt>
        <trkpt lat="10.7" lon="-3.25"><time>2026-01-02T21:14:44.123+02:00</time></trkpt>
      </trkseg></trk>
    </gpx>"""
    points = parse_gpx_text(text)

    assert [p.elevation for p in points] == [0.0, 42.0, 0.0]
    assert points[0].timestamp is None
    assert points[1].timestamp is None
    assert points[2].timestamp == dt.datetime(2026, 1, 2, 19, 14, 44, 123000, tzinfo=dt.timezone.utc)


def test_trackpoints_without_numeric_coordinates_are_skipped():
    text = """<gpx xmlns="http://www.topografix.com/GPX/1/1"><trk><trkseg>
        <trkpt lat="1.0" lon="2.0"/>
        <trkpt lat="abc" lon="2.0"/>
        <trkpt lon="2.0"/>
        <trkpt lat="1.1" lon="2.0"/>
    </trkseg></trk></gpx>"""
    points = parse_gpx_text(text)
    assert [p.lat for p in points] == [1.0, 1.1]


def test_empty_gpx_gives_no_points():
    assert parse_gpx_text("<gpx/>") == []


@pytest.mark.parametrize("text", ["<gpx><trk>", "not xml at all", "<kml/>"])
def test_malformed_payload_raises(text):
    with pytest.raises(InvalidGpxError):
        parse_gpx_text(text)


def test_invalid_gpx_is_a_gpxpace_error():
    assert issubclass(InvalidGpxError, GpxPaceError)
