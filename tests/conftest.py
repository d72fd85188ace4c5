import datetime as dt
from pathlib import Path

import pytest

from gpsdays.formats.gpx import TrackPoint

T0 = dt.datetime(2025, 6, 1, tzinfo=dt.timezone.utc)


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture
def make_points():
    """Build TrackPoints from (lat, lon, seconds_since_T0[, ele]) tuples."""
    def _make(rows):
        pts = []
        for row in rows:
            lat, lon, secs = row[:3]
            ele = row[3] if len(row) > 3 else None
            time = None if secs is None else T0 + dt.timedelta(seconds=secs)
            pts.append(TrackPoint(lat=lat, lon=lon, time=time, ele=ele))
        return pts
    return _make
