# gpsdays/analyze/geo.py
"""
Great-circle geometry for gpsdays
"""

from haversine import haversine, Unit

# Spherical Earth, metres
EARTH_RADIUS_M = 6_371_000.0


def distance(a, b) -> float:
    """
    Haversine distance in metres between two objects with `lat`/`lon` (degrees).

    Range checks are off: out-of-range coordinates give a meaningless number,
    NaN gives NaN. Validation belongs to whoever parsed the points.
    """
    rad = haversine((a.lat, a.lon), (b.lat, b.lon), unit=Unit.RADIANS, check=False)
    return rad * EARTH_RADIUS_M
