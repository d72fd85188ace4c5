# gpsdays/analyze/elevation.py
"""
Elevation profile: cumulative distance (km) against elevation (m)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from gpsdays.analyze.geo import distance


@dataclass(frozen=True)
class ElevationSample:
    distance_km: float
    elevation_m: float


def _usable(ele: Optional[float]) -> bool:
    return ele is not None and math.isfinite(ele)


def elevation_profile(points: Sequence) -> list[ElevationSample]:
    """
    One sample per point, the first at 0 km.

    A point with no usable elevation repeats the previous sample's value
    (the first point falls back to 0 m). No interpolation.
    """
    if not points:
        return []

    first = points[0].ele
    series = [ElevationSample(0.0, first if _usable(first) else 0.0)]
    cum_km = 0.0

    for p0, p1 in zip(points, points[1:]):
        cum_km += distance(p0, p1) / 1000
        ele = p1.ele if _usable(p1.ele) else series[-1].elevation_m
        series.append(ElevationSample(cum_km, ele))

    return series


def as_columns(series: Sequence[ElevationSample]) -> tuple[list[float], list[float]]:
    """(distances_km, elevations_m), the shape a chart wants."""
    return [s.distance_km for s in series], [s.elevation_m for s in series]
