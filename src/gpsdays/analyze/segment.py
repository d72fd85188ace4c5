# gpsdays/analyze/segment.py
"""
Day segmentation for gpsdays

A trace is cut into time slices ("days"). `number_of_days` may be
fractional: with 2.5 days the first slice is half a nominal slice long and
every later slice is a full one, so the remaining boundaries fall on whole
multiples of the nominal slice counted back from the end.

Per run this produces:
  - one ColouredSegment per step between consecutive points, classified by speed
  - one Marker per slice, labelled "<km> km, <hours> h"
  - the SpeedRange and legend breakpoints that drive the colour scale

All mutable state (Bucket, next threshold, marker list) lives inside one
call to `segment_days`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from gpsdays.analyze.geo import distance
from gpsdays.analyze.speed import SpeedCategory, SpeedRange, classify, legend_breakpoints
from gpsdays.errors import InsufficientDataError, MissingTimestampError

# A threshold this close to the trace end is the end (float slack in first + k * length)
END_TOLERANCE_S = 1e-3

# A point this close below a threshold sits on it (float slack, well under 1 us)
BOUNDARY_SLACK_S = 1e-7


@dataclass(frozen=True)
class Step:
    """Metrics between two consecutive points."""
    distance_m: float
    duration_s: float

    @property
    def speed_mps(self) -> float:
        # Duration floored at 1 s so coincident timestamps never divide by zero
        return self.distance_m / max(1.0, self.duration_s)


@dataclass(frozen=True)
class Marker:
    lat: float
    lon: float
    label: str
    distance_m: float = 0.0
    duration_s: float = 0.0


@dataclass(frozen=True)
class ColouredSegment:
    start: int
    end: int
    category: SpeedCategory
    speed_mps: float

    @property
    def colour(self) -> str:
        return self.category.colour


@dataclass
class Bucket:
    """Distance/time accumulated inside the slice that is still open."""
    distance_m: float = 0.0
    duration_s: float = 0.0

    def add(self, step: Step) -> None:
        self.distance_m += step.distance_m
        self.duration_s += step.duration_s

    def reset(self) -> None:
        self.distance_m = 0.0
        self.duration_s = 0.0

    def label(self) -> str:
        return format_label(self.distance_m, self.duration_s)

    def flush(self, lat: float, lon: float) -> Marker:
        m = Marker(lat=lat, lon=lon, label=self.label(),
                   distance_m=self.distance_m, duration_s=self.duration_s)
        self.reset()
        return m


@dataclass(frozen=True)
class SegmentationResult:
    segments: list[ColouredSegment]
    markers: list[Marker]
    speed_range: SpeedRange
    legend: list[tuple[float, float]] = field(default_factory=list)


@dataclass(frozen=True)
class SliceSchedule:
    """
    Slice thresholds for one run, as seconds since the first point.

    Threshold k (k = 0, 1, ...) is first + k * length. `length` of None
    means the whole trace is one slice.
    """
    total: float
    first: float
    length: Optional[float]

    def threshold(self, k: int) -> float:
        if self.length is None:
            return math.inf
        return self.first + k * self.length

    def interior(self, offset: float) -> bool:
        """True for thresholds that close a slice before the trace ends."""
        return offset < self.total - END_TOLERANCE_S


def format_label(distance_m: float, duration_s: float) -> str:
    return f"{distance_m / 1000:.1f} km, {duration_s / 3600:.1f} h"


def parse_days(value: Any) -> float:
    """
    Lenient "number of days" coercion.

    Returns a positive finite float, or NaN for anything unusable (None,
    blank, non-numeric, non-finite, zero, negative).
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return math.nan
    try:
        days = float(value)
    except (TypeError, ValueError):
        return math.nan
    if not math.isfinite(days) or days <= 0:
        return math.nan
    return days


def _seconds_between(t0, t1) -> Optional[float]:
    """Exact to the microsecond; None when either time is missing."""
    if t0 is None or t1 is None:
        return None
    return (t1 - t0).total_seconds()


def step_metrics(points: Sequence) -> list[Step]:
    """
    One Step per consecutive pair. A step touching a point without a
    timestamp (or going backwards in time) has zero duration.
    """
    steps: list[Step] = []
    for p0, p1 in zip(points, points[1:]):
        dt_s = _seconds_between(p0.time, p1.time) or 0.0
        steps.append(Step(distance_m=distance(p0, p1), duration_s=max(0.0, dt_s)))
    return steps


def slice_schedule(total_s: float, number_of_days: Any) -> SliceSchedule:
    """
    Invalid days, or a trace with no duration, give a single slice.
    A whole number of days never shortens the first slice.
    """
    days = parse_days(number_of_days)

    if math.isnan(days) or total_s <= 0:
        return SliceSchedule(total=total_s, first=total_s, length=None)

    length = total_s / days
    frac = days - math.floor(days)
    first = frac * length if frac > 0 else length
    return SliceSchedule(total=total_s, first=first, length=length)


def segment_days(points: Sequence, number_of_days: Any = None) -> SegmentationResult:
    """
    Walk the trace once, colouring each step and emitting a Marker per slice.

    Raises:
      InsufficientDataError  fewer than two points
      MissingTimestampError  first or last point has no time
    """
    if len(points) < 2:
        raise InsufficientDataError(f"need at least 2 points, got {len(points)}")

    base = points[0].time
    total_s = _seconds_between(base, points[-1].time)
    if total_s is None:
        raise MissingTimestampError("first and last points must carry a timestamp")

    schedule = slice_schedule(total_s, number_of_days)
    steps = step_metrics(points)
    speed_range = SpeedRange.of([s.speed_mps for s in steps])

    segments: list[ColouredSegment] = []
    markers: list[Marker] = []
    bucket = Bucket()
    k = 0
    next_t = schedule.threshold(k)

    for i, step in enumerate(steps, start=1):
        prev, curr = points[i - 1], points[i]
        bucket.add(step)
        segments.append(ColouredSegment(
            start=i - 1,
            end=i,
            category=classify(step.speed_mps, speed_range.min_mps, speed_range.max_mps),
            speed_mps=step.speed_mps,
        ))

        offset = _seconds_between(base, curr.time)
        if offset is None:
            continue

        # One marker per crossed threshold; a long gap can cross several
        while offset >= next_t - BOUNDARY_SLACK_S and schedule.interior(next_t):
            markers.append(bucket.flush(prev.lat, prev.lon))
            k += 1
            next_t = schedule.threshold(k)

    # The slice that closes at the trace end
    last = points[-1]
    markers.append(bucket.flush(last.lat, last.lon))

    return SegmentationResult(
        segments=segments,
        markers=markers,
        speed_range=speed_range,
        legend=legend_breakpoints(speed_range.min_mps, speed_range.max_mps),
    )
