# gpsdays/session.py
"""
TrackSession: the "current track" and everything derived from it.

At most one track is current. A run computes everything first and only
then replaces the previous artifacts, so a failed run (too few points,
missing end timestamps) leaves the previous track untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence

from gpsdays.analyze.elevation import ElevationSample, elevation_profile
from gpsdays.analyze.segment import Marker, SegmentationResult, segment_days
from gpsdays.errors import NoMarkersError
from gpsdays.formats.gpx import DEFAULT_CREATOR, export_markers, write_markers
from gpsdays.util.logging import log


class TrackSession:
    def __init__(self, *, creator: str = DEFAULT_CREATOR, verbose: bool = False) -> None:
        self.creator = creator
        self.verbose = verbose
        self.points: Sequence = ()
        self.result: Optional[SegmentationResult] = None
        self.markers: list[Marker] = []
        self.legend: list[tuple[float, float]] = []
        self.elevation: list[ElevationSample] = []

    def reset(self) -> None:
        """Forget the current track."""
        self.points = ()
        self.result = None
        self.markers = []
        self.legend = []
        self.elevation = []

    def run(self, points: Sequence, number_of_days: Any = None) -> SegmentationResult:
        """
        Segment `points` and make it the current track.

        Raises InsufficientDataError (and subclasses) before touching any state.
        """
        result = segment_days(points, number_of_days)
        elevation = elevation_profile(points)

        self.reset()
        self.points = points
        self.result = result
        self.markers = list(result.markers)
        self.legend = list(result.legend)
        self.elevation = elevation

        if self.verbose:
            log(
                f"Segmented {len(points)} point(s) into {len(self.markers)} slice(s); "
                f"speed {result.speed_range.min_mps:.2f}–{result.speed_range.max_mps:.2f} m/s"
            )
        return result

    @property
    def can_export(self) -> bool:
        return bool(self.markers)

    def export(self) -> bytes:
        if not self.can_export:
            raise NoMarkersError("no markers in the current run")
        return export_markers(self.markers, creator=self.creator)

    def export_to(self, out_path: Path) -> Path:
        if not self.can_export:
            raise NoMarkersError("no markers in the current run")
        write_markers(self.markers, out_path, creator=self.creator)
        if self.verbose:
            log(f"Wrote: {out_path}")
        return out_path
