# gpsdays/analyze/track.py
"""
Whole-track analysis functions for gpsdays
"""

from pathlib import Path

from gpsdays.analyze.segment import step_metrics
from gpsdays.formats.gpx import load_trackpoints


def compute_step_metrics(points):
    """Return per-step dt (s), distance (m), speed (m/s), skipping steps with no elapsed time."""
    dts = []
    ds = []
    vs = []

    for step in step_metrics(points):
        if step.duration_s <= 0:
            continue
        dts.append(step.duration_s)
        ds.append(step.distance_m)
        vs.append(step.distance_m / step.duration_s)

    return dts, ds, vs


def analyze_points(points):
    if len(points) < 2:
        return {"points": len(points), "segments": 0}

    dts, ds, vs = compute_step_metrics(points)

    return {
        "points": len(points),
        "segments": len(vs),
        "distance_m": sum(ds),
        "duration_s": sum(dts),
        "avg_speed_mps": (sum(ds) / sum(dts)) if sum(dts) else 0.0,
        "max_speed_mps": max(vs) if vs else 0.0,
    }


def analyze_track(gpx_path: Path):
    return analyze_points(load_trackpoints(gpx_path))
