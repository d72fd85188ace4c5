# gpsdays/visualize/plot.py
"""
Plotting routines for gpsdays
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.lines import Line2D

from gpsdays.analyze.elevation import ElevationSample, as_columns
from gpsdays.analyze.segment import SegmentationResult
from gpsdays.analyze.speed import legend_entries


def _finish(fig, out_path: Optional[Path]):
    """Save and close, or hand the open figure back (the caller closes it)."""
    if out_path is None:
        return fig
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    return out_path


def plot_track(points: Sequence, result: SegmentationResult, out_path: Optional[Path] = None):
    """Track coloured by speed category, with one annotated dot per slice marker."""
    fig, ax = plt.subplots(figsize=(8, 6))

    lines = [
        [(points[s.start].lon, points[s.start].lat), (points[s.end].lon, points[s.end].lat)]
        for s in result.segments
    ]
    colours = [s.colour for s in result.segments]
    ax.add_collection(LineCollection(lines, colors=colours, linewidths=2.5))

    for m in result.markers:
        ax.plot(m.lon, m.lat, marker="o", color="black", markersize=5)
        ax.annotate(m.label, (m.lon, m.lat), xytext=(4, 4), textcoords="offset points", fontsize=8)

    rng = result.speed_range
    handles = [
        Line2D([0], [0], color=colour, lw=4, label=text)
        for colour, text in legend_entries(rng.min_mps, rng.max_mps)
    ]
    ax.legend(handles=handles, loc="lower right", fontsize=8)

    ax.autoscale()
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title("Track coloured by speed")
    return _finish(fig, out_path)


def plot_elevation(series: Sequence[ElevationSample], out_path: Optional[Path] = None):
    km, ele = as_columns(series)

    fig, ax = plt.subplots(figsize=(8, 3))
    ax.plot(km, ele, color="brown")
    ax.set_xlabel("Distance (km)")
    ax.set_ylabel("Elevation (m)")
    return _finish(fig, out_path)
