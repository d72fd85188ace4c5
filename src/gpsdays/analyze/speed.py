# gpsdays/analyze/speed.py
"""
Speed classification for gpsdays

Speeds are bucketed into a closed, ordered set of colour categories
(slowest to fastest). The scale is linear between the slowest and fastest
step of the current run.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

# Guards a zero-width range in the normalisation
EPSILON = 1e-9


class SpeedCategory(IntEnum):
    PURPLE = 0
    BLUE = 1
    GREEN = 2
    YELLOW = 3
    ORANGE = 4
    RED = 5

    @property
    def colour(self) -> str:
        return COLOURS[self]


COLOURS: dict[SpeedCategory, str] = {
    SpeedCategory.PURPLE: "purple",
    SpeedCategory.BLUE: "blue",
    SpeedCategory.GREEN: "green",
    SpeedCategory.YELLOW: "yellow",
    SpeedCategory.ORANGE: "orange",
    SpeedCategory.RED: "red",
}

N_CATEGORIES = len(SpeedCategory)


@dataclass(frozen=True)
class SpeedRange:
    """Slowest and fastest step speed (m/s) of one segmentation run."""
    min_mps: float
    max_mps: float

    @classmethod
    def of(cls, speeds: list[float]) -> "SpeedRange":
        return cls(min_mps=min(speeds), max_mps=max(speeds))


def classify(speed: float, min_mps: float, max_mps: float) -> SpeedCategory:
    """
    Map `speed` onto a SpeedCategory.

    floor((speed - min) / (max - min + eps) * N), clamped into [0, N-1].
    A degenerate range (max <= min) or non-finite input is always the
    slowest category.
    """
    if not (math.isfinite(speed) and math.isfinite(min_mps) and math.isfinite(max_mps)):
        return SpeedCategory.PURPLE
    if max_mps <= min_mps:
        return SpeedCategory.PURPLE

    norm = (speed - min_mps) / (max_mps - min_mps + EPSILON)
    idx = math.floor(norm * N_CATEGORIES)
    return SpeedCategory(min(N_CATEGORIES - 1, max(0, idx)))


def colour_for(speed: float, min_mps: float, max_mps: float) -> str:
    return classify(speed, min_mps, max_mps).colour


def legend_breakpoints(min_mps: float, max_mps: float) -> list[tuple[float, float]]:
    """
    N equal [low, high] steps covering [min, max], rounded to one decimal.

    A zero-width range uses a step of 1/N m/s so the legend still reads.
    """
    step = ((max_mps - min_mps) or 1.0) / N_CATEGORIES
    return [
        (round(min_mps + i * step, 1), round(min_mps + (i + 1) * step, 1))
        for i in range(N_CATEGORIES)
    ]


def legend_entries(min_mps: float, max_mps: float) -> list[tuple[str, str]]:
    """(colour, "a–b m/s") pairs for display."""
    return [
        (cat.colour, f"{lo:.1f}–{hi:.1f} m/s")
        for cat, (lo, hi) in zip(SpeedCategory, legend_breakpoints(min_mps, max_mps))
    ]
