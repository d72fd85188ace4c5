import pytest

from gpsdays.analyze.speed import (
    N_CATEGORIES,
    SpeedCategory,
    SpeedRange,
    classify,
    colour_for,
    legend_breakpoints,
    legend_entries,
)


def test_palette_is_ordered_slowest_to_fastest():
    assert [c.colour for c in SpeedCategory] == ["purple", "blue", "green", "yellow", "orange", "red"]
    assert N_CATEGORIES == 6


@pytest.mark.parametrize(
    "speed, expected",
    [
        (0.0, SpeedCategory.PURPLE),
        (1.0, SpeedCategory.PURPLE),
        (2.0, SpeedCategory.BLUE),
        (5.5, SpeedCategory.YELLOW),
        (9.0, SpeedCategory.RED),
        (10.0, SpeedCategory.RED),
    ],
)
def test_classify_linear_scale(speed, expected):
    assert classify(speed, 0.0, 10.0) is expected


def test_classify_range_ends():
    for lo, hi in [(0.0, 1.0), (0.3, 0.31), (2.0, 50.0), (1e-6, 1e6)]:
        assert classify(lo, lo, hi) == 0
        assert classify(hi, lo, hi) == N_CATEGORIES - 1


def test_classify_clamps_outside_range():
    assert classify(-5.0, 0.0, 10.0) is SpeedCategory.PURPLE
    assert classify(50.0, 0.0, 10.0) is SpeedCategory.RED


@pytest.mark.parametrize("speed", [0.0, 3.0, 3.0000001, 100.0])
def test_classify_degenerate_range_is_lowest(speed):
    assert classify(speed, 3.0, 3.0) is SpeedCategory.PURPLE


def test_classify_nan_is_lowest():
    assert classify(float("nan"), 0.0, 10.0) is SpeedCategory.PURPLE


def test_colour_for():
    assert colour_for(10.0, 0.0, 10.0) == "red"


def test_legend_breakpoints_even_steps():
    assert legend_breakpoints(0.0, 6.0) == [
        (0.0, 1.0), (1.0, 2.0), (2.0, 3.0), (3.0, 4.0), (4.0, 5.0), (5.0, 6.0),
    ]


def test_legend_breakpoints_rounded_to_one_decimal():
    bps = legend_breakpoints(0.123, 1.456)
    assert len(bps) == N_CATEGORIES
    assert bps[0][0] == 0.1
    assert bps[-1][1] == 1.5
    for lo, hi in bps:
        assert round(lo, 1) == lo and round(hi, 1) == hi


def test_legend_breakpoints_zero_width_range():
    bps = legend_breakpoints(2.0, 2.0)
    assert len(bps) == N_CATEGORIES
    assert bps[0][0] == 2.0
    assert bps[-1][1] == 3.0


def test_legend_entries_text():
    entries = legend_entries(0.0, 6.0)
    assert entries[0] == ("purple", "0.0–1.0 m/s")
    assert entries[-1] == ("red", "5.0–6.0 m/s")


def test_speed_range_of():
    rng = SpeedRange.of([3.0, 1.0, 2.0])
    assert (rng.min_mps, rng.max_mps) == (1.0, 3.0)
