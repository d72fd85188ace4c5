import importlib

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt

import gpsdays.visualize.plot as plot_mod
from gpsdays.analyze.elevation import elevation_profile
from gpsdays.analyze.segment import segment_days
from gpsdays.visualize.plot import plot_elevation, plot_track


def test_plot_track_writes_png(make_points, tmp_path):
    pts = make_points([(0, i * 0.01, i * 3600 + (i % 2) * 900) for i in range(6)])
    result = segment_days(pts, 2)

    out = plot_track(pts, result, tmp_path / "track.png")
    assert out.is_file() and out.stat().st_size > 0


def test_saving_closes_the_figure(make_points, tmp_path):
    pts = make_points([(0, 0, 0), (0, 0.01, 3600)])
    before = set(plt.get_fignums())
    plot_elevation(elevation_profile(pts), tmp_path / "elevation.png")
    assert set(plt.get_fignums()) == before


def test_plot_track_legend_and_segments(make_points):
    pts = make_points([(0, 0, 0), (0, 0.01, 3600), (0, 0.03, 7200)])
    fig = plot_track(pts, segment_days(pts, 1))
    ax = fig.axes[0]

    labels = [t.get_text() for t in ax.get_legend().get_texts()]
    assert len(labels) == 6
    assert all(label.endswith("m/s") for label in labels)
    assert len(ax.collections[0].get_segments()) == 2
    plt.close(fig)


def test_plot_elevation_axes(make_points):
    pts = make_points([(0, i * 0.01, i * 60, 100.0 + i) for i in range(4)])
    fig = plot_elevation(elevation_profile(pts))
    ax = fig.axes[0]

    assert ax.get_xlabel() == "Distance (km)"
    assert ax.get_ylabel() == "Elevation (m)"
    assert list(ax.lines[0].get_ydata()) == [100.0, 101.0, 102.0, 103.0]
    plt.close(fig)


def test_importing_plot_leaves_backend_alone(monkeypatch):
    calls = []
    monkeypatch.setattr(matplotlib, "use", lambda *a, **kw: calls.append(a))

    importlib.reload(plot_mod)
    assert calls == []
