from pathlib import Path
from types import SimpleNamespace

import pytest

import gpsdays.analyze.gpx_days as gd
from gpsdays.formats.gpx import parse_waypoints


@pytest.fixture
def fake_config(tmp_path, monkeypatch):
    cfg = SimpleNamespace(
        output_root=tmp_path / "days",
        segment=SimpleNamespace(days=None),
        export=SimpleNamespace(creator="GPX visualiser", filename="markers.gpx"),
        source={"segment.days": "default"},
    )
    monkeypatch.setattr(gd, "load_config", lambda: cfg)
    return cfg


def test_main_exports_markers(sample_gpx_path, fake_config, capsys):
    rc = gd.main([str(sample_gpx_path), "--days", "2", "--export"])
    assert rc == 0

    out = capsys.readouterr().out
    assert "slice 1" in out and "slice 2" in out
    assert "2.2 km, 2.0 h" in out

    exported = fake_config.output_root / "sample_markers.gpx"
    labels = [m.label for m in parse_waypoints(exported.read_bytes())]
    assert labels == ["2.2 km, 2.0 h", "2.2 km, 2.0 h"]


def test_main_blank_days_is_whole_trace(sample_gpx_path, fake_config, capsys):
    rc = gd.main([str(sample_gpx_path), "--days", " ", "--tsv"])
    assert rc == 0

    rows = capsys.readouterr().out.strip().splitlines()
    assert rows[0].startswith("file\tslice")
    assert len(rows) == 2
    assert rows[1].endswith("4.4 km, 4.0 h")


def test_main_uses_configured_days(sample_gpx_path, fake_config, capsys):
    fake_config.segment.days = 4
    assert gd.main([str(sample_gpx_path), "--tsv"]) == 0
    assert len(capsys.readouterr().out.strip().splitlines()) == 1 + 4


def test_main_reports_failures(tmp_path, sample_gpx_path, fake_config, capsys):
    short = tmp_path / "short.gpx"
    short.write_text('<gpx><trk><trkseg><trkpt lat="0" lon="0"/></trkseg></trk></gpx>', encoding="utf-8")

    rc = gd.main([str(tmp_path / "missing.gpx"), str(short), str(sample_gpx_path)])
    assert rc == 2

    captured = capsys.readouterr()
    assert "Skipping (not a file)" in captured.err
    assert "at least 2 points" in captured.err
    assert str(sample_gpx_path) in captured.out


def test_main_writes_plots(sample_gpx_path, fake_config):
    rc = gd.main([str(sample_gpx_path), "--days", "2.5", "--plot", "--elevation-plot",
                  "--out-dir", str(fake_config.output_root / "plots")])
    assert rc == 0

    plots = Path(fake_config.output_root / "plots")
    assert (plots / "sample_speed.png").stat().st_size > 0
    assert (plots / "sample_elevation.png").stat().st_size > 0


def test_main_plots_headless(sample_gpx_path, fake_config, monkeypatch):
    import matplotlib

    backends = []
    monkeypatch.setattr(matplotlib, "use", lambda name, *a, **kw: backends.append(name))

    assert gd.main([str(sample_gpx_path), "--plot"]) == 0
    assert backends == ["Agg"]
