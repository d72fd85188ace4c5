#!/usr/bin/env python3
"""
gpsdays: split GPX track(s) into "days" and report per-slice distance/time.

For each file: whole-track summary, one line per slice marker, and
optionally a waypoint GPX of the markers plus speed/elevation plots.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from gpsdays.analyze.segment import parse_days
from gpsdays.analyze.track import analyze_points
from gpsdays.config import load_config
from gpsdays.errors import GPSdaysError
from gpsdays.formats.gpx import load_trackpoints
from gpsdays.session import TrackSession
from gpsdays.util.logging import log, warn
from gpsdays.util.paths import derived_output, ensure_dir


def print_report(path: Path, stats: dict, session: TrackSession, *, tsv: bool) -> None:
    if tsv:
        for i, m in enumerate(session.markers, start=1):
            print(
                f"{path}\t{i}\t"
                f"{m.lat:.6f}\t{m.lon:.6f}\t"
                f"{m.distance_m:.2f}\t{m.duration_s:.1f}\t"
                f"{m.label}"
            )
        return

    rng = session.result.speed_range
    print(f"\n{path}")
    print(f"  points        : {stats.get('points', 0)}")
    print(f"  segments      : {stats.get('segments', 0)}")
    print(f"  distance (m)  : {stats.get('distance_m', 0.0):.2f}")
    print(f"  duration (s)  : {stats.get('duration_s', 0.0):.1f}")
    print(f"  avg speed m/s : {stats.get('avg_speed_mps', 0.0):.3f}")
    print(f"  speed range   : {rng.min_mps:.3f}–{rng.max_mps:.3f} m/s")
    for i, m in enumerate(session.markers, start=1):
        print(f"  slice {i:<3}     : {m.label}  @ {m.lat:.5f}, {m.lon:.5f}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="gpsdays: split GPX track(s) into days.")
    ap.add_argument("gpx", nargs="+",
                    help="One or more GPX files.")
    ap.add_argument("--days", default=None,
                    help="Number of days (fractional allowed). Blank or invalid = whole trace as one slice. "
                         "Default: from config [segment] days.")
    ap.add_argument("--out-dir", default=None,
                    help="Directory for exports/plots (default: from config or ~/GPS/_days).")
    ap.add_argument("--export", action="store_true",
                    help="Write the slice markers as a GPX waypoint file.")
    ap.add_argument("--plot", action="store_true",
                    help="Write a speed-coloured track plot (PNG).")
    ap.add_argument("--elevation-plot", action="store_true",
                    help="Write an elevation profile plot (PNG).")
    ap.add_argument("--tsv", action="store_true",
                    help="Print tab-separated marker rows (good for piping).")
    ap.add_argument("--verbose", action="store_true",
                    help="More logging.")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config()

    days = parse_days(args.days) if args.days is not None else parse_days(cfg.segment.days)
    out_dir = Path(args.out_dir).expanduser() if args.out_dir else cfg.output_root

    if args.verbose:
        log(f"days={days} (source: {'cli' if args.days is not None else cfg.source['segment.days']})")

    if args.tsv:
        print("file\tslice\tlat\tlon\tdistance_m\tduration_s\tlabel")

    session = TrackSession(creator=cfg.export.creator, verbose=args.verbose)
    failures = 0

    for name in args.gpx:
        path = Path(name).expanduser()
        if not path.is_file():
            warn(f"Skipping (not a file): {path}")
            failures += 1
            continue

        try:
            points = load_trackpoints(path)
            session.run(points, days)
        except GPSdaysError as e:
            warn(f"{path}: {e}")
            failures += 1
            continue

        print_report(path, analyze_points(points), session, tsv=args.tsv)

        if args.export or args.plot or args.elevation_plot:
            ensure_dir(out_dir)

        if args.export:
            if session.can_export:
                session.export_to(derived_output(out_dir, path, cfg.export.filename))
            else:
                warn(f"{path}: no markers to export")

        if args.plot or args.elevation_plot:
            # matplotlib only when a plot is asked for; files only, so headless
            import matplotlib
            matplotlib.use("Agg")
            from gpsdays.visualize.plot import plot_elevation, plot_track

            if args.plot:
                out = plot_track(session.points, session.result, derived_output(out_dir, path, "speed.png"))
                log(f"Wrote: {out}")
            if args.elevation_plot:
                out = plot_elevation(session.elevation, derived_output(out_dir, path, "elevation.png"))
                log(f"Wrote: {out}")

    return 2 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
