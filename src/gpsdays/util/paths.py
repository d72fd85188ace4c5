# gpsdays/util/paths.py
from __future__ import annotations

import re
from pathlib import Path

_slug_bad = re.compile(r"[^a-z0-9]+")

def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists and return it."""
    path.mkdir(parents=True, exist_ok=True)
    return path

def slugify(text: str, *, default: str = "untitled") -> str:
    """Create a path-safe slug (lowercase, a-z0-9 and single underscores)."""
    s = (text or "").strip().lower()
    s = _slug_bad.sub("_", s).strip("_")
    return s or default

def derived_output(out_dir: Path, source: Path, suffix: str) -> Path:
    """
    Output path next to the other artifacts of `source`, e.g.
      out_dir/my_ride_markers.gpx
    """
    return out_dir / f"{slugify(source.stem)}_{suffix}"
