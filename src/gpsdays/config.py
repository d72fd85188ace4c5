"""
gpsdays configuration loader

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by the CLI)
2) Environment variables (GPSDAYS_*)
3) User config: ~/.config/gpsdays/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

This module uses Python's built-in tomllib on Python 3.11+, or `tomli` if installed.

Sections understood:

    [segment]
    days = 2.5            # default "number of days"; blank or missing = whole trace

    [export]
    creator = "GPX visualiser"
    filename = "markers.gpx"

    [paths]
    output_root = "~/GPS/_days"
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from gpsdays.analyze.segment import parse_days
from gpsdays.errors import ConfigError

try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    - Missing file: empty dict (non-fatal).
    - Invalid TOML: ConfigError naming the file.
    """
    if not path.is_file():
        return {}

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "paths.output_root")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_path(v: Any) -> Optional[Path]:
    if v is None:
        return None
    if isinstance(v, Path):
        return v.expanduser()
    if isinstance(v, str) and v.strip():
        return Path(v).expanduser()
    return None


def _as_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def _as_days(v: Any) -> Optional[float]:
    """
    A configured "number of days", or None when it is not usable.

    Garbled values are not an error: segmentation falls back to the whole trace.
    """
    days = parse_days(v)
    return None if math.isnan(days) else days


# ---------------------------------------------------------------------------
# Repo discovery + defaults
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """Walk upward from `start`; a `config/` directory marks the repo root."""
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


def default_output_root() -> Path:
    return Path.home() / "GPS" / "_days"


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SegmentConfig:
    days: Optional[float] = None


@dataclass(frozen=True)
class ExportConfig:
    creator: str = "GPX visualiser"
    filename: str = "markers.gpx"


@dataclass(frozen=True)
class GPSdaysConfig:
    """
    Fully merged configuration.

    - source: provenance map showing where each value came from
    """

    output_root: Path
    segment: SegmentConfig
    export: ExportConfig
    source: dict[str, str]


# Dotted key -> coercion
_KEYS = {
    "segment.days": _as_days,
    "export.creator": _as_str,
    "export.filename": _as_str,
    "paths.output_root": _as_path,
}

_ENV = {
    "GPSDAYS_DAYS": "segment.days",
    "GPSDAYS_CREATOR": "export.creator",
    "GPSDAYS_OUTPUT_ROOT": "paths.output_root",
}


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> GPSdaysConfig:
    """
    Load and merge all gpsdays configuration.

    Single entry point for configuration access.
    """
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "gpsdays" / "config.toml"

    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    defaults = ExportConfig()
    values: dict[str, Any] = {
        "segment.days": None,
        "export.creator": defaults.creator,
        "export.filename": defaults.filename,
        "paths.output_root": default_output_root(),
    }
    src = {k: "default" for k in values}

    # Later layers override earlier ones
    for cfg, label, path in ((repo_cfg, "repo", repo_config_path), (user_cfg, "user", user_config_path)):
        for key, coerce in _KEYS.items():
            raw = _deep_get(cfg, key)
            if raw is None:
                continue
            v = coerce(raw)
            if v is None:
                continue
            values[key] = v
            src[key] = f"{label}:{path}"

    for env, key in _ENV.items():
        raw = os.environ.get(env)
        if raw is None:
            continue
        v = _KEYS[key](raw)
        if v is None:
            continue
        values[key] = v
        src[key] = f"env:{env}"

    return GPSdaysConfig(
        output_root=values["paths.output_root"].expanduser(),
        segment=SegmentConfig(days=values["segment.days"]),
        export=ExportConfig(creator=values["export.creator"], filename=values["export.filename"]),
        source=src,
    )
