# gpsdays/formats/gpx.py
"""
GPX helpers for gpsdays

This module is intentionally format-focused:
- reading track points out of a GPX document (any GPX namespace, or none)
- parsing <time>/<ele> leniently; a missing field is None, not an error
- serializing slice markers as GPX 1.1 waypoints, and reading them back

Analysis (distances, slices, speeds) lives in gpsdays.analyze.
"""

from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional
from xml.etree import ElementTree as ET

from gpsdays.analyze.segment import Marker
from gpsdays.errors import InvalidGpxError

# GPX 1.1 default namespace
GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}

DEFAULT_CREATOR = "GPX visualiser"

ET.register_namespace("", GPX_NS["gpx"])


def qn(tag: str) -> str:
    """
    Build an ElementTree-qualified name for a GPX tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return f"{{{GPX_NS['gpx']}}}{tag}"


def _local(tag: str) -> str:
    """Strip any "{namespace}" prefix so GPX 1.0, 1.1 and bare files read alike."""
    return tag.rsplit("}", 1)[-1]


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    for child in elem:
        if _local(child.tag) == name:
            return child.text
    return None


def _parse_gpx_time(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Naive times are taken as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def _parse_ele(text: Optional[str]) -> Optional[float]:
    if text is None or not text.strip():
        return None
    try:
        ele = float(text)
    except ValueError:
        return None
    return ele if math.isfinite(ele) else None


def _indent(elem: ET.Element, level: int = 0, indent: str = "  ") -> None:
    """
    In-place pretty-printer for ElementTree output. Explicitly controls
    .text/.tail so repeated runs give identical bytes.
    """
    i = "\n" + level * indent
    j = "\n" + (level - 1) * indent if level > 0 else "\n"

    children = list(elem)
    if children:
        if elem.text is None or not elem.text.strip():
            elem.text = i + indent
        for child in children:
            _indent(child, level + 1, indent=indent)
        if children[-1].tail is None or not children[-1].tail.strip():
            children[-1].tail = i
    if elem.tail is None or not elem.tail.strip():
        elem.tail = j


@dataclass(frozen=True)
class TrackPoint:
    lat: float
    lon: float
    time: Optional[_dt.datetime] = None
    ele: Optional[float] = None


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------
def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      InvalidGpxError, OSError
    """
    try:
        return ET.parse(path)
    except ET.ParseError as e:
        raise InvalidGpxError(f"{path}: {e}") from e


def parse_gpx_bytes(data: bytes | str) -> ET.Element:
    """Parse an in-memory GPX document and return its root element."""
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise InvalidGpxError(str(e)) from e


def extract_trackpoints(tree: ET.ElementTree | ET.Element) -> list[TrackPoint]:
    """
    Extract ordered trackpoints from a GPX tree.

    Every <trkpt> in document order is returned, across all <trk>/<trkseg>.
    Points without <time> keep time=None; points without a usable <ele>
    keep ele=None.
    """
    root = tree.getroot() if isinstance(tree, ET.ElementTree) else tree
    pts: list[TrackPoint] = []

    for trkpt in root.iter():
        if _local(trkpt.tag) != "trkpt":
            continue
        try:
            lat = float(trkpt.get("lat"))
            lon = float(trkpt.get("lon"))
        except (TypeError, ValueError) as e:
            raise InvalidGpxError(
                f"trkpt #{len(pts) + 1} has no usable lat/lon ({trkpt.attrib})"
            ) from e

        time = _parse_gpx_time(_child_text(trkpt, "time") or "")
        ele = _parse_ele(_child_text(trkpt, "ele"))

        pts.append(TrackPoint(lat=lat, lon=lon, time=time, ele=ele))

    return pts


def load_trackpoints(path: Path) -> list[TrackPoint]:
    return extract_trackpoints(read_gpx(path))


# ---------------------------------------------------------------------------
# Waypoint export
# ---------------------------------------------------------------------------
def build_waypoints(markers: Iterable[Marker], *, creator: str = DEFAULT_CREATOR) -> ET.Element:
    """Build a <gpx> root holding one <wpt><name> per marker."""
    root = ET.Element(qn("gpx"), {"version": "1.1", "creator": creator})
    for m in markers:
        wpt = ET.SubElement(root, qn("wpt"), {"lat": repr(float(m.lat)), "lon": repr(float(m.lon))})
        name = ET.SubElement(wpt, qn("name"))
        name.text = m.label
    return root


def export_markers(markers: Iterable[Marker], *, creator: str = DEFAULT_CREATOR) -> bytes:
    """
    Serialize markers as a GPX 1.1 waypoint document (UTF-8, with declaration).

    Labels go through ElementTree's text escaping. The same markers always
    give the same bytes; no timestamps are written.
    """
    root = build_waypoints(markers, creator=creator)
    _indent(root)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def write_markers(markers: Iterable[Marker], out_path: Path, *, creator: str = DEFAULT_CREATOR) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(export_markers(markers, creator=creator))
    return out_path


def parse_waypoints(data: bytes | str) -> list[Marker]:
    """
    Read <wpt> elements back as Markers.

    Only coordinates and the name survive the round trip; distance and
    duration come back as 0.
    """
    root = parse_gpx_bytes(data)
    out: list[Marker] = []
    for wpt in root.iter():
        if _local(wpt.tag) != "wpt":
            continue
        try:
            lat = float(wpt.get("lat"))
            lon = float(wpt.get("lon"))
        except (TypeError, ValueError) as e:
            raise InvalidGpxError(f"wpt has no usable lat/lon ({wpt.attrib})") from e
        out.append(Marker(lat=lat, lon=lon, label=_child_text(wpt, "name") or ""))
    return out
