# gpsdays/errors

"""
gpsdays.errors

Central exception hierarchy for gpsdays.

Callers can catch GPSdaysError (broad) or specific subclasses (narrow).
An invalid "number of days" is deliberately NOT an error: it degrades to a
single whole-trace slice.
"""


class GPSdaysError(RuntimeError):
    """Base class for all gpsdays runtime errors."""


# ---- Track / segmentation errors ---------------

class TrackError(GPSdaysError):
    """Errors in the track analysis pipeline."""

class InsufficientDataError(TrackError):
    """A trace needs at least two points to be segmented."""

class MissingTimestampError(InsufficientDataError):
    """First or last point has no timestamp, so slice thresholds cannot be computed."""


# ---- Format errors -----------------------------

class FormatError(GPSdaysError):
    """Errors reading or writing interchange formats."""

class InvalidGpxError(FormatError):
    """GPX file could not be parsed or did not contain expected data structures."""


# ---- Export errors -----------------------------

class ExportError(GPSdaysError):
    """Errors producing the waypoint export."""

class NoMarkersError(ExportError):
    """Nothing to export: the current run produced no markers."""


# ---- Configuration errors ----------------------

class ConfigError(GPSdaysError):
    """Configuration file exists but could not be used."""
