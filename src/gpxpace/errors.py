# gpxpace/errors

"""
gpxpace.errors

Central exception hierarchy for gpxpace.

Scope:
  - Exceptions live at the edges only: configuration and file ingestion.
  - The analytics core (enrich / aggregate / elevation / pace) never raises
    for bad data; it returns an Outcome instead.
  - Callers can catch GpxPaceError (broad) or specific subclasses (narrow).
"""


class GpxPaceError(RuntimeError):
    """Base class for all gpxpace runtime errors."""


# ---- Configuration errors ----------------------

class ConfigError(GpxPaceError):
    """A config file could not be parsed, or a named value does not exist."""

class UnknownPresetError(ConfigError):
    """A sensitivity preset name is not defined in built-ins or config."""


# ---- Format / ingestion errors -----------------

class FormatError(GpxPaceError):
    """Errors reading a track file payload."""

class InvalidGpxError(FormatError):
    """GPX payload is not well-formed XML or has no <gpx> root."""
