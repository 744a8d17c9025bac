"""Exception types raised while deriving a structure.

ConfigurationError aborts a run before any framing is attempted.
GeometryError is raised per cell or level and absorbed by the builders,
which skip the offending feature and continue.
"""

from __future__ import annotations


class StructureError(Exception):
    """Base class for all structure derivation errors."""


class ConfigurationError(StructureError, ValueError):
    """Missing or unusable input models or settings."""


class GeometryError(StructureError, ValueError):
    """A degenerate polygon or segment was supplied."""


class TopologyError(StructureError):
    """Invalid access to, or mutation of, a cell complex."""
