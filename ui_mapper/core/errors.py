"""Exception hierarchy for UI Mapper.

Every failure is scoped to a single raster or a single export action; none of
these is fatal to the process.
"""

from __future__ import annotations


class UIMapperError(Exception):
    """Base class for all UI Mapper errors."""


class PreconditionError(UIMapperError):
    """Export attempted without the required analyzed/schematic state."""


class DecodeError(UIMapperError):
    """Raster bytes could not be decoded into an image."""


class DetectionError(UIMapperError):
    """Remote detection failed or returned unparsable content."""


class DetectionBusyError(DetectionError):
    """A detection is already pending for the raster."""

    def __init__(self, raster_id: str) -> None:
        super().__init__(f"Detection already in progress for raster {raster_id}")
        self.raster_id = raster_id


class RenderInvariantViolation(UIMapperError):
    """A region carries a category outside the known set."""

    def __init__(self, category: object) -> None:
        super().__init__(f"Unrecognized component category: {category!r}")
        self.category = category


class NotFoundError(UIMapperError):
    """Unknown project, raster or region id."""
