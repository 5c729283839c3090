"""Normalized-to-pixel geometry.

``to_pixel_rect`` is the single conversion used by the viewer, the schematic
renderer and the exporters, so on-screen highlights and exported artifacts
always agree.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import NORMALIZED_MAX, BoundingBox


@dataclass(frozen=True, slots=True)
class PixelRect:
    """Axis-aligned rectangle in raster pixel space (floats)."""

    top: float
    left: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def as_box(self) -> tuple[float, float, float, float]:
        """Return ``(left, top, right, bottom)`` for drawing APIs."""
        return self.left, self.top, self.right, self.bottom


def to_pixel_rect(box: BoundingBox, raster_width: float, raster_height: float) -> PixelRect:
    """Project a normalized box onto a raster of the given pixel size."""
    return PixelRect(
        top=box.ymin / NORMALIZED_MAX * raster_height,
        left=box.xmin / NORMALIZED_MAX * raster_width,
        width=(box.xmax - box.xmin) / NORMALIZED_MAX * raster_width,
        height=(box.ymax - box.ymin) / NORMALIZED_MAX * raster_height,
    )
