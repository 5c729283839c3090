"""Geometry, viewport and rendering for UI Mapper.

This sub-package provides the normalized region model, the pan/zoom viewport
state machine and the schematic renderer shared by the exporters.
"""

from .decode import decode_raster, decode_rasters
from .geometry import PixelRect, to_pixel_rect
from .models import BoundingBox, ComponentType, Raster, Region
from .palette import color_for
from .schematic import render_schematic
from .viewport import InteractionMode, ViewportState, fit_viewport

__all__ = [
    "BoundingBox",
    "ComponentType",
    "InteractionMode",
    "PixelRect",
    "Raster",
    "Region",
    "ViewportState",
    "color_for",
    "decode_raster",
    "decode_rasters",
    "fit_viewport",
    "render_schematic",
    "to_pixel_rect",
]
