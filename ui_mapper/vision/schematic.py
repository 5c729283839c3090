"""Schematic renderer: draw a raster's regions as labelled boxes.

The surface is the shared basis for the on-screen map mode and for the image
and PDF exporters.  Rendering is deterministic and always starts from a fresh
surface.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from ..core.config import config
from ..core.logger import log
from .geometry import PixelRect, to_pixel_rect
from .models import Raster, Region
from .palette import color_for

LABEL_TEXT_COLOR = (255, 255, 255)
REGION_FILL = (255, 255, 255)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def label_font_size(raster_width: int) -> int:
    """Label size grows with raster width so labels stay legible."""
    return max(14, raster_width // 70)


@lru_cache(maxsize=16)
def _load_font(size: int) -> Font:
    """Load the label font once per size (lazy)."""
    if config.render_font_path:
        return ImageFont.truetype(config.render_font_path, size)
    return ImageFont.load_default(size=size)


def _draw_label(draw: ImageDraw.ImageDraw, rect: PixelRect, text: str, color, font: Font, font_size: int) -> None:
    # Chips hold one line of text
    text = " ".join(text.split())
    padding = font_size * 0.8
    chip_height = font_size + padding
    text_width = draw.textlength(text, font=font)
    chip_top = rect.top - chip_height

    draw.rectangle(
        (rect.left, chip_top, rect.left + text_width + padding * 2, rect.top),
        fill=color,
    )

    # Centre the glyph box vertically inside the chip
    _, glyph_top, _, glyph_bottom = font.getbbox(text)
    text_y = chip_top + (chip_height - (glyph_bottom - glyph_top)) / 2 - glyph_top
    draw.text((rect.left + padding, text_y), text, fill=LABEL_TEXT_COLOR, font=font)


def render_schematic(raster: Raster, regions: Iterable[Region] | None = None) -> Image.Image:
    """Return a new ``width x height`` RGB surface with every region drawn.

    Args:
        raster: Source raster; only its pixel size is used.
        regions: Region list to draw, defaulting to ``raster.regions``.
            Drawn in the given order.
    """
    start = time.perf_counter()
    items = raster.regions if regions is None else tuple(regions)

    surface = Image.new("RGB", (raster.width, raster.height), config.render_background)
    draw = ImageDraw.Draw(surface)
    font_size = label_font_size(raster.width)
    font = _load_font(font_size)

    for region in items:
        rect = to_pixel_rect(region.box, raster.width, raster.height)
        if rect.is_empty:
            log.debug(f"Skipping zero-area region {region.id}")
            continue

        color = color_for(region.component_type)
        draw.rectangle(rect.as_box(), fill=REGION_FILL, outline=color, width=config.render_stroke_width)
        _draw_label(draw, rect, region.label, color, font, font_size)

    log.log_performance(
        f"render_schematic({raster.id}, {len(items)} regions)",
        (time.perf_counter() - start) * 1000,
    )
    return surface
