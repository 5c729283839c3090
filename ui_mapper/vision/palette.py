"""Category colours for region outlines and label chips."""

from __future__ import annotations

from loguru import logger

from ..core.errors import RenderInvariantViolation
from .models import ComponentType

RGB = tuple[int, int, int]

CATEGORY_COLORS: dict[ComponentType, RGB] = {
    ComponentType.HEADER: (59, 130, 246),
    ComponentType.NAVIGATION: (139, 92, 246),
    ComponentType.BUTTON: (16, 185, 129),
    ComponentType.ICON: (245, 158, 11),
    ComponentType.INPUT: (236, 72, 153),
    ComponentType.SELECT: (236, 72, 153),  # same family as Input
    ComponentType.FORM: (99, 102, 241),
    ComponentType.CARD: (107, 114, 128),
    ComponentType.MODAL: (239, 68, 68),
    ComponentType.FOOTER: (30, 41, 59),
    ComponentType.TEXT: (156, 163, 175),
    ComponentType.IMAGE: (34, 197, 94),
    ComponentType.OTHER: (100, 116, 139),
}

DEFAULT_COLOR: RGB = CATEGORY_COLORS[ComponentType.OTHER]


def resolve_category(category: object) -> ComponentType:
    """Return the category member or raise ``RenderInvariantViolation``."""
    member = ComponentType.parse(category)
    if member is None:
        raise RenderInvariantViolation(category)
    return member


def color_for(category: object) -> RGB:
    """Colour for *category*; unknown values get the Other colour."""
    try:
        member = resolve_category(category)
    except RenderInvariantViolation as exc:
        logger.debug(f"Palette fallback: {exc}")
        return DEFAULT_COLOR
    return CATEGORY_COLORS[member]


def css_color(category: object) -> str:
    r, g, b = color_for(category)
    return f"rgb({r}, {g}, {b})"
