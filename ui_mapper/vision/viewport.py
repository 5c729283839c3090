"""Interactive pan/zoom state for the raster viewer.

The state is an immutable value and every interaction is a pure function
returning the next state, so any event loop (web handler, GUI callback, test)
can drive it.

The displayed transform is ``translate(offset) scale(zoom)`` about the
container centre.  The offset is expressed in screen pixels and is never
scaled by the zoom factor.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from ..core.config import config

Point = tuple[float, float]
Size = tuple[float, float]

PRIMARY_BUTTON = 0


class InteractionMode(str, Enum):
    """Pointer interaction state."""

    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True, slots=True)
class ViewportState:
    """Zoom factor, pan offset and drag bookkeeping for one raster."""

    zoom: float = 1.0
    offset: Point = (0.0, 0.0)
    mode: InteractionMode = InteractionMode.IDLE
    drag_anchor: Point | None = None

    @property
    def is_dragging(self) -> bool:
        return self.mode is InteractionMode.DRAGGING


def clamp_zoom(value: float) -> float:
    return max(config.viewport_min_zoom, min(config.viewport_max_zoom, value))


def fit_viewport(container: Size, raster: Size, margin: float | None = None) -> ViewportState:
    """Initial state that fits *raster* inside *container*.

    Never upscales past native resolution on first fit.
    """
    if margin is None:
        margin = config.viewport_margin
    container_w, container_h = container
    raster_w, raster_h = raster
    if raster_w <= 0 or raster_h <= 0:
        raise ValueError(f"Raster size must be positive, got {raster}")

    ratio = min((container_w - margin) / raster_w, (container_h - margin) / raster_h)
    return ViewportState(zoom=clamp_zoom(min(1.0, ratio)))


def pointer_down(
    state: ViewportState,
    position: Point,
    button: int = PRIMARY_BUTTON,
    editing: bool = False,
) -> ViewportState:
    """Start a drag on primary-button press unless a label is being edited."""
    if button != PRIMARY_BUTTON or editing or state.is_dragging:
        return state
    anchor = (position[0] - state.offset[0], position[1] - state.offset[1])
    return replace(state, mode=InteractionMode.DRAGGING, drag_anchor=anchor)


def pointer_move(state: ViewportState, position: Point) -> ViewportState:
    if not state.is_dragging or state.drag_anchor is None:
        return state
    offset = (position[0] - state.drag_anchor[0], position[1] - state.drag_anchor[1])
    return replace(state, offset=offset)


def pointer_up(state: ViewportState) -> ViewportState:
    if not state.is_dragging:
        return state
    return replace(state, mode=InteractionMode.IDLE, drag_anchor=None)


# Leaving the container ends a drag exactly like releasing the button.
pointer_leave = pointer_up


def pan(state: ViewportState, delta: Point) -> ViewportState:
    """Shift the offset by *delta* screen pixels."""
    offset = (state.offset[0] + delta[0], state.offset[1] + delta[1])
    return replace(state, offset=offset)


def zoom(state: ViewportState, factor: float) -> ViewportState:
    """Multiply the zoom factor and re-clamp it."""
    if factor <= 0:
        raise ValueError(f"Zoom factor must be positive, got {factor}")
    return replace(state, zoom=clamp_zoom(state.zoom * factor))


def zoom_in(state: ViewportState) -> ViewportState:
    return zoom(state, config.viewport_zoom_in_step)


def zoom_out(state: ViewportState) -> ViewportState:
    return zoom(state, config.viewport_zoom_out_step)


def reset_view(state: ViewportState) -> ViewportState:
    """Native resolution, centred."""
    return ViewportState()


def css_transform(state: ViewportState) -> str:
    """CSS transform string for a ``transform-origin: center`` element."""
    x, y = state.offset
    return f"translate({x:g}px, {y:g}px) scale({state.zoom:g})"


def content_to_screen(state: ViewportState, container: Size, raster: Size, point: Point) -> Point:
    """Map a raster pixel to container coordinates under the current transform."""
    cx, cy = container[0] / 2, container[1] / 2
    rx, ry = raster[0] / 2, raster[1] / 2
    return (
        cx + state.offset[0] + (point[0] - rx) * state.zoom,
        cy + state.offset[1] + (point[1] - ry) * state.zoom,
    )
