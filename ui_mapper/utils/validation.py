"""Validation utility functions for detection payloads."""

from __future__ import annotations

import math
from typing import Any, Dict, Tuple

from ..vision.models import NORMALIZED_MAX

REQUIRED_ENTRY_FIELDS = ("label", "type", "box_2d")


def validate_box_values(values: Any) -> Tuple[bool, str]:
    """Validate a ``[ymin, xmin, ymax, xmax]`` list in normalized space.

    Args:
        values: Raw ``box_2d`` value from a detection entry.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(values, (list, tuple)):
        return False, "box_2d must be a list"

    if len(values) != 4:
        return False, f"box_2d must have 4 values, got {len(values)}"

    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False, f"box_2d value {value!r} is not a number"
        # Bounds before isfinite: huge ints overflow the float conversion
        if value < 0 or value > NORMALIZED_MAX:
            return False, f"box_2d value out of bounds [0, {NORMALIZED_MAX}]"
        if not math.isfinite(value):
            return False, "box_2d value is not finite"

    ymin, xmin, ymax, xmax = (round(v) for v in values)
    if ymin > ymax or xmin > xmax:
        return False, "box_2d is inverted"

    return True, ""


def validate_detection_entry(entry: Any) -> Tuple[bool, str]:
    """Validate one raw detection entry.

    Args:
        entry: Decoded JSON item.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(entry, dict):
        return False, "Entry must be an object"

    for key in REQUIRED_ENTRY_FIELDS:
        if key not in entry or entry[key] is None:
            return False, f"Entry missing '{key}' field"

    for key in ("label", "type"):
        if not isinstance(entry[key], str) or not entry[key].strip():
            return False, f"Entry field '{key}' must be a non-empty string"

    description = entry.get("description")
    if description is not None and not isinstance(description, str):
        return False, "Entry field 'description' must be a string"

    return validate_box_values(entry["box_2d"])


def validate_label(label: Any) -> Tuple[bool, str]:
    """Validate a user-supplied region label."""
    if not isinstance(label, str):
        return False, "Label must be a string"
    if not label.strip():
        return False, "Label must not be blank"
    return True, ""


def summarize_errors(errors: Dict[int, str]) -> str:
    """Render ``{index: message}`` as one log-friendly line."""
    return "; ".join(f"#{idx}: {msg}" for idx, msg in sorted(errors.items()))
