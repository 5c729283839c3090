"""Parse and validate the detection model's JSON reply."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from ..core.errors import DetectionError
from ..utils.file_utils import get_timestamp_ms
from ..utils.validation import summarize_errors, validate_detection_entry
from ..vision.models import BoundingBox, ComponentType, Region

__all__ = ["DetectionParseResult", "parse_detection_response"]

_JSON_ARRAY_REGEX = re.compile(r"\[[\s\S]*\]")


@dataclass
class DetectionParseResult:
    """Regions accepted from one reply plus the entries that were skipped."""

    regions: list[Region] = field(default_factory=list)
    errors: dict[int, str] = field(default_factory=dict)
    total_entries: int = 0

    @property
    def skipped(self) -> int:
        return len(self.errors)


def _load_entries(raw: str) -> list[Any]:
    """Return the JSON array contained in *raw*."""
    text = raw.strip()
    try:
        data = json.loads(text)
    except ValueError:
        match = _JSON_ARRAY_REGEX.search(text)
        if not match:
            raise DetectionError("No JSON array found in detection response") from None
        try:
            data = json.loads(match.group(0))
        except ValueError as exc:
            raise DetectionError(f"JSON decode error: {exc}") from exc

    if isinstance(data, dict):
        # Some models wrap the list in an object
        data = data.get("components", data.get("items"))
    if not isinstance(data, list):
        raise DetectionError("Detection response is not a JSON array")
    return data


def _to_region(index: int, entry: dict[str, Any], stamp: int) -> Region:
    category = ComponentType.parse(entry["type"].strip())
    if category is None:
        logger.debug("Entry #{0}: unknown type {1!r} mapped to Other", index, entry["type"])
        category = ComponentType.OTHER
    return Region(
        id=f"comp-{index}-{stamp}",
        label=entry["label"].strip(),
        component_type=category.value,
        description=entry.get("description") or "",
        box=BoundingBox.from_sequence(entry["box_2d"]),
    )


def parse_detection_response(raw: str) -> DetectionParseResult:
    """Build regions from a detection reply, skipping malformed entries.

    Raises:
        DetectionError: The reply contains no parsable JSON array.
    """
    entries = _load_entries(raw)
    result = DetectionParseResult(total_entries=len(entries))
    stamp = get_timestamp_ms()

    for index, entry in enumerate(entries):
        valid, message = validate_detection_entry(entry)
        if not valid:
            result.errors[index] = message
            continue
        result.regions.append(_to_region(index, entry, stamp))

    if result.errors:
        logger.warning(
            "Skipped {0}/{1} detection entries: {2}",
            result.skipped,
            result.total_entries,
            summarize_errors(result.errors),
        )
    return result
