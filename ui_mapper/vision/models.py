"""Data models for the annotation subsystem.

Geometry is stored in a normalized 0-1000 space so that one region list can be
re-targeted to rasters of any resolution.  All models are frozen: every
mutation returns a new value, which gives exporters a consistent snapshot.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

NORMALIZED_MAX = 1000


class ComponentType(str, Enum):
    """Closed set of UI component categories."""

    HEADER = "Header"
    NAVIGATION = "Navigation"
    BUTTON = "Button"
    ICON = "Icon"
    INPUT = "Input"
    SELECT = "Select"
    FORM = "Form"
    CARD = "Card"
    MODAL = "Modal"
    FOOTER = "Footer"
    TEXT = "TextBlock"
    IMAGE = "Image"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: object) -> ComponentType | None:
        """Return the matching member, or ``None`` for unrecognized values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Normalized rectangle ``(ymin, xmin, ymax, xmax)`` in [0, 1000].

    ``xmin == xmax`` or ``ymin == ymax`` is a valid zero-area box.
    """

    ymin: int
    xmin: int
    ymax: int
    xmax: int

    def __post_init__(self) -> None:
        for name in ("ymin", "xmin", "ymax", "xmax"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= NORMALIZED_MAX:
                raise ValueError(f"{name}={value} outside [0, {NORMALIZED_MAX}]")
        if self.xmin > self.xmax or self.ymin > self.ymax:
            raise ValueError(f"Inverted bounding box: {self.as_list()}")

    def width(self) -> int:
        """Normalized horizontal extent."""
        return self.xmax - self.xmin

    def height(self) -> int:
        """Normalized vertical extent."""
        return self.ymax - self.ymin

    def is_degenerate(self) -> bool:
        return self.xmin == self.xmax or self.ymin == self.ymax

    def as_list(self) -> list[int]:
        """Return box as ``[ymin, xmin, ymax, xmax]`` (detection wire order)."""
        return [self.ymin, self.xmin, self.ymax, self.xmax]

    def to_dict(self) -> dict[str, int]:
        return {"ymin": self.ymin, "xmin": self.xmin, "ymax": self.ymax, "xmax": self.xmax}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoundingBox:
        return cls(
            ymin=int(data["ymin"]),
            xmin=int(data["xmin"]),
            ymax=int(data["ymax"]),
            xmax=int(data["xmax"]),
        )

    @classmethod
    def from_sequence(cls, values: Sequence[Any]) -> BoundingBox:
        """Build from ``[ymin, xmin, ymax, xmax]``; floats are rounded."""
        if len(values) != 4:
            raise ValueError(f"Expected 4 coordinates, got {len(values)}")
        coords = []
        for value in values:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Coordinate {value!r} is not a number")
            coords.append(int(round(value)))
        ymin, xmin, ymax, xmax = coords
        return cls(ymin=ymin, xmin=xmin, ymax=ymax, xmax=xmax)


@dataclass(frozen=True, slots=True)
class Region:
    """One detected UI element.

    ``component_type`` keeps the raw category string so that regions loaded
    from older or hand-edited storage survive an unknown value.
    """

    id: str
    label: str
    component_type: str
    box: BoundingBox
    description: str = ""

    @property
    def category(self) -> ComponentType | None:
        return ComponentType.parse(self.component_type)

    def renamed(self, label: str) -> Region:
        return replace(self, label=label)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the public field names (``type``, ``box_2d``)."""
        return {
            "id": self.id,
            "label": self.label,
            "type": self.component_type,
            "description": self.description,
            "box_2d": self.box.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Region:
        return cls(
            id=str(data["id"]),
            label=str(data["label"]),
            component_type=str(data["type"]),
            description=str(data.get("description") or ""),
            box=BoundingBox.from_dict(data["box_2d"]),
        )


@dataclass(frozen=True, slots=True)
class Raster:
    """An imported screenshot with fixed pixel size and its region list."""

    id: str
    name: str
    width: int
    height: int
    payload: bytes = field(repr=False)
    mime_type: str = "image/png"
    regions: tuple[Region, ...] = ()
    analyzed: bool = False

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def stem(self) -> str:
        """Display name up to the first dot, used for export filenames."""
        return self.name.split(".")[0] or self.id

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.payload).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def get_region(self, region_id: str) -> Region | None:
        for region in self.regions:
            if region.id == region_id:
                return region
        return None

    def with_regions(self, regions: Iterable[Region], *, analyzed: bool | None = None) -> Raster:
        """Replace the whole region list in one step."""
        return replace(
            self,
            regions=tuple(regions),
            analyzed=self.analyzed if analyzed is None else analyzed,
        )

    def with_region_renamed(self, region_id: str, label: str) -> Raster:
        return self.with_regions(
            region.renamed(label) if region.id == region_id else region
            for region in self.regions
        )

    def cleared(self) -> Raster:
        return self.with_regions((), analyzed=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "dataUrl": self.data_url,
            "width": self.width,
            "height": self.height,
            "components": [region.to_dict() for region in self.regions],
            "analyzed": self.analyzed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Raster:
        mime_type, payload = parse_data_url(data["dataUrl"])
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            width=int(data["width"]),
            height=int(data["height"]),
            payload=payload,
            mime_type=mime_type,
            regions=tuple(Region.from_dict(item) for item in data.get("components", [])),
            analyzed=bool(data.get("analyzed", False)),
        )


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """Split ``data:<mime>;base64,<data>`` into ``(mime, bytes)``."""
    header, sep, encoded = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")
    mime_type = header[len("data:"):-len(";base64")]
    try:
        payload = base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc
    return mime_type, payload
