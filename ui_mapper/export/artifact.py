"""Shared export types: the artifact value, filenames and the map-mode gate."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..core.errors import PreconditionError
from ..utils.file_utils import export_stem
from ..vision.models import Raster


class ExportFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    PDF = "pdf"
    CSV = "csv"
    JSON = "json"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    @property
    def needs_schematic(self) -> bool:
        return self in (ExportFormat.PNG, ExportFormat.JPEG, ExportFormat.PDF)


_EXTENSIONS = {
    ExportFormat.PNG: ".png",
    ExportFormat.JPEG: ".jpg",
    ExportFormat.PDF: ".pdf",
    ExportFormat.CSV: ".csv",
    ExportFormat.JSON: ".json",
}

_MEDIA_TYPES = {
    ExportFormat.PNG: "image/png",
    ExportFormat.JPEG: "image/jpeg",
    ExportFormat.PDF: "application/pdf",
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
}


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    """Encoded export ready to be written or downloaded."""

    filename: str
    media_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


def suggested_filename(raster: Raster, fmt: ExportFormat, filename: str | None = None) -> str:
    """File name with the format's fixed extension.

    Rendered formats default to ``<stem>_map``, data formats to
    ``<stem>_ui_map``.
    """
    suffix = "_map" if fmt.needs_schematic else "_ui_map"
    return export_stem(filename, raster.stem + suffix) + fmt.extension


def require_schematic(raster: Raster, schematic_enabled: bool) -> None:
    """Gate rendered exports on an analyzed raster shown in map mode.

    Raises:
        PreconditionError: The raster is not analyzed or map mode is off.
    """
    if not raster.analyzed:
        raise PreconditionError(f"Screenshot {raster.name!r} has not been analyzed yet")
    if not schematic_enabled:
        raise PreconditionError("Enable component map mode before exporting the schematic")
