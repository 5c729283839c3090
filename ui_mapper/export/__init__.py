"""Export encoders for annotated screenshots.

Image and PDF exports render the schematic; CSV and JSON read the region
list directly.  None of them mutates the raster.
"""

from __future__ import annotations

from ..vision.models import Raster
from .artifact import ExportArtifact, ExportFormat, require_schematic, suggested_filename
from .document import export_as_pdf
from .image import export_as_jpeg, export_as_png
from .structured import export_as_json, regions_from_json, regions_to_json
from .tabular import CSV_HEADER, export_as_csv, regions_to_csv


def export_raster(
    raster: Raster,
    fmt: ExportFormat | str,
    filename: str | None = None,
    *,
    schematic_enabled: bool = False,
) -> ExportArtifact:
    """Dispatch to the encoder for *fmt* (``"jpg"`` is accepted for JPEG)."""
    if isinstance(fmt, str) and fmt.lower() == "jpg":
        fmt = ExportFormat.JPEG
    fmt = ExportFormat(fmt.lower()) if isinstance(fmt, str) else fmt

    if fmt is ExportFormat.PNG:
        return export_as_png(raster, filename, schematic_enabled=schematic_enabled)
    if fmt is ExportFormat.JPEG:
        return export_as_jpeg(raster, filename, schematic_enabled=schematic_enabled)
    if fmt is ExportFormat.PDF:
        return export_as_pdf(raster, filename, schematic_enabled=schematic_enabled)
    if fmt is ExportFormat.CSV:
        return export_as_csv(raster, filename)
    return export_as_json(raster, filename)


__all__ = [
    "CSV_HEADER",
    "ExportArtifact",
    "ExportFormat",
    "export_as_csv",
    "export_as_jpeg",
    "export_as_json",
    "export_as_pdf",
    "export_as_png",
    "export_raster",
    "regions_from_json",
    "regions_to_csv",
    "regions_to_json",
    "require_schematic",
    "suggested_filename",
]
