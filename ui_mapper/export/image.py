"""Raster-image encoder for the schematic surface."""

from __future__ import annotations

import io

from ..core.config import config
from ..core.logger import log
from ..vision.models import Raster
from ..vision.schematic import render_schematic
from .artifact import ExportArtifact, ExportFormat, require_schematic, suggested_filename


def _encode(raster: Raster, fmt: ExportFormat, filename: str | None, schematic_enabled: bool) -> ExportArtifact:
    require_schematic(raster, schematic_enabled)
    surface = render_schematic(raster)

    buffer = io.BytesIO()
    if fmt is ExportFormat.JPEG:
        surface.save(buffer, format="JPEG", quality=config.export_jpeg_quality)
    else:
        surface.save(buffer, format="PNG")

    artifact = ExportArtifact(
        filename=suggested_filename(raster, fmt, filename),
        media_type=fmt.media_type,
        data=buffer.getvalue(),
    )
    log.log_export(fmt.value, artifact.filename, artifact.size)
    return artifact


def export_as_png(raster: Raster, filename: str | None = None, *, schematic_enabled: bool) -> ExportArtifact:
    """Lossless schematic image."""
    return _encode(raster, ExportFormat.PNG, filename, schematic_enabled)


def export_as_jpeg(raster: Raster, filename: str | None = None, *, schematic_enabled: bool) -> ExportArtifact:
    """Compressed schematic image at the configured quality."""
    return _encode(raster, ExportFormat.JPEG, filename, schematic_enabled)
