"""Paged-document encoder: the schematic on a single PDF page."""

from __future__ import annotations

import io

from reportlab.lib.pagesizes import landscape, portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..core.config import config
from ..core.logger import log
from ..vision.models import Raster
from ..vision.schematic import render_schematic
from .artifact import ExportArtifact, ExportFormat, require_schematic, suggested_filename


def page_size_for(width: int, height: int) -> tuple[float, float]:
    """Page exactly the surface size (1 px = 1 pt), oriented by aspect."""
    size = (float(width), float(height))
    return landscape(size) if width > height else portrait(size)


def export_as_pdf(raster: Raster, filename: str | None = None, *, schematic_enabled: bool) -> ExportArtifact:
    """Embed the schematic surface as the only image on a one-page PDF."""
    require_schematic(raster, schematic_enabled)
    surface = render_schematic(raster)

    buffer = io.BytesIO()
    pdf = canvas.Canvas(
        buffer,
        pagesize=page_size_for(surface.width, surface.height),
        invariant=1 if config.export_pdf_invariant else 0,
    )
    pdf.setTitle(f"{raster.name} component map")
    pdf.drawImage(ImageReader(surface), 0, 0, width=surface.width, height=surface.height)
    pdf.showPage()
    pdf.save()

    artifact = ExportArtifact(
        filename=suggested_filename(raster, ExportFormat.PDF, filename),
        media_type=ExportFormat.PDF.media_type,
        data=buffer.getvalue(),
    )
    log.log_export(ExportFormat.PDF.value, artifact.filename, artifact.size)
    return artifact
