"""Delimited-text encoder: one CSV row per region, normalized units."""

from __future__ import annotations

import csv
import io

from ..core.logger import log
from ..vision.models import Raster
from .artifact import ExportArtifact, ExportFormat, suggested_filename

CSV_HEADER = ("Label", "Type", "X", "Y", "Width", "Height")


def regions_to_csv(raster: Raster) -> str:
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADER) + "\n")

    # Strings are quoted, integers are written bare
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for region in raster.regions:
        box = region.box
        writer.writerow([region.label, region.component_type, box.xmin, box.ymin, box.width(), box.height()])
    return buffer.getvalue()


def export_as_csv(raster: Raster, filename: str | None = None) -> ExportArtifact:
    artifact = ExportArtifact(
        filename=suggested_filename(raster, ExportFormat.CSV, filename),
        media_type=ExportFormat.CSV.media_type,
        data=regions_to_csv(raster).encode("utf-8"),
    )
    log.log_export(ExportFormat.CSV.value, artifact.filename, artifact.size)
    return artifact
