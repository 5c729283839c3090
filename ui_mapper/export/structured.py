"""Structured-data encoder: the region list as pretty-printed JSON."""

from __future__ import annotations

import json

from ..core.logger import log
from ..vision.models import Raster, Region
from .artifact import ExportArtifact, ExportFormat, suggested_filename


def regions_to_json(raster: Raster) -> str:
    return json.dumps([region.to_dict() for region in raster.regions], indent=2, ensure_ascii=False)


def regions_from_json(text: str) -> tuple[Region, ...]:
    """Inverse of ``regions_to_json``."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of regions")
    return tuple(Region.from_dict(item) for item in data)


def export_as_json(raster: Raster, filename: str | None = None) -> ExportArtifact:
    artifact = ExportArtifact(
        filename=suggested_filename(raster, ExportFormat.JSON, filename),
        media_type=ExportFormat.JSON.media_type,
        data=regions_to_json(raster).encode("utf-8"),
    )
    log.log_export(ExportFormat.JSON.value, artifact.filename, artifact.size)
    return artifact
