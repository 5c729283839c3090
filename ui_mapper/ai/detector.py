"""Detection service: one in-flight request per raster."""

from __future__ import annotations

from typing import Protocol

import openai  # type: ignore

from ..core.errors import DetectionBusyError, DetectionError
from ..core.logger import log
from ..vision.models import Raster
from .openai_client import OpenAIDetectionBackend
from .response_parser import DetectionParseResult, parse_detection_response


class DetectionBackend(Protocol):
    """Anything that can turn screenshot bytes into a raw model reply."""

    async def detect_raw(self, image_bytes: bytes, mime_type: str) -> str:
        ...


class DetectionService:
    """Run detection for rasters, rejecting overlapping calls per raster.

    A second request for a raster whose detection is still pending fails
    immediately with ``DetectionBusyError``; requests are never queued.
    """

    def __init__(self, backend: DetectionBackend | None = None) -> None:
        self._backend = backend
        self._in_flight: set[str] = set()

    @property
    def backend(self) -> DetectionBackend:
        if self._backend is None:
            self._backend = OpenAIDetectionBackend()
        return self._backend

    def is_pending(self, raster_id: str) -> bool:
        return raster_id in self._in_flight

    async def detect(self, raster: Raster) -> DetectionParseResult:
        """Detect components on *raster*.

        Raises:
            DetectionBusyError: A detection for this raster is already pending.
            DetectionError: The call failed or the reply was unparsable.
        """
        if raster.id in self._in_flight:
            raise DetectionBusyError(raster.id)

        self._in_flight.add(raster.id)
        try:
            log.info(f"Detection started for {raster.name} ({raster.id})")
            try:
                raw = await self.backend.detect_raw(raster.payload, raster.mime_type)
            except (openai.OpenAIError, RuntimeError, ValueError) as exc:
                raise DetectionError(f"Detection request failed: {exc}") from exc
            result = parse_detection_response(raw)
        finally:
            self._in_flight.discard(raster.id)

        log.log_detection(raster.id, accepted=len(result.regions), skipped=result.skipped)
        return result


def apply_detection(raster: Raster, result: DetectionParseResult) -> Raster:
    """Replace the region list with a detection result and mark it analyzed."""
    return raster.with_regions(result.regions, analyzed=True)
