"""
pytest configuration and shared fixtures

Usage:
    def test_something(make_raster, sample_regions):
        raster = make_raster(regions=sample_regions, analyzed=True)
"""

from __future__ import annotations

import asyncio
import io
import os
from typing import Callable, Optional, Sequence

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("OPENAI_API_KEY", "")

import pytest  # noqa: E402
from PIL import Image  # noqa: E402

from ui_mapper.ai.detector import DetectionService  # noqa: E402
from ui_mapper.core.repository import InMemoryProjectRepository  # noqa: E402
from ui_mapper.core.session import AnnotationSession  # noqa: E402
from ui_mapper.vision.models import BoundingBox, Raster, Region  # noqa: E402


# ============================================================================
# Image fixtures
# ============================================================================

def encode_image(width: int, height: int, fmt: str = "PNG", color=(200, 210, 220)) -> bytes:
    """Encode a solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return encode_image(800, 600)


@pytest.fixture
def make_raster() -> Callable[..., Raster]:
    """Factory for rasters backed by a real encoded image."""

    def _make(
        width: int = 800,
        height: int = 600,
        regions: Sequence[Region] = (),
        analyzed: bool = False,
        name: str = "home.screen.png",
        raster_id: str = "sc-test",
    ) -> Raster:
        return Raster(
            id=raster_id,
            name=name,
            width=width,
            height=height,
            payload=encode_image(width, height),
            regions=tuple(regions),
            analyzed=analyzed,
        )

    return _make


# ============================================================================
# Region fixtures
# ============================================================================

@pytest.fixture
def sample_regions() -> list[Region]:
    return [
        Region(
            id="comp-0-1",
            label="Top Bar",
            component_type="Header",
            box=BoundingBox(ymin=0, xmin=0, ymax=100, xmax=1000),
        ),
        Region(
            id="comp-1-1",
            label="Sign In",
            component_type="Button",
            box=BoundingBox(ymin=400, xmin=100, ymax=450, xmax=300),
            description="Primary call to action",
        ),
        Region(
            id="comp-2-1",
            label="Email",
            component_type="Input",
            box=BoundingBox(ymin=300, xmin=100, ymax=350, xmax=900),
        ),
    ]


# ============================================================================
# Detection fixtures
# ============================================================================

DETECTION_REPLY = """[
  {"label": "Top Bar", "type": "Header", "box_2d": [0, 0, 100, 1000]},
  {"label": "Sign In", "type": "Button", "description": "CTA", "box_2d": [400, 100, 450, 300]}
]"""


class FakeBackend:
    """Detection backend returning a canned reply.

    When ``gate`` is set the call blocks until the event is released, which
    lets tests observe the in-flight state.
    """

    def __init__(self, reply: str = DETECTION_REPLY, error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.calls = 0

    async def detect_raw(self, image_bytes: bytes, mime_type: str) -> str:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def detection_service(fake_backend: FakeBackend) -> DetectionService:
    return DetectionService(backend=fake_backend)


# ============================================================================
# Session fixtures
# ============================================================================

@pytest.fixture
def repository() -> InMemoryProjectRepository:
    return InMemoryProjectRepository()


@pytest.fixture
def session(repository: InMemoryProjectRepository, detection_service: DetectionService) -> AnnotationSession:
    """Empty session with the default project and a fake detector."""
    return AnnotationSession(repository=repository, detection=detection_service, container=(800.0, 600.0))


@pytest.fixture
def loaded_session(session: AnnotationSession, png_bytes: bytes) -> AnnotationSession:
    """Session with one imported 800x600 screenshot named ``login.png``."""
    session.import_images([("login.png", png_bytes)])
    return session


@pytest.fixture
def backend_factory() -> Callable[..., FakeBackend]:
    return FakeBackend
