"""API route definitions for the UI Mapper framework."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from ..core.errors import (
    DecodeError,
    DetectionBusyError,
    DetectionError,
    NotFoundError,
    PreconditionError,
    UIMapperError,
)
from ..core.logger import log
from ..core.repository import Project
from ..core.session import AnnotationSession
from ..export import export_raster
from ..vision import viewport as vp
from ..vision.models import Raster

# Create router instances
project_router = APIRouter()
screenshot_router = APIRouter()
session_router = APIRouter()

# Global session instance
session_instance: Optional[AnnotationSession] = None


def get_session() -> AnnotationSession:
    """Get or create the global annotation session."""
    global session_instance
    if session_instance is None:
        session_instance = AnnotationSession()
    return session_instance


def set_session(session: Optional[AnnotationSession]) -> None:
    """Install a session (or clear it so the next request creates one)."""
    global session_instance
    session_instance = session


def _http_error(exc: Exception) -> HTTPException:
    """Map domain errors onto HTTP status codes."""
    if isinstance(exc, NotFoundError):
        status = 404
    elif isinstance(exc, (PreconditionError, DetectionBusyError)):
        status = 409
    elif isinstance(exc, DecodeError):
        status = 422
    elif isinstance(exc, DetectionError):
        status = 502
    elif isinstance(exc, ValueError):
        status = 400
    else:
        status = 500
    log.error(f"{type(exc).__name__}: {exc}")
    return HTTPException(status_code=status, detail=str(exc))


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and an RFC 5987 UTF-8 name."""
    fallback = "".join(ch for ch in filename if 32 <= ord(ch) < 127 and ch not in '"\\').strip()
    encoded = quote(filename, safe="")
    return f"attachment; filename=\"{fallback or 'export'}\"; filename*=UTF-8''{encoded}"


# Pydantic models for request/response
class CreateProjectRequest(BaseModel):
    """Request model for project creation."""
    name: str


class RenameRequest(BaseModel):
    """Request model for renaming a component."""
    label: str


class MapModeRequest(BaseModel):
    """Request model for toggling schematic map mode."""
    enabled: bool


class ContainerRequest(BaseModel):
    """Viewer container size used to fit the viewport."""
    width: float
    height: float


class PanRequest(BaseModel):
    dx: float
    dy: float


class ZoomRequest(BaseModel):
    factor: float


class ProjectResponse(BaseModel):
    """Response model for project listings."""
    id: str
    name: str
    created_at: int
    screenshot_ids: List[str]
    active: bool = False


class ScreenshotResponse(BaseModel):
    """Response model for a screenshot and its components."""
    id: str
    name: str
    width: int
    height: int
    analyzed: bool
    components: List[Dict[str, Any]]


class ImportResponse(BaseModel):
    imported: List[ScreenshotResponse]
    skipped: List[str]


class ViewportResponse(BaseModel):
    zoom: float
    offset_x: float
    offset_y: float
    dragging: bool
    transform: str


def _project_response(project: Project, session: AnnotationSession) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        created_at=project.created_at,
        screenshot_ids=[s.id for s in project.screenshots],
        active=project.id == session.active_project_id,
    )


def _screenshot_response(raster: Raster) -> ScreenshotResponse:
    return ScreenshotResponse(
        id=raster.id,
        name=raster.name,
        width=raster.width,
        height=raster.height,
        analyzed=raster.analyzed,
        components=[region.to_dict() for region in raster.regions],
    )


def _viewport_response(state: vp.ViewportState) -> ViewportResponse:
    return ViewportResponse(
        zoom=state.zoom,
        offset_x=state.offset[0],
        offset_y=state.offset[1],
        dragging=state.is_dragging,
        transform=vp.css_transform(state),
    )


# Project routes
@project_router.get("", response_model=List[ProjectResponse])
async def list_projects():
    """List all projects."""
    session = get_session()
    return [_project_response(p, session) for p in session.projects]


@project_router.post("", response_model=ProjectResponse)
async def create_project(request: CreateProjectRequest):
    """Create a project and make it active."""
    session = get_session()
    project = session.create_project(request.name)
    return _project_response(project, session)


@project_router.post("/{project_id}/select", response_model=ProjectResponse)
async def select_project(project_id: str):
    """Make a project active."""
    session = get_session()
    try:
        project = session.select_project(project_id)
    except UIMapperError as e:
        raise _http_error(e)
    return _project_response(project, session)


@project_router.post("/{project_id}/screenshots", response_model=ImportResponse)
async def upload_screenshots(project_id: str, files: List[UploadFile] = File(...)):
    """Import screenshots into a project; undecodable files are reported as skipped."""
    session = get_session()
    try:
        session.select_project(project_id)
        payloads = [(f.filename or "screenshot", await f.read()) for f in files]
        report = session.import_images(payloads)
    except UIMapperError as e:
        raise _http_error(e)
    return ImportResponse(
        imported=[_screenshot_response(r) for r in report.imported],
        skipped=report.skipped,
    )


@project_router.post("/save")
async def save_projects():
    """Persist all projects."""
    saved = get_session().save()
    if not saved:
        raise HTTPException(status_code=500, detail="Failed to save projects")
    return {"message": "Changes saved"}


# Screenshot routes
@screenshot_router.get("/{raster_id}", response_model=ScreenshotResponse)
async def get_screenshot(raster_id: str):
    """Get a screenshot with its components."""
    try:
        return _screenshot_response(get_session().find_raster(raster_id))
    except UIMapperError as e:
        raise _http_error(e)


@screenshot_router.delete("/{raster_id}")
async def delete_screenshot(raster_id: str):
    """Remove a screenshot and its components."""
    try:
        get_session().remove_raster(raster_id)
    except UIMapperError as e:
        raise _http_error(e)
    return {"message": "Screenshot removed"}


@screenshot_router.post("/{raster_id}/select", response_model=ViewportResponse)
async def select_screenshot(raster_id: str, container: Optional[ContainerRequest] = None):
    """Activate a screenshot and fit the viewport to the container."""
    session = get_session()
    size = (container.width, container.height) if container else None
    try:
        session.select_raster(raster_id, size)
    except UIMapperError as e:
        raise _http_error(e)
    return _viewport_response(session.viewport)


@screenshot_router.post("/{raster_id}/analyze", response_model=ScreenshotResponse)
async def analyze_screenshot(raster_id: str):
    """Run component detection on a screenshot."""
    try:
        raster = await get_session().run_detection(raster_id)
    except UIMapperError as e:
        raise _http_error(e)
    return _screenshot_response(raster)


@screenshot_router.patch("/{raster_id}/components/{component_id}")
async def rename_component(raster_id: str, component_id: str, request: RenameRequest):
    """Rename one component."""
    try:
        region = get_session().rename_region(component_id, request.label, raster_id=raster_id)
    except UIMapperError as e:
        raise _http_error(e)
    if region is None:
        raise HTTPException(status_code=400, detail="Label must not be blank")
    return region.to_dict()


@screenshot_router.delete("/{raster_id}/components", response_model=ScreenshotResponse)
async def clear_components(raster_id: str):
    """Delete all components; the screenshot becomes un-analyzed again."""
    try:
        raster = get_session().clear_regions(raster_id)
    except UIMapperError as e:
        raise _http_error(e)
    return _screenshot_response(raster)


@screenshot_router.get("/{raster_id}/export/{fmt}")
async def export_screenshot(
    raster_id: str,
    fmt: str,
    filename: Optional[str] = None,
):
    """Download an export; rendered formats follow the session's map mode."""
    session = get_session()
    try:
        raster = session.find_raster(raster_id)
        artifact = export_raster(raster, fmt, filename, schematic_enabled=session.schematic_enabled)
    except (UIMapperError, ValueError) as e:
        raise _http_error(e)
    return Response(
        content=artifact.data,
        media_type=artifact.media_type,
        headers={"Content-Disposition": _content_disposition(artifact.filename)},
    )


# Session routes: map mode and viewport of the active screenshot
@session_router.put("/map-mode")
async def set_map_mode(request: MapModeRequest):
    session = get_session()
    session.set_schematic_display(request.enabled)
    return {"enabled": session.schematic_enabled}


@session_router.get("/viewport", response_model=ViewportResponse)
async def get_viewport():
    return _viewport_response(get_session().viewport)


@session_router.post("/viewport/pan", response_model=ViewportResponse)
async def pan_viewport(request: PanRequest):
    return _viewport_response(get_session().pan((request.dx, request.dy)))


@session_router.post("/viewport/zoom", response_model=ViewportResponse)
async def zoom_viewport(request: ZoomRequest):
    try:
        state = get_session().zoom(request.factor)
    except ValueError as e:
        raise _http_error(e)
    return _viewport_response(state)


@session_router.post("/viewport/reset", response_model=ViewportResponse)
async def reset_viewport():
    return _viewport_response(get_session().reset_view())
