"""Annotation session: the state behind one open UI Mapper window.

The session owns an immutable snapshot of all projects plus the transient
per-window state (active project/raster, map mode, viewport).  Every change
replaces whole values, so an export running against a raster snapshot never
sees a half-applied rename or detection.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from PIL import Image

from ..ai.detector import DetectionService, apply_detection
from ..export import ExportArtifact, ExportFormat, export_raster
from ..utils.validation import validate_label
from ..vision import viewport as vp
from ..vision.decode import decode_rasters
from ..vision.models import Raster, Region
from ..vision.schematic import render_schematic
from .errors import NotFoundError
from .logger import log
from .repository import JsonProjectRepository, Project, ProjectRepository, new_project

DEFAULT_CONTAINER: vp.Size = (1280.0, 800.0)


@dataclass
class ImportReport:
    """Outcome of a batch import."""

    imported: list[Raster] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class AnnotationSession:
    """Projects, active screenshot, map mode and viewport for one user."""

    def __init__(
        self,
        repository: ProjectRepository | None = None,
        detection: DetectionService | None = None,
        container: vp.Size = DEFAULT_CONTAINER,
    ) -> None:
        self.repository = repository or JsonProjectRepository()
        self.detection = detection or DetectionService()
        self.container = container

        self.projects: tuple[Project, ...] = self.repository.load()
        self.active_project_id: str = self.projects[0].id
        self.active_raster_id: str | None = None
        self.schematic_enabled = False
        self.editing_region_id: str | None = None
        self.viewport = vp.ViewportState()

        if self.active_project.screenshots:
            self.select_raster(self.active_project.screenshots[0].id)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @property
    def active_project(self) -> Project:
        return self.get_project(self.active_project_id)

    @property
    def active_raster(self) -> Raster | None:
        if self.active_raster_id is None:
            return None
        return self.active_project.get_screenshot(self.active_raster_id)

    def get_project(self, project_id: str) -> Project:
        for project in self.projects:
            if project.id == project_id:
                return project
        raise NotFoundError(f"Unknown project: {project_id}")

    def find_raster(self, raster_id: str) -> Raster:
        for project in self.projects:
            raster = project.get_screenshot(raster_id)
            if raster is not None:
                return raster
        raise NotFoundError(f"Unknown screenshot: {raster_id}")

    def require_raster(self, raster_id: str | None = None) -> Raster:
        """Return *raster_id* or the active raster."""
        if raster_id is not None:
            return self.find_raster(raster_id)
        raster = self.active_raster
        if raster is None:
            raise NotFoundError("No active screenshot")
        return raster

    # ------------------------------------------------------------------
    # Snapshot replacement
    # ------------------------------------------------------------------
    def _replace_project(self, updated: Project) -> None:
        self.projects = tuple(updated if p.id == updated.id else p for p in self.projects)

    def _replace_raster(self, updated: Raster) -> None:
        self.projects = tuple(
            p.with_screenshot(updated) if p.get_screenshot(updated.id) is not None else p
            for p in self.projects
        )

    # ------------------------------------------------------------------
    # Projects & screenshots
    # ------------------------------------------------------------------
    def create_project(self, name: str) -> Project:
        project = new_project(name.strip() or f"Project {len(self.projects) + 1}")
        self.projects = self.projects + (project,)
        self.active_project_id = project.id
        self.active_raster_id = None
        log.info(f"Created project {project.name} ({project.id})")
        return project

    def select_project(self, project_id: str) -> Project:
        project = self.get_project(project_id)
        self.active_project_id = project.id
        self.active_raster_id = None
        if project.screenshots:
            self.select_raster(project.screenshots[0].id)
        return project

    def import_images(
        self,
        files: Iterable[tuple[str, bytes]],
        container: vp.Size | None = None,
    ) -> ImportReport:
        """Decode and add images to the active project; bad files are skipped."""
        rasters, skipped = decode_rasters(files)
        project = self.active_project
        for raster in rasters:
            project = project.with_screenshot(raster)
        self._replace_project(project)

        if rasters:
            self.select_raster(rasters[-1].id, container)
        log.info(f"Imported {len(rasters)} screenshot(s), skipped {len(skipped)}")
        return ImportReport(imported=rasters, skipped=skipped)

    def select_raster(self, raster_id: str, container: vp.Size | None = None) -> Raster:
        """Activate a screenshot of the active project and re-fit the viewport."""
        raster = self.active_project.get_screenshot(raster_id)
        if raster is None:
            raise NotFoundError(f"Screenshot {raster_id} is not in the active project")
        self.active_raster_id = raster.id
        self.editing_region_id = None
        self.fit_viewport(container)
        return raster

    def remove_raster(self, raster_id: str) -> None:
        self.find_raster(raster_id)
        self.projects = tuple(p.without_screenshot(raster_id) for p in self.projects)
        if self.active_raster_id == raster_id:
            self.active_raster_id = None
            self.viewport = vp.ViewportState()

    # ------------------------------------------------------------------
    # Regions
    # ------------------------------------------------------------------
    async def run_detection(self, raster_id: str | None = None) -> Raster:
        """Detect components and replace the raster's region list.

        On failure the raster is left untouched (still un-analyzed), so the
        caller may retry.
        """
        raster = self.require_raster(raster_id)
        result = await self.detection.detect(raster)

        try:
            current = self.find_raster(raster.id)
        except NotFoundError:
            log.warning(f"Screenshot {raster.id} was removed during detection; result dropped")
            raise
        updated = apply_detection(current, result)
        self._replace_raster(updated)
        return updated

    def rename_region(self, region_id: str, new_label: str, raster_id: str | None = None) -> Region | None:
        """Rename a region; blank labels are ignored and return ``None``."""
        raster = self.require_raster(raster_id)
        if raster.get_region(region_id) is None:
            raise NotFoundError(f"Unknown component: {region_id}")

        valid, message = validate_label(new_label)
        if not valid:
            log.debug(f"Rename of {region_id} ignored: {message}")
            return None

        updated = raster.with_region_renamed(region_id, new_label.strip())
        self._replace_raster(updated)
        self.editing_region_id = None
        return updated.get_region(region_id)

    def clear_regions(self, raster_id: str | None = None) -> Raster:
        raster = self.require_raster(raster_id).cleared()
        self._replace_raster(raster)
        return raster

    def regions_by_category(self, raster_id: str | None = None) -> dict[str, list[Region]]:
        """Group regions by category in first-seen order."""
        grouped: dict[str, list[Region]] = {}
        for region in self.require_raster(raster_id).regions:
            grouped.setdefault(region.component_type, []).append(region)
        return grouped

    # ------------------------------------------------------------------
    # Map mode & label editing
    # ------------------------------------------------------------------
    def set_schematic_display(self, enabled: bool) -> None:
        self.schematic_enabled = enabled

    def toggle_schematic_display(self) -> bool:
        self.schematic_enabled = not self.schematic_enabled
        return self.schematic_enabled

    def begin_edit(self, region_id: str) -> None:
        """Start editing a label; dragging is suppressed meanwhile."""
        if self.require_raster().get_region(region_id) is None:
            raise NotFoundError(f"Unknown component: {region_id}")
        self.editing_region_id = region_id

    def cancel_edit(self) -> None:
        self.editing_region_id = None

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------
    def fit_viewport(self, container: vp.Size | None = None) -> vp.ViewportState:
        if container is not None:
            self.container = container
        raster = self.require_raster()
        self.viewport = vp.fit_viewport(self.container, raster.size)
        return self.viewport

    def pan(self, delta: vp.Point) -> vp.ViewportState:
        self.viewport = vp.pan(self.viewport, delta)
        return self.viewport

    def zoom(self, factor: float) -> vp.ViewportState:
        self.viewport = vp.zoom(self.viewport, factor)
        return self.viewport

    def zoom_in(self) -> vp.ViewportState:
        self.viewport = vp.zoom_in(self.viewport)
        return self.viewport

    def zoom_out(self) -> vp.ViewportState:
        self.viewport = vp.zoom_out(self.viewport)
        return self.viewport

    def reset_view(self) -> vp.ViewportState:
        self.viewport = vp.reset_view(self.viewport)
        return self.viewport

    def pointer_down(self, position: vp.Point, button: int = vp.PRIMARY_BUTTON) -> vp.ViewportState:
        self.viewport = vp.pointer_down(
            self.viewport, position, button=button, editing=self.editing_region_id is not None
        )
        return self.viewport

    def pointer_move(self, position: vp.Point) -> vp.ViewportState:
        self.viewport = vp.pointer_move(self.viewport, position)
        return self.viewport

    def pointer_up(self) -> vp.ViewportState:
        self.viewport = vp.pointer_up(self.viewport)
        return self.viewport

    def pointer_leave(self) -> vp.ViewportState:
        self.viewport = vp.pointer_leave(self.viewport)
        return self.viewport

    # ------------------------------------------------------------------
    # Rendering & export
    # ------------------------------------------------------------------
    def render_schematic(self, raster_id: str | None = None) -> Image.Image:
        return render_schematic(self.require_raster(raster_id))

    def export(self, fmt: ExportFormat | str, filename: str | None = None, raster_id: str | None = None) -> ExportArtifact:
        raster = self.require_raster(raster_id)
        return export_raster(raster, fmt, filename, schematic_enabled=self.schematic_enabled)

    def export_as_png(self, filename: str | None = None) -> ExportArtifact:
        return self.export(ExportFormat.PNG, filename)

    def export_as_jpeg(self, filename: str | None = None) -> ExportArtifact:
        return self.export(ExportFormat.JPEG, filename)

    def export_as_pdf(self, filename: str | None = None) -> ExportArtifact:
        return self.export(ExportFormat.PDF, filename)

    def export_as_csv(self, filename: str | None = None) -> ExportArtifact:
        return self.export(ExportFormat.CSV, filename)

    def export_as_json(self, filename: str | None = None) -> ExportArtifact:
        return self.export(ExportFormat.JSON, filename)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self) -> bool:
        saved = self.repository.save(self.projects)
        if saved:
            log.success("Changes saved")
        return saved
