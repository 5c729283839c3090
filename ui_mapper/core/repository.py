"""Project storage.

Projects are immutable snapshots; the repository only loads and saves whole
snapshots, so nothing else in the package touches storage directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from ..utils.file_utils import get_timestamp_ms, load_json, save_json
from ..vision.models import Raster
from .config import config
from .logger import log


@dataclass(frozen=True, slots=True)
class Project:
    """Named collection of screenshots."""

    id: str
    name: str
    screenshots: tuple[Raster, ...] = ()
    created_at: int = 0

    def get_screenshot(self, raster_id: str) -> Raster | None:
        for raster in self.screenshots:
            if raster.id == raster_id:
                return raster
        return None

    def with_screenshot(self, raster: Raster) -> Project:
        """Replace the screenshot with the same id, or append it."""
        if self.get_screenshot(raster.id) is None:
            return replace(self, screenshots=self.screenshots + (raster,))
        return replace(
            self,
            screenshots=tuple(raster if item.id == raster.id else item for item in self.screenshots),
        )

    def without_screenshot(self, raster_id: str) -> Project:
        return replace(self, screenshots=tuple(s for s in self.screenshots if s.id != raster_id))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "screenshots": [raster.to_dict() for raster in self.screenshots],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            screenshots=tuple(Raster.from_dict(item) for item in data.get("screenshots", [])),
            created_at=int(data.get("createdAt", 0)),
        )


def new_project(name: str) -> Project:
    stamp = get_timestamp_ms()
    return Project(id=f"proj-{stamp}", name=name, created_at=stamp)


def default_projects() -> tuple[Project, ...]:
    """Snapshot used when storage is empty or unreadable."""
    return (Project(id="default", name=config.default_project_name, created_at=get_timestamp_ms()),)


class ProjectRepository(ABC):
    """Load/save interface for project snapshots."""

    @abstractmethod
    def load(self) -> tuple[Project, ...]:
        """Return the stored projects (never empty)."""
        ...

    @abstractmethod
    def save(self, projects: Iterable[Project]) -> bool:
        """Persist the snapshot; return whether it was written."""
        ...


class InMemoryProjectRepository(ProjectRepository):
    """Repository kept in process memory (tests, ephemeral sessions)."""

    def __init__(self, projects: Iterable[Project] = ()) -> None:
        self._projects = tuple(projects)

    def load(self) -> tuple[Project, ...]:
        return self._projects or default_projects()

    def save(self, projects: Iterable[Project]) -> bool:
        self._projects = tuple(projects)
        return True


class JsonProjectRepository(ProjectRepository):
    """All projects in one JSON document on disk."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path or config.get_storage_path()

    def load(self) -> tuple[Project, ...]:
        data = load_json(self.path)
        if not isinstance(data, list) or not data:
            return default_projects()
        try:
            projects = tuple(Project.from_dict(item) for item in data)
        except (KeyError, TypeError, ValueError) as exc:
            log.error(f"Error loading saved projects from {self.path}: {exc}")
            return default_projects()
        log.info(f"Loaded {len(projects)} project(s) from {self.path}")
        return projects

    def save(self, projects: Iterable[Project]) -> bool:
        return save_json([project.to_dict() for project in projects], self.path)
