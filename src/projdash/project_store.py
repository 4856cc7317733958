"""Canonical project collection with write-through persistence."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import Project, unique_by_id
from .storage import Storage

logger = logging.getLogger(__name__)


class ProjectStore:
    """Owns the project list. Every mutation saves the full list before returning."""

    def __init__(self, storage: Storage, projects: Iterable[Project] = ()) -> None:
        self._storage = storage
        self._projects: list[Project] = unique_by_id([p.model_copy(deep=True) for p in projects])

    @classmethod
    def from_storage(cls, storage: Storage) -> ProjectStore:
        """Build a store from the persisted projects slot. Does not write."""
        return cls(storage, storage.load_projects())

    @property
    def projects(self) -> list[Project]:
        """Copies of the stored records; changing them does not touch the store."""
        return [p.model_copy(deep=True) for p in self._projects]

    def __len__(self) -> int:
        return len(self._projects)

    def get(self, project_id: int) -> Project | None:
        for p in self._projects:
            if p.id == project_id:
                return p.model_copy(deep=True)
        return None

    def replace_all(self, projects: Iterable[Project]) -> None:
        self._projects = unique_by_id([p.model_copy(deep=True) for p in projects])
        logger.info("Replaced project collection (%d projects)", len(self._projects))
        self._persist()

    def upsert(self, project: Project) -> None:
        """Replace the record with the same id in place, or append it."""
        stored = project.model_copy(deep=True)
        for i, p in enumerate(self._projects):
            if p.id == stored.id:
                self._projects[i] = stored
                break
        else:
            self._projects.append(stored)
        self._persist()

    def remove(self, project_id: int) -> None:
        """Delete by id. An unknown id leaves the list as is but still saves it."""
        self._projects = [p for p in self._projects if p.id != project_id]
        self._persist()

    def flush(self) -> None:
        self._persist()

    def _persist(self) -> None:
        self._storage.save_projects(self._projects)
