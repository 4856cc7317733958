"""Domain models for projdash."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, TypeAdapter


class ProjectStatus(StrEnum):
    UPCOMING = "upcoming"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class StatusFilter(StrEnum):
    """Dashboard filter selector: every project status plus 'all'."""

    ALL = "all"
    UPCOMING = "upcoming"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Tab(StrEnum):
    DASHBOARD = "dashboard"
    PROJECTS = "projects"
    REPORTS = "reports"
    SETTINGS = "settings"


class AuthMode(StrEnum):
    LOGIN = "login"
    SIGNUP = "signup"


class Screen(StrEnum):
    LOGIN = "login"
    SIGNUP = "signup"
    MAIN = "main"


class Project(BaseModel):
    id: int
    title: str = ""
    agent: str = ""
    # Task records belong to the editing UI; the core only enumerates them.
    tasks: list[Any] = []
    status: ProjectStatus = ProjectStatus.UPCOMING
    deadline: str = ""  # YYYY-MM-DD or empty


class User(BaseModel):
    email: str  # identity key
    name: str
    password: str = ""


ProjectList = TypeAdapter(list[Project])
UserList = TypeAdapter(list[User])


def unique_by_id(projects: list[Project]) -> list[Project]:
    """Collapse repeated ids, last record wins, first position kept."""
    positions: dict[int, int] = {}
    result: list[Project] = []
    for project in projects:
        if project.id in positions:
            result[positions[project.id]] = project
        else:
            positions[project.id] = len(result)
            result.append(project)
    return result
