"""Key-value persistence for projects, users, and the current session."""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from .constants import JSON_INDENT, KEY_PROJECTS, KEY_SESSION, KEY_USERS, STORAGE_FILE_SUFFIX
from .errors import StorageError
from .models import Project, ProjectList, User, UserList, unique_by_id

logger = logging.getLogger(__name__)


class StorageKind(StrEnum):
    PROJECTS = "projects"
    USERS = "users"
    SESSION = "session"


class Backend(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, text: str) -> None: ...


class FileBackend:
    """One JSON file per key under a root directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}{STORAGE_FILE_SUFFIX}"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, text: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")


class MemoryBackend:
    """In-process backend; values live as long as the object does."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, text: str) -> None:
        self.values[key] = text


class Storage:
    """Typed load/save over a backend.

    Loads never fail: an absent, unreadable, malformed, or wrongly-shaped
    slot yields the default for its kind (empty list, or None for the
    session). Saves raise StorageError when the backend cannot write.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        projects_key: str = KEY_PROJECTS,
        users_key: str = KEY_USERS,
        session_key: str = KEY_SESSION,
    ) -> None:
        self.backend = backend
        self.keys = {
            StorageKind.PROJECTS: projects_key,
            StorageKind.USERS: users_key,
            StorageKind.SESSION: session_key,
        }

    def load(self, kind: StorageKind) -> Any:
        kind = StorageKind(kind)
        key = self.keys[kind]
        try:
            text = self.backend.read(key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read storage slot %r, using default: %s", key, e)
            return _default_for(kind)
        if text is None:
            return _default_for(kind)

        try:
            data = json.loads(text)
            return _validate(kind, data)
        except PydanticValidationError as e:
            logger.warning(
                "Storage slot %r does not match the %s shape, using default: %s",
                key,
                kind.value,
                e.error_count(),
            )
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, oversized integers, and nesting too deep to decode
            logger.warning("Invalid JSON in storage slot %r, using default: %s", key, e)
        return _default_for(kind)

    def save(self, kind: StorageKind, value: Any) -> None:
        kind = StorageKind(kind)
        key = self.keys[kind]
        text = json.dumps(_dump(kind, value), indent=JSON_INDENT, ensure_ascii=False)
        try:
            self.backend.write(key, text)
        except OSError as e:
            raise StorageError(f"Failed to save storage slot {key!r}: {e}") from e
        logger.debug("Saved storage slot %r", key)

    def load_projects(self) -> list[Project]:
        return self.load(StorageKind.PROJECTS)

    def save_projects(self, projects: list[Project]) -> None:
        self.save(StorageKind.PROJECTS, projects)

    def load_users(self) -> list[User]:
        return self.load(StorageKind.USERS)

    def save_users(self, users: list[User]) -> None:
        self.save(StorageKind.USERS, users)

    def load_session(self) -> User | None:
        return self.load(StorageKind.SESSION)

    def save_session(self, user: User | None) -> None:
        self.save(StorageKind.SESSION, user)


def _default_for(kind: StorageKind) -> Any:
    if kind is StorageKind.SESSION:
        return None
    return []


def _validate(kind: StorageKind, data: Any) -> Any:
    if kind is StorageKind.PROJECTS:
        return unique_by_id(ProjectList.validate_python(data))
    if kind is StorageKind.USERS:
        return UserList.validate_python(data)
    if data is None:
        return None
    return User.model_validate(data)


def _dump(kind: StorageKind, value: Any) -> Any:
    if kind is StorageKind.PROJECTS:
        return ProjectList.dump_python(list(value), mode="json")
    if kind is StorageKind.USERS:
        return UserList.dump_python(list(value), mode="json")
    if value is None:
        return None
    return value.model_dump(mode="json")
