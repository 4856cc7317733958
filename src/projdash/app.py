"""Application state lifecycle: build from storage at startup, flush at shutdown."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .auth_store import AuthStore
from .config import AppConfig
from .logging_utils import configure_logging
from .project_store import ProjectStore
from .storage import FileBackend, Storage

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Every piece of persistent state the controller works on."""

    storage: Storage
    projects: ProjectStore
    auth: AuthStore

    @classmethod
    def from_storage(cls, storage: Storage) -> AppState:
        return cls(
            storage=storage,
            projects=ProjectStore.from_storage(storage),
            auth=AuthStore.from_storage(storage),
        )

    def close(self) -> None:
        """Final flush of all three storage slots."""
        self.projects.flush()
        self.auth.flush()
        logger.info("Application state flushed")


def open_storage(config: AppConfig) -> Storage:
    return Storage(
        FileBackend(config.data_dir),
        projects_key=config.projects_key,
        users_key=config.users_key,
        session_key=config.session_key,
    )


def open_app(config: AppConfig) -> AppState:
    """Configure logging and load application state from the configured directory."""
    configure_logging(config.log_level, config.log_file)
    state = AppState.from_storage(open_storage(config))
    logger.info(
        "Opened %s: %d projects, %d users, session=%s",
        config.data_dir,
        len(state.projects),
        len(state.auth.users),
        "yes" if state.auth.is_authenticated else "no",
    )
    return state
