"""Custom exception hierarchy for projdash."""

from __future__ import annotations


class ProjdashError(Exception):
    """Base class for all projdash errors."""


class UsageError(ValueError, ProjdashError):
    """Intent is not valid in the current application state."""


class ValidationError(ValueError, ProjdashError):
    """Invalid field value or view-state value."""


class ConfigError(ValueError, ProjdashError):
    """Configuration file or value errors."""


class StorageError(ProjdashError):
    """Storage write failures."""


class AuthRequiredError(UsageError):
    def __init__(self) -> None:
        super().__init__("Sign in first.")


class ProjectNotFoundError(ProjdashError):
    def __init__(self, project_id: int) -> None:
        super().__init__(f"Project {project_id} not found.")
