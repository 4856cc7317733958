"""Configuration profile: loading, creation, and path mapping."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from .constants import DEFAULT_LOG_LEVEL, KEY_PROJECTS, KEY_SESSION, KEY_USERS
from .errors import ConfigError

_PATH_FIELDS = ("data_dir", "log_file")


class AppConfig(BaseModel):
    data_dir: Path
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Path | None = None
    projects_key: str = KEY_PROJECTS
    users_key: str = KEY_USERS
    session_key: str = KEY_SESSION

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @field_validator("projects_key", "users_key", "session_key")
    @classmethod
    def _check_key(cls, value: str) -> str:
        if not value or any(sep in value for sep in ("/", "\\")):
            raise ValueError("storage keys must be non-empty and contain no path separators")
        return value


def _runtime_app_root() -> Path:
    return Path(__file__).resolve().parent


def map_path(path: str, profile_dir: str | None = None) -> str:
    """Resolve a path string to an absolute path string.

    ~ or ~/...  -> user home directory
    @ or @/...  -> runtime app root (package directory)
    Absolute    -> used as-is
    Relative    -> resolved relative to profile_dir if given; error otherwise
    """
    if path.startswith("@"):
        suffix = path[1:].lstrip("/\\")
        result = (_runtime_app_root() / suffix) if suffix else _runtime_app_root()
        return str(result.resolve())

    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return str(candidate.resolve())

    if profile_dir is not None:
        return str((Path(profile_dir) / candidate).resolve())

    raise ConfigError(
        "Relative paths are not supported here. "
        "Use an absolute path or start with '~/' or '@/'."
    )


def build_config(raw: Any, profile_dir: str | None = None) -> AppConfig:
    """Validate a raw profile mapping and resolve its path fields."""
    if not isinstance(raw, dict):
        raise ConfigError("Profile must be a JSON object")

    resolved = dict(raw)
    for name in _PATH_FIELDS:
        value = resolved.get(name)
        if value is None:
            continue
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{name} must be a non-empty string")
        resolved[name] = map_path(value, profile_dir)

    try:
        return AppConfig.model_validate(resolved)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid profile: {e}") from e


def load_config(path: str) -> AppConfig:
    """Load and validate a JSON profile.

    Raises:
        ConfigError: If the file is missing, malformed, or has invalid fields
    """
    profile_path = Path(map_path(path))

    if not profile_path.exists():
        raise ConfigError(f"Profile not found: {profile_path}")

    try:
        with open(profile_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in profile: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read profile: {profile_path}: {e}") from e

    return build_config(raw, str(profile_path.parent))


def create_config(path: str) -> AppConfig:
    """Write a default profile next to its data directory and return it.

    Defaults:
        - data_dir: "./data" beside the profile
        - log_level: INFO, no log file
    """
    profile_path = Path(map_path(path))
    if profile_path.exists():
        raise ConfigError(f"Profile already exists: {profile_path}")

    raw = {
        "data_dir": "./data",
        "log_level": DEFAULT_LOG_LEVEL,
    }

    profile_path.parent.mkdir(parents=True, exist_ok=True)
    with open(profile_path, "w", encoding="utf-8") as f:
        json.dump(raw, f, indent=2, ensure_ascii=False)

    return build_config(raw, str(profile_path.parent))


def default_config(data_dir: Path) -> AppConfig:
    return AppConfig(data_dir=data_dir)
