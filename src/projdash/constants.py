"""Centralized constants for projdash."""

from __future__ import annotations

APP_NAME = "projdash"

# Storage slot keys
KEY_PROJECTS = "projects"
KEY_USERS = "users"
KEY_SESSION = "currentUser"
STORAGE_FILE_SUFFIX = ".json"
JSON_INDENT = 2

# Logging
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LOG_LEVEL = "INFO"

# Reports
DUE_SOON_DAYS = 7
UNASSIGNED_AGENT = "unassigned"
