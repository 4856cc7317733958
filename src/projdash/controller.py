"""Application controller: UI-mode state and intent routing."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .app import AppState
from .errors import AuthRequiredError, ProjectNotFoundError, UsageError, ValidationError
from .models import AuthMode, Project, ProjectStatus, Screen, StatusFilter, Tab, User
from .views import ProjectReport, build_report, filter_projects

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = frozenset(Project.model_fields) - {"id"}


@dataclass
class ViewState:
    """Transient UI state. Never persisted."""

    filter: StatusFilter = StatusFilter.ALL
    search: str = ""
    active_tab: Tab = Tab.DASHBOARD
    draft: Project | None = None
    auth_mode: AuthMode = AuthMode.LOGIN


@dataclass
class RenderState:
    """Everything the presentation layer reads for one render."""

    screen: Screen
    projects: list[Project] = field(default_factory=list)
    filtered_projects: list[Project] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    session: User | None = None
    active_tab: Tab = Tab.DASHBOARD
    draft: Project | None = None
    filter: StatusFilter = StatusFilter.ALL
    search: str = ""
    auth_mode: AuthMode = AuthMode.LOGIN


class AppController:
    def __init__(self, state: AppState) -> None:
        self.state = state
        self.view = ViewState()
        self._last_issued_id = 0

    # ------------------------------------------------------------------
    # Render boundary
    # ------------------------------------------------------------------

    @property
    def screen(self) -> Screen:
        if self.state.auth.is_authenticated:
            return Screen.MAIN
        if self.view.auth_mode is AuthMode.SIGNUP:
            return Screen.SIGNUP
        return Screen.LOGIN

    @property
    def filtered_projects(self) -> list[Project]:
        return filter_projects(self.state.projects.projects, self.view.filter, self.view.search)

    @property
    def report(self) -> ProjectReport:
        return build_report(self.state.projects.projects)

    def snapshot(self) -> RenderState:
        return RenderState(
            screen=self.screen,
            projects=self.state.projects.projects,
            filtered_projects=self.filtered_projects,
            users=self.state.auth.users,
            session=self.state.auth.session,
            active_tab=self.view.active_tab,
            draft=self.view.draft,
            filter=self.view.filter,
            search=self.view.search,
            auth_mode=self.view.auth_mode,
        )

    # ------------------------------------------------------------------
    # Navigation, filter, search
    # ------------------------------------------------------------------

    def select_tab(self, tab: Tab | str) -> None:
        self._require_session()
        self.view.active_tab = _coerce(Tab, tab, "tab")

    def set_filter(self, value: StatusFilter | str) -> None:
        self._require_session()
        self.view.filter = _coerce(StatusFilter, value, "filter")

    def set_search(self, text: str) -> None:
        self._require_session()
        self.view.search = text

    # ------------------------------------------------------------------
    # Project modal
    # ------------------------------------------------------------------

    def new_project(self) -> Project:
        """Open the modal on a blank draft and switch to the dashboard."""
        self._require_session()
        self.view.draft = Project(
            id=self._next_project_id(),
            title="",
            agent="",
            tasks=[],
            status=ProjectStatus.UPCOMING,
            deadline="",
        )
        self.view.active_tab = Tab.DASHBOARD
        return self.view.draft

    def edit_project(self, project_id: int) -> Project:
        self._require_session()
        project = self.state.projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        self.view.draft = project
        return self.view.draft

    def update_draft(self, **changes: Any) -> Project:
        """Apply field changes to the open draft. The id cannot change."""
        draft = self._require_draft()
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit project fields: {', '.join(sorted(unknown))}")
        payload = draft.model_dump()
        payload.update(changes)
        try:
            self.view.draft = Project.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid project draft: {e}") from e
        return self.view.draft

    def save_draft(self) -> Project:
        draft = self._require_draft()
        self.state.projects.upsert(draft)
        self.view.draft = None
        return draft

    def cancel_draft(self) -> None:
        self.view.draft = None

    def delete_project(self, project_id: int) -> None:
        self._require_session()
        self.state.projects.remove(project_id)

    def clear_all(self, confirm: Callable[[], bool]) -> bool:
        """Remove every project after ``confirm()`` returns True.

        Returns whether the collection was cleared. A declined confirmation
        leaves the store and storage untouched.
        """
        self._require_session()
        if not confirm():
            logger.info("Clear all projects declined")
            return False
        self.state.projects.replace_all([])
        logger.info("Cleared all projects")
        return True

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def update_users(self, users: Iterable[User]) -> None:
        self._require_session()
        self.state.auth.replace_users(users)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def switch_to_signup(self) -> None:
        self._require_signed_out()
        self.view.auth_mode = AuthMode.SIGNUP

    def switch_to_login(self) -> None:
        self._require_signed_out()
        self.view.auth_mode = AuthMode.LOGIN

    def close_signup(self) -> None:
        self.switch_to_login()

    def sign_up(self, user: User) -> None:
        """Register a user and return to the login prompt. Does not sign in."""
        self._require_signed_out()
        self.state.auth.register_user(user)
        self.view.auth_mode = AuthMode.LOGIN

    def sign_in(self, user: User) -> User:
        """Start a session for an already validated user, as registered."""
        self._require_signed_out()
        registered = self.state.auth.get_user(user.email)
        if registered is None:
            raise UsageError(f"User {user.email!r} is not registered.")
        self.state.auth.login(registered)
        return registered

    def sign_in_with_credentials(self, email: str, password: str) -> User:
        self._require_signed_out()
        user = self.state.auth.find_user(email, password)
        if user is None:
            raise ValidationError("Invalid email or password.")
        self.state.auth.login(user)
        return user

    def sign_out(self) -> None:
        """End the session and reset all view state, auth mode back to login."""
        self.state.auth.logout()
        self.view = ViewState()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _require_session(self) -> User:
        session = self.state.auth.session
        if session is None:
            raise AuthRequiredError()
        return session

    def _require_signed_out(self) -> None:
        if self.state.auth.is_authenticated:
            raise UsageError("Already signed in.")

    def _require_draft(self) -> Project:
        self._require_session()
        if self.view.draft is None:
            raise UsageError("No project is open for editing.")
        return self.view.draft

    def _next_project_id(self) -> int:
        """Millisecond timestamp, bumped past any id already issued or stored."""
        candidate = int(datetime.now(UTC).timestamp() * 1000)
        floor = max(
            [self._last_issued_id, *(p.id for p in self.state.projects.projects)],
        )
        if candidate <= floor:
            candidate = floor + 1
        self._last_issued_id = candidate
        return candidate


def _coerce(enum_type: type[Any], value: Any, label: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        raise ValidationError(f"Invalid {label}: {value!r}") from None
