"""Pytest configuration and fixtures for projdash tests."""

import pytest

from projdash.app import AppState
from projdash.controller import AppController
from projdash.models import Project, ProjectStatus, User
from projdash.storage import MemoryBackend, Storage


class RecordingBackend(MemoryBackend):
    """Memory backend that records every write as (key, text)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__(initial)
        self.writes: list[tuple[str, str]] = []

    def write(self, key: str, text: str) -> None:
        self.writes.append((key, text))
        super().write(key, text)

    def writes_for(self, key: str) -> list[str]:
        return [text for k, text in self.writes if k == key]


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def storage(backend):
    return Storage(backend)


@pytest.fixture
def alice():
    return User(email="alice@example.com", name="Alice", password="secret")


@pytest.fixture
def bob():
    return User(email="bob@example.com", name="Bob", password="hunter2")


@pytest.fixture
def sample_projects():
    return [
        Project(id=1, title="Alpha launch", agent="Alice", status=ProjectStatus.UPCOMING, deadline="2026-02-20"),
        Project(
            id=2,
            title="Beta rollout",
            agent="Bob",
            tasks=[{"text": "write docs", "done": False}, {"text": "ship", "done": False}],
            status=ProjectStatus.IN_PROGRESS,
            deadline="2026-02-01",
        ),
        Project(id=3, title="alpha retro", agent="", status=ProjectStatus.DONE, deadline=""),
    ]


@pytest.fixture
def app_state(storage):
    return AppState.from_storage(storage)


@pytest.fixture
def controller(app_state):
    """Controller with no session (login gate showing)."""
    return AppController(app_state)


@pytest.fixture
def signed_in(controller, alice):
    """Controller with alice registered and signed in."""
    controller.sign_up(alice)
    controller.sign_in(alice)
    return controller


@pytest.fixture
def frozen_time():
    """Freeze time for consistent time-dependent tests."""
    from freezegun import freeze_time
    with freeze_time("2026-02-09 10:00:00"):
        yield
