"""Tests for the project store."""

import json

from projdash.models import Project, ProjectStatus
from projdash.project_store import ProjectStore
from projdash.storage import Storage


def _persisted_ids(backend) -> list[int]:
    return [p["id"] for p in json.loads(backend.values["projects"])]


def test_from_storage_loads_without_writing(backend, storage, sample_projects) -> None:
    storage.save_projects(sample_projects)
    backend.writes.clear()

    store = ProjectStore.from_storage(storage)

    assert [p.id for p in store.projects] == [1, 2, 3]
    assert backend.writes == []


def test_upsert_appends_new_id(backend, storage) -> None:
    store = ProjectStore(storage)
    store.upsert(Project(id=1, title="Alpha"))
    store.upsert(Project(id=2, title="Beta"))

    assert [p.id for p in store.projects] == [1, 2]
    assert _persisted_ids(backend) == [1, 2]
    assert len(backend.writes_for("projects")) == 2


def test_upsert_replaces_whole_record_in_place(storage) -> None:
    store = ProjectStore(storage)
    store.upsert(Project(id=1, title="Alpha", agent="Alice", deadline="2026-03-01"))
    store.upsert(Project(id=2, title="Beta"))
    store.upsert(Project(id=1, title="Alpha v2"))

    assert [p.id for p in store.projects] == [1, 2]
    replaced = store.get(1)
    assert replaced.title == "Alpha v2"
    # no field-level merge
    assert replaced.agent == ""
    assert replaced.deadline == ""


def test_upsert_sequence_keeps_one_record_per_id_last_write_wins(storage) -> None:
    store = ProjectStore(storage)
    writes = [
        Project(id=3, title="c1"),
        Project(id=1, title="a1"),
        Project(id=3, title="c2", status=ProjectStatus.DONE),
        Project(id=2, title="b1"),
        Project(id=1, title="a2"),
    ]
    for p in writes:
        store.upsert(p)

    assert [(p.id, p.title) for p in store.projects] == [(3, "c2"), (1, "a2"), (2, "b1")]
    assert store.get(3).status == ProjectStatus.DONE


def test_upsert_is_idempotent(storage) -> None:
    once = ProjectStore(Storage(type(storage.backend)()))
    twice = ProjectStore(storage)
    record = Project(id=9, title="Same", tasks=[{"t": 1}])

    once.upsert(record)
    twice.upsert(record)
    twice.upsert(record)

    assert once.projects == twice.projects


def test_store_keeps_its_own_copy(storage) -> None:
    store = ProjectStore(storage)
    record = Project(id=1, title="Original", tasks=[])
    store.upsert(record)

    record.title = "Mutated outside"
    record.tasks.append("leak")

    assert store.get(1).title == "Original"
    assert store.get(1).tasks == []


def test_handed_out_records_are_copies(backend, storage) -> None:
    store = ProjectStore(storage, [Project(id=1, title="One"), Project(id=2, title="Two")])

    store.projects[1].id = 1
    store.get(2).title = "Changed outside"

    assert [p.id for p in store.projects] == [1, 2]
    assert store.get(2).title == "Two"
    assert backend.writes == []


def test_remove_existing(backend, storage) -> None:
    store = ProjectStore(storage, [Project(id=1), Project(id=2)])
    store.remove(1)

    assert [p.id for p in store.projects] == [2]
    assert _persisted_ids(backend) == [2]


def test_remove_absent_id_persists_unchanged_collection_once(backend, storage) -> None:
    store = ProjectStore(storage, [Project(id=1), Project(id=2)])
    before = store.projects
    backend.writes.clear()

    store.remove(99)

    assert store.projects == before
    assert len(backend.writes_for("projects")) == 1
    assert _persisted_ids(backend) == [1, 2]


def test_replace_all_accepts_any_sequence_and_persists(backend, storage) -> None:
    store = ProjectStore(storage, [Project(id=1)])
    store.replace_all(p for p in (Project(id=5), Project(id=6)))

    assert [p.id for p in store.projects] == [5, 6]
    assert _persisted_ids(backend) == [5, 6]


def test_replace_all_collapses_duplicate_ids(storage) -> None:
    store = ProjectStore(storage)
    store.replace_all([Project(id=1, title="x"), Project(id=1, title="y")])
    assert [(p.id, p.title) for p in store.projects] == [(1, "y")]


def test_scenario_upsert_filter_remove_clear(backend, storage) -> None:
    from projdash.views import filter_projects

    store = ProjectStore(storage)
    store.upsert(Project(id=1, title="Alpha", status=ProjectStatus.UPCOMING))
    store.upsert(Project(id=2, title="Beta", status=ProjectStatus.DONE))

    assert [p.id for p in filter_projects(store.projects, "done", "")] == [2]

    store.remove(1)
    assert [p.id for p in store.projects] == [2]

    store.replace_all([])
    assert store.projects == []
    assert json.loads(backend.values["projects"]) == []


def test_projects_property_returns_copy_of_list(storage) -> None:
    store = ProjectStore(storage, [Project(id=1)])
    listing = store.projects
    listing.clear()
    assert len(store) == 1
