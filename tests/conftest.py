# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from pocket_todo.core.state import AppState
from pocket_todo.tasks.task_store import TaskListStore

from .fakes import FakeKeyValueStore

STORAGE_KEY = "@tasks"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="pocket-todo-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=tmp_path,
        kv_db_path=tmp_path / "storage.sqlite3",
        kv_json_path=tmp_path / "storage.json",
        storage_backend="sqlite",
        storage_key=STORAGE_KEY,
        guard_stale_writes=False,
    )


@pytest.fixture()
def kv() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture()
def store(kv: FakeKeyValueStore) -> TaskListStore:
    return TaskListStore(kv, storage_key=STORAGE_KEY)


@pytest.fixture()
def state(settings: SimpleNamespace, kv: FakeKeyValueStore, store: TaskListStore) -> AppState:
    """AppState wired with the in-memory key-value fake."""
    return AppState(settings=settings, storage=kv, store=store)
