# src/pocket_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the key-value backend and wires it into the task store.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStore
from ..core.state import AppState
from ..storage.json_store import JsonFileKeyValueStore
from ..storage.sqlite_store import SqliteKeyValueStore
from ..tasks.task_store import TaskListStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.kv_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.kv_json_path.parent.mkdir(parents=True, exist_ok=True)


def build_storage(settings) -> KeyValueStore:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    if backend == "json":
        return JsonFileKeyValueStore(settings.kv_json_path)
    if backend != "sqlite":
        logger.warning("Unknown storage backend %r, using sqlite", backend)
    return SqliteKeyValueStore(settings.kv_db_path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The task list is not loaded here; call `await state.store.load()` on the event loop.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = build_storage(settings)
    store = TaskListStore(
        storage,
        storage_key=settings.storage_key,
        guard_stale_writes=bool(getattr(settings, "guard_stale_writes", False)),
    )
    return AppState(settings=settings, storage=storage, store=store)
