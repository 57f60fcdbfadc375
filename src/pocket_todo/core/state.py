# src/pocket_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_store import TaskListStore
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings object (pocket_todo.config.Settings or a test stand-in).
    settings: object

    storage: KeyValueStore
    store: TaskListStore
