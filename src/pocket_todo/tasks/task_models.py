# src/pocket_todo/tasks/task_models.py

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .task_errors import PersistenceReadError


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "completed": self.completed}


@dataclass(frozen=True, slots=True)
class EditState:
    """Transient edit-mode state; never persisted."""

    task_id: int
    draft: str


def _task_from_dict(raw: Any, index: int) -> Task:
    if not isinstance(raw, dict):
        raise PersistenceReadError(f"item #{index} is not an object")

    tid = raw.get("id")
    title = raw.get("title")
    completed = raw.get("completed")

    # bool is a subclass of int; reject it as an id.
    if not isinstance(tid, int) or isinstance(tid, bool):
        raise PersistenceReadError(f"item #{index} has no integer id")
    if not isinstance(title, str):
        raise PersistenceReadError(f"item #{index} has no string title")
    if not isinstance(completed, bool):
        raise PersistenceReadError(f"item #{index} has no boolean completed flag")

    return Task(id=tid, title=title, completed=completed)


def encode_task_list(tasks: Iterable[Task]) -> str:
    """Serialize the whole list as a JSON array of {id, title, completed}."""
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)


def decode_task_list(blob: str) -> list[Task]:
    """
    Parse a persisted blob back into tasks.

    Raises PersistenceReadError on anything that is not a JSON array of
    well-formed task objects with unique ids. Unknown keys are ignored.
    """
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise PersistenceReadError("task list blob is not valid JSON") from e

    if not isinstance(data, list):
        raise PersistenceReadError("task list blob is not a JSON array")

    tasks = [_task_from_dict(raw, i) for i, raw in enumerate(data)]

    seen: set[int] = set()
    for t in tasks:
        if t.id in seen:
            raise PersistenceReadError(f"duplicate task id {t.id}")
        seen.add(t.id)

    return tasks
