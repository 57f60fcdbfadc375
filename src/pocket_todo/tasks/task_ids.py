# src/pocket_todo/tasks/task_ids.py

from __future__ import annotations

import time
from collections.abc import Callable


class TaskIdGenerator:
    """
    Millisecond-timestamp ids with a per-process tie-breaker.

    Ids stay close to wall-clock time but are strictly increasing, even for
    several calls within the same millisecond or after the clock steps back.
    """

    def __init__(self, clock_ms: Callable[[], int] | None = None) -> None:
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._last = 0

    def next_id(self) -> int:
        nid = max(int(self._clock_ms()), self._last + 1)
        self._last = nid
        return nid

    def observe(self, existing_id: int) -> None:
        """Make sure future ids are greater than an id loaded from storage."""
        if existing_id > self._last:
            self._last = existing_id
