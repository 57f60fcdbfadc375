# src/pocket_todo/tasks/task_store.py

"""
In-memory task list mirrored into a durable key-value slot.

The in-memory list is the source of truth for the session:
- every mutation updates the list synchronously, notifies listeners,
  then schedules a write of the *whole* list under one fixed key,
- writes are fire-and-forget on the running event loop; failures are
  logged and never roll back in-memory state,
- overlapping writes are last-write-wins at the backend unless
  guard_stale_writes is enabled (writes are then serialized and superseded
  snapshots are dropped).

Edit mode is transient UI state: Idle -> Editing(task_id, draft) -> Idle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..config import DEFAULT_STORAGE_KEY
from ..core.ports import KeyValueStore, StateListener
from .task_errors import PersistenceError, PersistenceReadError, PersistenceWriteError
from .task_ids import TaskIdGenerator
from .task_models import EditState, Task, decode_task_list, encode_task_list

logger = logging.getLogger(__name__)


class TaskListStore:
    def __init__(
        self,
        storage: KeyValueStore,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        guard_stale_writes: bool = False,
        id_generator: TaskIdGenerator | None = None,
    ) -> None:
        self._storage = storage
        self._key = storage_key
        self._guard_stale_writes = guard_stale_writes
        self._ids = id_generator or TaskIdGenerator()

        self._tasks: list[Task] = []
        self._edit: EditState | None = None
        self._input_text = ""

        self._listeners: list[StateListener] = []
        self._pending: set[asyncio.Task[None]] = set()
        self._write_lock = asyncio.Lock()
        self._write_seq = 0
        self._last_completed_seq = 0
        self._last_error: PersistenceError | None = None

    # ---- read accessors ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def edit_state(self) -> EditState | None:
        return self._edit

    @property
    def input_text(self) -> str:
        return self._input_text

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def last_error(self) -> PersistenceError | None:
        """Most recent recovered persistence error (None if there was none)."""
        return self._last_error

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    def get_task(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- listeners ----

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("State listener failed: %r", listener)

    # ---- load ----

    async def load(self) -> None:
        """
        Replace the in-memory list with the persisted one.

        Missing key -> empty list. Unreadable storage or a malformed blob is
        logged and also yields an empty list; nothing is raised.
        """
        tasks: list[Task] = []
        try:
            blob = await self._storage.get_item(self._key)
        except Exception as e:
            err = PersistenceReadError(f"Failed to read task list key={self._key}")
            err.__cause__ = e
            self._last_error = err
            logger.exception("%s; starting with an empty list", err)
        else:
            if blob is not None:
                try:
                    tasks = decode_task_list(blob)
                except PersistenceReadError as err:
                    self._last_error = err
                    logger.exception("Persisted task list is malformed; starting with an empty list")

        for t in tasks:
            self._ids.observe(t.id)

        self._tasks = tasks
        self._edit = None
        logger.info("Task list loaded key=%s total=%d", self._key, len(tasks))
        self._notify()

    # ---- mutations ----

    def add(self, text: str) -> Task | None:
        """Append a new task; whitespace-only text is ignored (returns None)."""
        title = (text or "").strip()
        if not title:
            logger.debug("add ignored: empty title")
            return None

        task = Task(id=self._ids.next_id(), title=title, completed=False)
        self._tasks.append(task)
        logger.debug("Task added id=%s", task.id)
        self._commit()
        return task

    def delete(self, task_id: int) -> bool:
        """Remove a task. Unknown ids leave the list as is; the list is persisted either way."""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before

        if removed and self._edit is not None and self._edit.task_id == task_id:
            self._edit = None

        logger.debug("Task delete id=%s removed=%s", task_id, removed)
        self._commit()
        return removed

    def toggle_completion(self, task_id: int) -> Task | None:
        updated: Task | None = None
        new_tasks: list[Task] = []
        for t in self._tasks:
            if t.id == task_id:
                t = Task(id=t.id, title=t.title, completed=not t.completed)
                updated = t
            new_tasks.append(t)
        self._tasks = new_tasks

        logger.debug("Task toggle id=%s found=%s", task_id, updated is not None)
        self._commit()
        return updated

    # ---- edit mode ----

    def start_edit(self, task_id: int) -> EditState | None:
        """Enter (or retarget) edit mode with the task's current title as draft."""
        task = self.get_task(task_id)
        if task is None:
            logger.debug("start_edit ignored: unknown id=%s", task_id)
            return None
        self._edit = EditState(task_id=task.id, draft=task.title)
        self._notify()
        return self._edit

    def set_draft(self, text: str) -> None:
        if self._edit is None:
            return
        self._edit = EditState(task_id=self._edit.task_id, draft=text)
        self._notify()

    def save_edit(self) -> Task | None:
        """
        Commit the draft as the edited task's title.

        The draft is stored verbatim: unlike add(), no trimming and no
        empty check.
        """
        edit = self._edit
        if edit is None:
            return None

        updated: Task | None = None
        new_tasks: list[Task] = []
        for t in self._tasks:
            if t.id == edit.task_id:
                t = Task(id=t.id, title=edit.draft, completed=t.completed)
                updated = t
            new_tasks.append(t)
        self._tasks = new_tasks
        self._edit = None

        logger.debug("Task edit saved id=%s found=%s", edit.task_id, updated is not None)
        self._commit()
        return updated

    def cancel_edit(self) -> None:
        self._edit = None
        self._notify()

    # ---- new-task input ----

    def set_input_text(self, text: str) -> None:
        self._input_text = text
        self._notify()

    def submit_input(self) -> Task | None:
        """Add the pending input text as a task; input is cleared only if accepted."""
        task = self.add(self._input_text)
        if task is not None:
            self._input_text = ""
            self._notify()
        return task

    # ---- persistence ----

    def _commit(self) -> None:
        self._notify()
        self._persist()

    def _persist(self) -> None:
        self._write_seq += 1
        seq = self._write_seq
        blob = encode_task_list(self._tasks)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (scripts, sync callers): finish the write inline.
            asyncio.run(self._write(seq, blob))
            return

        task = loop.create_task(self._write(seq, blob))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, seq: int, blob: str) -> None:
        if not self._guard_stale_writes:
            await self._write_once(seq, blob)
            return

        async with self._write_lock:
            if seq < self._write_seq or seq < self._last_completed_seq:
                logger.debug("Dropping superseded write seq=%s latest=%s", seq, self._write_seq)
                return
            await self._write_once(seq, blob)

    async def _write_once(self, seq: int, blob: str) -> None:
        try:
            await self._storage.set_item(self._key, blob)
        except Exception as e:
            err = PersistenceWriteError(f"Failed to persist task list key={self._key} seq={seq}")
            err.__cause__ = e
            self._last_error = err
            logger.exception("%s; keeping in-memory state", err)
            return

        self._last_completed_seq = max(self._last_completed_seq, seq)
        logger.debug("Task list persisted seq=%s", seq)

    async def flush(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
