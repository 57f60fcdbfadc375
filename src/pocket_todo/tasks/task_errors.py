# src/pocket_todo/tasks/task_errors.py

from __future__ import annotations


class PersistenceError(RuntimeError):
    """Base class for durable-store failures. Never surfaced to the user."""


class PersistenceReadError(PersistenceError):
    """Persisted task list could not be read or decoded."""


class PersistenceWriteError(PersistenceError):
    """Persisting the task list failed; in-memory state is kept."""
