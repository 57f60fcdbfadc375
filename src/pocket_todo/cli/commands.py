# src/pocket_todo/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_store import TaskListStore

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_COMMAND_RE = re.compile(r"/(\S+)(?:\s(.*))?\Z", re.DOTALL)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw_args: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw_args: bool = False,
    ) -> None:
        """
        raw_args=True passes everything after "/name " as a single argument,
        whitespace untouched (empty list when there is nothing).
        """
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
        if raw_args:
            self._raw_args.update([key, *(a.lower() for a in aliases)])

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        m = _COMMAND_RE.match(line)
        if m is None:
            return "Empty command. Use /help to list available commands."

        name = m.group(1).lower()
        rest = m.group(2) or ""
        if name in self._raw_args:
            args = [rest] if rest else []
        else:
            args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Plain text adds a task (or replaces the draft while editing).")
        lines.append("  Titles starting with \"/\" are read as commands; use /add /title for those.")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task_list(store: TaskListStore) -> str:
    """Render the list the way the console shows it (1-based positions)."""
    tasks = store.tasks
    if not tasks:
        return "Todo List\n  (empty)"

    edit = store.edit_state
    lines = ["Todo List"]
    for i, t in enumerate(tasks, start=1):
        mark = "[x]" if t.completed else "[ ]"
        lines.append(f"  {i}. {mark} {t.title}")
        if edit is not None and edit.task_id == t.id:
            lines.append(f"       editing -> {edit.draft!r}  (/save or /cancel)")
    return "\n".join(lines)


def resolve_task_ref(store: TaskListStore, raw: str) -> int | None:
    """
    Map a user reference to a task id.

    Accepts a 1-based list position first, then a literal task id.
    """
    raw = raw.strip().rstrip(".")
    if not raw.isdigit():
        return None
    n = int(raw)
    tasks = store.tasks
    if 1 <= n <= len(tasks):
        return tasks[n - 1].id
    if store.get_task(n) is not None:
        return n
    return None


def _ref_or_error(state: AppState, args: list[str], usage: str) -> int | str:
    if len(args) != 1:
        return usage
    tid = resolve_task_ref(state.store, args[0])
    if tid is None:
        return f"No task {args[0]}."
    return tid


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_task_list(state.store)


def cmd_add(state: AppState, args: list[str]) -> str:
    task = state.store.add(" ".join(args))
    if task is None:
        return "Title required."
    return f"Added: {task.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    ref = _ref_or_error(state, args, "Usage: /done <n>")
    if isinstance(ref, str):
        return ref
    task = state.store.toggle_completion(ref)
    if task is None:
        return f"No task {args[0]}."
    return f"{'Completed' if task.completed else 'Reopened'}: {task.title}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    ref = _ref_or_error(state, args, "Usage: /rm <n>")
    if isinstance(ref, str):
        return ref
    title = getattr(state.store.get_task(ref), "title", "")
    state.store.delete(ref)
    return f"Removed: {title}"


def cmd_edit(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /edit <n>  -> start editing task n (draft = current title)

    Type plain text or /draft <text> to change the draft, then /save or /cancel.
    """
    ref = _ref_or_error(state, args, "Usage: /edit <n>")
    if isinstance(ref, str):
        return ref
    edit = state.store.start_edit(ref)
    if edit is None:
        return f"No task {args[0]}."
    if emit:
        emit("Type the new title, then /save or /cancel.")
    return f"Editing: {edit.draft}"


def cmd_draft(state: AppState, args: list[str]) -> str:
    if state.store.edit_state is None:
        return "Not editing. Use /edit <n> first."
    state.store.set_draft(" ".join(args))
    return f"Draft: {state.store.edit_state.draft!r}"  # type: ignore[union-attr]


def cmd_save(state: AppState, args: list[str]) -> str:
    if state.store.edit_state is None:
        return "Not editing."
    task = state.store.save_edit()
    if task is None:
        return "Edited task no longer exists."
    return f"Saved: {task.title}"


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.store.edit_state is None:
        return "Not editing."
    state.store.cancel_edit()
    return "Edit cancelled."


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    settings = state.settings
    done = sum(1 for t in store.tasks if t.completed)
    err = store.last_error
    return (
        "Status:\n"
        f"  Tasks: {len(store.tasks)} ({done} done)\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} key={store.storage_key}\n"
        f"  Pending writes: {store.pending_writes}\n"
        f"  Last storage error: {err if err is not None else 'none'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>.", raw_args=True)
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n>.", aliases=["delete"])
registry.register("edit", cmd_edit, help_text="Edit a task title: /edit <n>.")
registry.register("draft", cmd_draft, help_text="Replace the draft: /draft <text>.", raw_args=True)
registry.register("save", cmd_save, help_text="Save the edited title.")
registry.register("cancel", cmd_cancel, help_text="Discard the draft.")
registry.register("status", cmd_status, help_text="Show storage status.")
