# src/pocket_todo/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..cli.commands import format_task_list
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFunc = Callable[[str], Awaitable[str]]
OutputFunc = Callable[[str], None]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


async def _default_input(prompt: str) -> str:
    # input() blocks; keep the event loop free for pending writes.
    return await asyncio.to_thread(input, prompt)


def _handle_plain_text(state: AppState, text: str) -> str | None:
    """
    A bare line replaces the draft (verbatim) while editing, otherwise submits
    a new task (add() trims it).
    """
    store = state.store
    if store.edit_state is not None:
        store.set_draft(text)
        return None

    store.set_input_text(text)
    if store.submit_input() is None:
        return "Title required."
    return None


async def run_console_loop(
    state: AppState,
    *,
    read_line: InputFunc | None = None,
    write: OutputFunc = print,
) -> None:
    """
    Interactive console front-end.

    Re-renders the list after every store change (via subscribe) and forwards
    commands / plain text to the store. Exits on /exit, /quit, EOF or Ctrl+C.
    """
    read_line = read_line or _default_input
    store = state.store

    dirty = True

    def _mark_dirty() -> None:
        nonlocal dirty
        dirty = True

    unsubscribe = store.subscribe(_mark_dirty)
    logger.info("Console connector started.")
    write(f"[{_ts_local()}] Type a task to add it. Use /help for commands, /exit to quit.")

    def emit(text: str) -> None:
        write(f"[{_ts_local()}] {text}")

    try:
        while True:
            if dirty:
                write(format_task_list(store))
                dirty = False

            prompt = "edit> " if store.edit_state is not None else "> "
            try:
                raw_line = await read_line(prompt)
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                break

            user_input = raw_line.strip()
            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                # Only leading whitespace is dropped: drafts keep their spacing.
                reply = command_registry.handle(state, raw_line.lstrip(), emit=emit)
                if reply is None:
                    reply = _handle_plain_text(state, raw_line)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply:
                write(f"[{_ts_local()}] {reply}")

            # Let scheduled writes start before blocking on the next line.
            await asyncio.sleep(0)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
