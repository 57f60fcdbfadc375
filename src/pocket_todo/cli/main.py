# src/pocket_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the persisted task list,
runs the console front-end, then waits for outstanding writes.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.store.flush()
    except Exception:
        logger.exception("Failed to flush pending task list writes.")

    storage = state.storage
    try:
        if hasattr(storage, "close"):
            storage.close()
    except Exception:
        logger.debug("Storage close failed.", exc_info=True)


async def run(state: AppState) -> None:
    await state.store.load()
    try:
        await run_console_loop(state)
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    file_level = getattr(logging, level_name, logging.INFO)

    log_dir = settings.data_dir if settings.log_to_file else None
    setup_logging(log_dir=log_dir, file_level=file_level)

    logger.info("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
