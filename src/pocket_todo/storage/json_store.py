# src/pocket_todo/storage/json_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import tempfile
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileKeyValueStore:
    """
    Key-value store kept in one JSON object file.

    Every write rewrites the whole file through a unique temp file in the
    same directory + os.replace, so a crash mid-write leaves the previous
    version in place.
    A file that is not a JSON object of strings makes get_item raise.

    Concurrency:
    - async calls run on one worker thread, in the order they were issued
    - read-modify-replace is held under a lock for direct sync callers too
    """

    def __init__(self, path: str | Path = "storage.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="json-kv")
        logger.info("JsonFileKeyValueStore ready path=%s", self._path)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text("utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    def _get_sync(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def _set_sync(self, key: str, value: str) -> None:
        with self._lock:
            # An unreadable file is replaced rather than blocking every write.
            try:
                data = self._read_all()
            except ValueError:
                logger.warning("Overwriting unreadable storage file %s", self._path)
                data = {}
            data[key] = value
            self._write_all(data)
        logger.debug("kv set key=%s bytes=%d", key, len(value))

    def _remove_sync(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if data.pop(key, None) is not None:
                self._write_all(data)

    async def _run(self, fn, *args):
        return await asyncio.get_running_loop().run_in_executor(self._executor, fn, *args)

    async def get_item(self, key: str) -> str | None:
        return await self._run(self._get_sync, key)

    async def set_item(self, key: str, value: str) -> None:
        await self._run(self._set_sync, key, value)

    async def remove_item(self, key: str) -> None:
        await self._run(self._remove_sync, key)
