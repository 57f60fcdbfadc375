# src/pocket_todo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

One Settings object for the whole app; nothing here touches the disk
except python-dotenv reading a local .env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "POCKET_TODO"

STORAGE_BACKENDS = ("sqlite", "json")
DEFAULT_STORAGE_KEY = "@tasks"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    return v if v in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    kv_db_path: Path
    kv_json_path: Path

    # ---- Persistence ----
    storage_backend: str
    storage_key: str
    guard_stale_writes: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "pocket-todo").strip() or "pocket-todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/pocket_todo"))
        kv_db_path = _env_path(_k("KV_DB_PATH"), data_dir / "storage.sqlite3")
        kv_json_path = _env_path(_k("KV_JSON_PATH"), data_dir / "storage.json")

        storage_backend = _env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "sqlite")
        storage_key = _env(_k("STORAGE_KEY"), DEFAULT_STORAGE_KEY).strip() or DEFAULT_STORAGE_KEY
        guard_stale_writes = _env_bool(_k("GUARD_STALE_WRITES"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            kv_db_path=kv_db_path,
            kv_json_path=kv_json_path,
            storage_backend=storage_backend,
            storage_key=storage_key,
            guard_stale_writes=guard_stale_writes,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
