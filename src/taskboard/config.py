# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time: without an API URL/key the app runs
  on the local record store (offline mode).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKBOARD"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    local_store_path: Path
    seed_demo_data: bool

    # ---- Remote record API ----
    api_base_url: str
    api_key: str | None
    project_id: str
    api_connect_timeout: float
    api_read_timeout: float

    # ---- Quick-add defaults ----
    default_category: str
    default_priority: str

    @property
    def remote_enabled(self) -> bool:
        return bool(self.api_base_url.strip()) and bool((self.api_key or "").strip())

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard").strip() or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))
        local_store_path = _env_path(_k("LOCAL_STORE_PATH"), data_dir / "records.json")
        seed_demo_data = _env_bool(_k("SEED_DEMO_DATA"), True)

        api_base_url = _env(_k("API_BASE_URL"), "").strip()
        api_key = _env(_k("API_KEY"), "").strip() or None
        project_id = _env(_k("PROJECT_ID"), "").strip()

        connect_timeout = _env_float(_k("API_CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout = _env_float(_k("API_READ_TIMEOUT_SECONDS"), 15.0)

        default_category = _env(_k("DEFAULT_CATEGORY"), "personal").strip()
        default_priority = _env(_k("DEFAULT_PRIORITY"), "medium").strip().lower() or "medium"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            local_store_path=local_store_path,
            seed_demo_data=seed_demo_data,
            api_base_url=api_base_url,
            api_key=api_key,
            project_id=project_id,
            api_connect_timeout=max(0.1, connect_timeout),
            api_read_timeout=max(0.1, read_timeout),
            default_category=default_category,
            default_priority=default_priority,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
