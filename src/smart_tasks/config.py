# src/smart_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a usable default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "SMART_TASKS"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


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

    # ---- Local data paths ----
    data_dir: Path
    tasks_file_path: Path

    # ---- Persistence switches ----
    autoload: bool
    autosave: bool
    seed_demo_tasks: bool

    # ---- Reminders ----
    reminders_enabled: bool
    reminder_interval_seconds: float
    reminder_initial_delay_seconds: float
    reminder_lead_minutes: int
    reminder_grace_minutes: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Smart Task Scheduler")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/smart_tasks"))
        tasks_file_path = _env_path(_k("TASKS_FILE"), data_dir / "tasks.csv")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_file_path=tasks_file_path,
            autoload=_env_bool(_k("AUTOLOAD"), True),
            autosave=_env_bool(_k("AUTOSAVE"), True),
            seed_demo_tasks=_env_bool(_k("SEED_DEMO"), False),
            reminders_enabled=_env_bool(_k("REMINDERS_ENABLED"), True),
            reminder_interval_seconds=_env_float(_k("REMINDER_INTERVAL_SECONDS"), 60.0),
            reminder_initial_delay_seconds=_env_float(_k("REMINDER_INITIAL_DELAY_SECONDS"), 5.0),
            reminder_lead_minutes=_env_int(_k("REMINDER_LEAD_MINUTES"), 15),
            reminder_grace_minutes=_env_int(_k("REMINDER_GRACE_MINUTES"), 60),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load settings once (reads a local .env first, without overriding real env vars)."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
