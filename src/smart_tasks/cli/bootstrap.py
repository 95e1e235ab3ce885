# src/smart_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the task store, notifier and reminder scheduler together,
- loads/saves the tasks file.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from pathlib import Path

from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier
from ..core.ports import Notifier
from ..core.state import AppState
from ..tasks.task_errors import TaskParseError
from ..tasks.task_models import Priority, Task
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    Path(settings.tasks_file_path).parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, notifier: Notifier | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(
        settings=settings,
        task_store=TaskStore(),
        notifier=notifier if notifier is not None else ConsoleNotifier(),
    )


def create_reminder_scheduler(state: AppState) -> ReminderScheduler:
    s = state.settings
    return ReminderScheduler(
        state.task_store,
        state.notifier,
        interval_seconds=float(getattr(s, "reminder_interval_seconds", 60.0)),
        initial_delay_seconds=float(getattr(s, "reminder_initial_delay_seconds", 5.0)),
        lead_minutes=int(getattr(s, "reminder_lead_minutes", 15)),
        grace_minutes=int(getattr(s, "reminder_grace_minutes", 60)),
    )


def demo_tasks(now: datetime | None = None) -> list[Task]:
    """Three sample tasks for a first run."""
    if now is None:
        now = datetime.now()
    tomorrow_7am = (now + timedelta(days=1)).replace(hour=7, minute=0, second=0, microsecond=0)
    return [
        Task.new("Submit assignment", "SQE assignment upload", Priority.HIGH, now + timedelta(hours=3)),
        Task.new("Workout", "30 min run", Priority.MEDIUM, tomorrow_7am),
        Task.new("Buy groceries", "Milk, eggs, veggies", Priority.LOW, now + timedelta(hours=26)),
    ]


def load_tasks_file(state: AppState) -> int:
    """Best-effort startup load. A missing or broken file leaves the store as is."""
    path = Path(state.settings.tasks_file_path)
    if not path.exists():
        logger.info("No tasks file yet at %s", path)
        return 0
    try:
        return state.task_store.load(path)
    except TaskParseError:
        logger.exception("Tasks file %s is malformed; starting without it.", path)
    except OSError:
        logger.exception("Failed to read tasks file %s", path)
    return 0


def save_tasks_file(state: AppState) -> None:
    path = Path(state.settings.tasks_file_path)
    try:
        state.task_store.save(path)
    except OSError:
        logger.exception("Failed to save tasks to %s", path)
