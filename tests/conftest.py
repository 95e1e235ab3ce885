# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from smart_tasks.core.state import AppState
from smart_tasks.tasks.task_models import Priority, Task
from smart_tasks.tasks.task_store import TaskStore

from .fakes import FakeNotifier

NOW = datetime(2026, 10, 21, 12, 0)


@pytest.fixture()
def now() -> datetime:
    """A fixed Wednesday noon, so filter and reminder tests are deterministic."""
    return NOW


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="test",
        data_dir=tmp_path,
        tasks_file_path=tmp_path / "tasks.csv",
        reminder_interval_seconds=0.01,
        reminder_initial_delay_seconds=0.0,
        reminder_lead_minutes=15,
        reminder_grace_minutes=60,
    )


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, notifier: FakeNotifier) -> AppState:
    return AppState(settings=settings, task_store=TaskStore(), notifier=notifier)


def make_task(
    title: str = "task",
    *,
    priority: Priority = Priority.MEDIUM,
    deadline: datetime = NOW,
    created_at: datetime = NOW,
    description: str = "",
    completed: bool = False,
    reminded: bool = False,
) -> Task:
    return Task(
        title=title,
        description=description,
        priority=priority,
        deadline=deadline,
        created_at=created_at,
        completed=completed,
        reminded=reminded,
    )
