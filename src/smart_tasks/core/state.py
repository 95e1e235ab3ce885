# src/smart_tasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from .ports import Notifier


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in).
    settings: Any

    task_store: TaskStore
    notifier: Notifier

    # Rows of the last /list, so commands can refer to tasks by number.
    last_view: list[Task] = field(default_factory=list)
