# tasks/task_api.py

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from .task_errors import TaskValidationError
from .task_models import DISPLAY_FORMAT, Priority, Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def parse_deadline(raw: str | datetime) -> datetime:
    """
    Accept "YYYY-MM-DD HH:MM" or any ISO-8601 local date-time.
    Deadlines are kept at minute precision.
    """
    if isinstance(raw, datetime):
        value = raw
    else:
        text = (raw or "").strip()
        if not text:
            raise TaskValidationError("Deadline is required")
        try:
            value = datetime.strptime(text, DISPLAY_FORMAT)
        except ValueError:
            try:
                value = datetime.fromisoformat(text)
            except ValueError:
                raise TaskValidationError(
                    f"Invalid deadline {text!r} (expected YYYY-MM-DD HH:MM)"
                ) from None
    if value.tzinfo is not None:
        # Local naive time everywhere.
        value = value.astimezone().replace(tzinfo=None)
    return value.replace(second=0, microsecond=0)


def parse_priority(raw: str | Priority) -> Priority:
    if isinstance(raw, Priority):
        return raw
    try:
        return Priority.from_name((raw or "").strip().upper())
    except ValueError:
        raise TaskValidationError(f"Invalid priority {raw!r} (use LOW, MEDIUM or HIGH)") from None


def parse_completed(raw: str | bool) -> bool:
    if isinstance(raw, bool):
        return raw
    text = (raw or "").strip().lower()
    if text in ("true", "yes", "done", "1"):
        return True
    if text in ("false", "no", "open", "0"):
        return False
    raise TaskValidationError(f"Invalid completed value {raw!r} (use true or false)")


def validate_title(raw: str | None) -> str:
    title = (raw or "").strip()
    if not title:
        raise TaskValidationError("Title is required")
    return title


def default_deadline(now: datetime | None = None) -> datetime:
    """One hour from now, seconds dropped."""
    if now is None:
        now = datetime.now()
    return (now + timedelta(hours=1)).replace(second=0, microsecond=0)


def create_task(
    store: TaskStore,
    *,
    title: str,
    deadline: str | datetime,
    priority: str | Priority = Priority.MEDIUM,
    description: str | None = "",
) -> Task:
    """Validate the fields, then build a new task and add it to the store."""
    task = Task.new(
        title=validate_title(title),
        description=description or "",
        priority=parse_priority(priority),
        deadline=parse_deadline(deadline),
    )
    store.add(task)
    logger.info("Task created title=%r priority=%s deadline=%s", task.title, task.priority, task.deadline)
    return task


def apply_edit(store: TaskStore, task: Task, **fields: Any) -> None:
    """
    Validate every supplied field, then apply them together.

    Accepted keys: title, description, priority, deadline, completed.
    On TaskValidationError nothing is changed. The reminded flag is left
    untouched (see TaskStore.clear_reminded).
    """
    clean: dict[str, Any] = {}
    for name, value in fields.items():
        if name == "title":
            clean["title"] = validate_title(value)
        elif name == "description":
            clean["description"] = value or ""
        elif name == "priority":
            clean["priority"] = parse_priority(value)
        elif name == "deadline":
            clean["deadline"] = parse_deadline(value)
        elif name == "completed":
            clean["completed"] = parse_completed(value)
        else:
            raise TaskValidationError(f"Unknown field: {name}")

    if not clean:
        return

    store.update_task(task, **clean)
    logger.info("Task edited title=%r fields=%s", task.title, ",".join(sorted(clean)))


def toggle_completed(store: TaskStore, task: Task) -> bool:
    with store.locked():
        new_value = not task.completed
        store.update_task(task, completed=new_value)
    logger.info("Task %r completed=%s", task.title, new_value)
    return new_value
