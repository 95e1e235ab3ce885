# tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import os
import threading
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from .task_codec import decode_bytes, decode_tasks, encode_tasks
from .task_filters import TaskFilter, view_tasks
from .task_models import NotificationPayload, Task, in_reminder_window
from .task_ordering import next_up

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"title", "description", "priority", "deadline", "completed"})


def read_all(path: str | Path) -> bytes:
    return Path(path).read_bytes()


def write_all(path: str | Path, data: bytes) -> None:
    """Write via a sibling temp file + os.replace so readers never see half a file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_bytes(data)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class TaskStore:
    """
    In-memory ordered task collection.

    Insertion order is preserved; nothing is unique (duplicate titles are fine).

    Thread-safety:
    - one re-entrant lock guards the list and every field write made through
      the store, so the reminder scheduler never sees a task mid-edit
    - all() returns a snapshot; use locked() to iterate and mutate in one go
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self._lock = threading.RLock()
        self._tasks: list[Task] = list(tasks or [])
        logger.debug("TaskStore ready total=%s", len(self._tasks))

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def locked(self) -> Iterator[list[Task]]:
        """Hold the store lock; yields the live list (do not keep a reference)."""
        with self._lock:
            yield self._tasks

    def _index_of(self, task: Task) -> int:
        for i, t in enumerate(self._tasks):
            if t is task:
                return i
        return -1

    # ---- public API ----

    def add(self, task: Task) -> None:
        with self._lock:
            self._tasks.append(task)
        logger.debug("Task added title=%r priority=%s deadline=%s", task.title, task.priority, task.deadline)

    def remove(self, task: Task) -> bool:
        """Remove this exact instance. Returns False if it is not stored."""
        with self._lock:
            idx = self._index_of(task)
            if idx < 0:
                return False
            del self._tasks[idx]
        logger.debug("Task removed title=%r", task.title)
        return True

    def contains(self, task: Task) -> bool:
        with self._lock:
            return self._index_of(task) >= 0

    def all(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()

    def update_task(self, task: Task, **fields: Any) -> None:
        """Set editable fields on a task under the store lock. No validation here."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise AttributeError(f"not editable: {', '.join(sorted(unknown))}")
        with self._lock:
            for name, value in fields.items():
                setattr(task, name, value)

    def next_up(self) -> Task | None:
        return next_up(self.all())

    def view(self, kind: TaskFilter = TaskFilter.ALL, now: datetime | None = None, query: str = "") -> list[Task]:
        return view_tasks(self.all(), kind, now, query)

    # ---- reminders ----

    def list_reminder_candidates(
        self,
        *,
        now: datetime,
        lead_minutes: int = 15,
        grace_minutes: int = 60,
    ) -> list[Task]:
        """Unreminded, non-completed tasks currently inside the reminder window."""
        with self._lock:
            return [
                t
                for t in self._tasks
                if not t.completed
                and not t.reminded
                and in_reminder_window(t, now, lead_minutes=lead_minutes, grace_minutes=grace_minutes)
            ]

    def try_claim_reminder(
        self,
        task: Task,
        *,
        now: datetime,
        lead_minutes: int = 15,
        grace_minutes: int = 60,
    ) -> NotificationPayload | None:
        """
        Atomically flip reminded False -> True.

        Re-checks every condition under the lock, so a concurrent edit/removal
        between listing and claiming cannot cause a stray reminder. The payload
        is built under the same lock; None means the task was not claimed.
        """
        with self._lock:
            if self._index_of(task) < 0:
                return None
            if task.completed or task.reminded:
                return None
            if not in_reminder_window(task, now, lead_minutes=lead_minutes, grace_minutes=grace_minutes):
                return None
            task.reminded = True
            return NotificationPayload.from_task(task)

    def clear_reminded(self, task: Task) -> None:
        """Re-arm the reminder for a task. Nothing calls this implicitly."""
        with self._lock:
            task.reminded = False

    # ---- persistence ----

    def save(self, path: str | Path) -> int:
        with self._lock:
            snapshot = list(self._tasks)
            body = encode_tasks(snapshot)
        write_all(path, body.encode("utf-8"))
        logger.info("Saved %d tasks to %s", len(snapshot), path)
        return len(snapshot)

    def load(self, path: str | Path) -> int:
        """
        Replace the contents with the tasks in `path`.

        Decoding happens before the swap: on OSError or TaskParseError the
        store keeps its previous contents.
        """
        text = decode_bytes(read_all(path))
        loaded = decode_tasks(text)
        with self._lock:
            self._tasks[:] = loaded
        logger.info("Loaded %d tasks from %s", len(loaded), path)
        return len(loaded)
