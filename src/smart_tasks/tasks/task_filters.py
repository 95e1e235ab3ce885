# tasks/task_filters.py

from __future__ import annotations

"""
Task filters.

All predicates take an explicit `now` so results are deterministic in tests.

Week numbering follows ISO-8601: DUE_THIS_WEEK compares the (ISO year,
ISO week) pair of the deadline with that of `now`. Weeks start on Monday, so a
deadline on Monday is never "this week" when today is the preceding Sunday.
"""

from collections.abc import Iterable
from datetime import date, datetime
from enum import StrEnum

from .task_models import Priority, Task
from .task_ordering import sort_tasks


class TaskFilter(StrEnum):
    ALL = "ALL"
    TODAY = "TODAY"
    HIGH_PRIORITY = "HIGH_PRIORITY"
    DUE_THIS_WEEK = "DUE_THIS_WEEK"
    OVERDUE = "OVERDUE"
    COMPLETED = "COMPLETED"
    ACTIVE = "ACTIVE"

    @classmethod
    def parse(cls, raw: str) -> TaskFilter:
        key = (raw or "").strip().upper().replace("-", "_")
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown filter: {raw!r}") from None


_ALIASES = {
    "HIGH": "HIGH_PRIORITY",
    "WEEK": "DUE_THIS_WEEK",
    "DONE": "COMPLETED",
    "OPEN": "ACTIVE",
}


def iso_week(day: date) -> tuple[int, int]:
    iso = day.isocalendar()
    return (iso.year, iso.week)


def matches(task: Task, kind: TaskFilter, now: datetime) -> bool:
    match kind:
        case TaskFilter.ALL:
            return True
        case TaskFilter.TODAY:
            return task.deadline.date() == now.date()
        case TaskFilter.HIGH_PRIORITY:
            return task.priority == Priority.HIGH and not task.completed
        case TaskFilter.DUE_THIS_WEEK:
            return iso_week(task.deadline.date()) == iso_week(now.date())
        case TaskFilter.OVERDUE:
            return task.deadline < now and not task.completed
        case TaskFilter.COMPLETED:
            return task.completed
        case TaskFilter.ACTIVE:
            return not task.completed
    raise ValueError(f"unhandled filter: {kind!r}")


def filter_tasks(tasks: Iterable[Task], kind: TaskFilter, now: datetime) -> list[Task]:
    """Subset matching `kind`, sorted by urgency."""
    return sort_tasks(t for t in tasks if matches(t, kind, now))


def search_tasks(tasks: Iterable[Task], query: str) -> list[Task]:
    """Case-insensitive substring match on title or description. Blank query keeps everything."""
    q = (query or "").strip().casefold()
    if not q:
        return list(tasks)
    return [
        t
        for t in tasks
        if q in (t.title or "").casefold() or q in (t.description or "").casefold()
    ]


def view_tasks(
    tasks: Iterable[Task],
    kind: TaskFilter = TaskFilter.ALL,
    now: datetime | None = None,
    query: str = "",
) -> list[Task]:
    if now is None:
        now = datetime.now()
    return search_tasks(filter_tasks(tasks, kind, now), query)
