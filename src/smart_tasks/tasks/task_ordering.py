# tasks/task_ordering.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .task_models import Task


def task_sort_key(task: Task) -> tuple[int, datetime, datetime]:
    """Urgency rank, then earlier deadline, then earlier creation."""
    return (task.priority.urgency_rank, task.deadline, task.created_at)


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable: equal keys keep insertion order.
    return sorted(tasks, key=task_sort_key)


def next_up(tasks: Iterable[Task]) -> Task | None:
    """
    The most urgent non-completed task, or None when there are no active tasks.
    """
    active = [t for t in tasks if not t.completed]
    if not active:
        return None
    return min(active, key=task_sort_key)
