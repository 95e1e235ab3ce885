# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


class Priority(StrEnum):
    """
    Task priority.

    Values are the literal names written to the tasks file.
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def urgency_rank(self) -> int:
        # HIGH sorts first.
        match self:
            case Priority.HIGH:
                return 0
            case Priority.MEDIUM:
                return 1
            case Priority.LOW:
                return 2

    @classmethod
    def from_name(cls, raw: str) -> Priority:
        """Strict lookup by enum name (raises ValueError)."""
        try:
            return cls[raw]
        except KeyError:
            raise ValueError(f"unknown priority: {raw!r}") from None


@dataclass(slots=True, eq=False)
class Task:
    """
    A single tracked task.

    Calling the class directly is the reconstruction path (all seven fields
    verbatim, used by the codec). Use Task.new(...) for a fresh task.

    Tasks compare by identity: two field-identical tasks are still distinct.
    Attribute assignment performs no validation; validation happens in
    task_api before anything touches the store.
    """

    title: str
    description: str
    priority: Priority
    deadline: datetime
    created_at: datetime
    completed: bool = False
    reminded: bool = False

    @classmethod
    def new(
        cls,
        title: str,
        description: str,
        priority: Priority,
        deadline: datetime,
    ) -> Task:
        return cls(
            title=title,
            description=description,
            priority=priority,
            deadline=deadline,
            created_at=datetime.now(),
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "created_at" and hasattr(self, "created_at"):
            raise AttributeError("created_at is read-only")
        object.__setattr__(self, name, value)

    def as_record(self) -> tuple[str, str, Priority, datetime, datetime, bool, bool]:
        return (
            self.title,
            self.description,
            self.priority,
            self.deadline,
            self.created_at,
            self.completed,
            self.reminded,
        )


def minutes_until_deadline(task: Task, now: datetime) -> int:
    """Whole minutes from now to the deadline, truncated toward zero (negative when overdue)."""
    return int((task.deadline - now) / timedelta(minutes=1))


def in_reminder_window(
    task: Task,
    now: datetime,
    *,
    lead_minutes: int = 15,
    grace_minutes: int = 60,
) -> bool:
    """Due within lead_minutes, or overdue by at most grace_minutes."""
    minutes = minutes_until_deadline(task, now)
    return -grace_minutes <= minutes <= lead_minutes


@dataclass(slots=True, frozen=True)
class NotificationPayload:
    """What the reminder scheduler hands to a Notifier."""

    title: str
    priority: Priority
    deadline: datetime
    description: str

    @classmethod
    def from_task(cls, task: Task) -> NotificationPayload:
        return cls(
            title=task.title,
            priority=task.priority,
            deadline=task.deadline,
            description=task.description or "",
        )

    def format_message(self) -> str:
        return (
            f"{self.title} [{self.priority.value}]\n"
            f"Due: {self.deadline.strftime(DISPLAY_FORMAT)}\n"
            f"{self.description}"
        )
