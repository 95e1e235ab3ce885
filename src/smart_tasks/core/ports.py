# src/smart_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps notifiers/storage swappable and makes testing easier.
"""

from datetime import datetime
from typing import Protocol

from ..tasks.task_models import NotificationPayload, Task


class Notifier(Protocol):
    """
    Delivery side of a reminder (console line, tray icon, push...).

    Fire-and-forget: the scheduler does not use a return value, and any
    exception is logged and dropped by the caller.
    """

    def notify(self, payload: NotificationPayload) -> None: ...


class ReminderRepo(Protocol):
    """What the reminder scheduler needs from a task store."""

    def list_reminder_candidates(
            self,
            *,
            now: datetime,
            lead_minutes: int = 15,
            grace_minutes: int = 60,
    ) -> list[Task]: ...

    def try_claim_reminder(
            self,
            task: Task,
            *,
            now: datetime,
            lead_minutes: int = 15,
            grace_minutes: int = 60,
    ) -> NotificationPayload | None: ...
