# tests/fakes.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from smart_tasks.tasks.task_models import NotificationPayload


@dataclass
class FakeNotifier:
    """
    Fake Notifier used by scheduler tests.

    `delivered` is set on every notify() so threaded tests can wait on it.
    """

    sent: list[NotificationPayload] = field(default_factory=list)
    delivered: threading.Event = field(default_factory=threading.Event)

    def notify(self, payload: NotificationPayload) -> None:
        self.sent.append(payload)
        self.delivered.set()


@dataclass
class FailingNotifier:
    """Raises on every call; counts attempts."""

    calls: int = 0

    def notify(self, payload: NotificationPayload) -> None:
        self.calls += 1
        raise RuntimeError("notifier is down")
