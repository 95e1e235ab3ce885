# src/smart_tasks/tasks/task_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

A small polling loop that, every interval:
- lists non-completed, not-yet-reminded tasks inside the reminder window
  (due within lead_minutes, or overdue by at most grace_minutes),
- claims each one (sets reminded=True under the store lock),
- hands a NotificationPayload to the injected notifier.

A task is reminded at most once; nothing resets the flag automatically.
Delivery (console, tray, push) belongs to the notifier, not the scheduler.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from datetime import datetime

from ..core.ports import Notifier, ReminderRepo
from .task_models import NotificationPayload

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def evaluate_reminders(
        task_store: ReminderRepo,
        *,
        now: datetime,
        lead_minutes: int = 15,
        grace_minutes: int = 60,
) -> list[NotificationPayload]:
    """
    One evaluation pass. Returns a payload for every task claimed in this pass.

    Running it twice in a row yields nothing the second time.
    """
    window = {"lead_minutes": int(lead_minutes), "grace_minutes": int(grace_minutes)}
    candidates = task_store.list_reminder_candidates(now=now, **window)

    payloads: list[NotificationPayload] = []
    for task in candidates:
        payload = task_store.try_claim_reminder(task, now=now, **window)
        if payload is None:
            continue
        payloads.append(payload)
        logger.info("Reminder due title=%r deadline=%s", payload.title, payload.deadline)
    return payloads


def _deliver(notifier: Notifier, payloads: list[NotificationPayload]) -> None:
    for payload in payloads:
        try:
            notifier.notify(payload)
        except Exception:
            logger.exception("notifier failed title=%r", payload.title)


async def run_reminder_scheduler(
        task_store: ReminderRepo,
        notifier: Notifier,
        *,
        interval_seconds: float = 60.0,
        initial_delay_seconds: float = 5.0,
        lead_minutes: int = 15,
        grace_minutes: int = 60,
        clock: Clock = datetime.now,
) -> None:
    """
    Simple polling scheduler.

    Waits initial_delay_seconds, then every interval_seconds runs
    evaluate_reminders() and passes the payloads to notifier.notify().
    Store and notifier failures are logged; the loop keeps going.

    To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    delay_s = max(0.0, float(initial_delay_seconds))

    if delay_s:
        await asyncio.sleep(delay_s)

    while True:
        try:
            payloads = evaluate_reminders(
                task_store,
                now=clock(),
                lead_minutes=lead_minutes,
                grace_minutes=grace_minutes,
            )
        except Exception:
            logger.exception("reminder evaluation failed")
            payloads = []

        _deliver(notifier, payloads)

        await asyncio.sleep(sleep_s)


class ReminderScheduler:
    """
    Runs run_reminder_scheduler() on its own event loop in a daemon thread,
    so a blocking foreground (console input()) can run in parallel.

    start() is a no-op while already running; stop() is safe to call any
    number of times, including before start().
    """

    def __init__(
            self,
            task_store: ReminderRepo,
            notifier: Notifier,
            *,
            interval_seconds: float = 60.0,
            initial_delay_seconds: float = 5.0,
            lead_minutes: int = 15,
            grace_minutes: int = 60,
            clock: Clock = datetime.now,
    ) -> None:
        self._task_store = task_store
        self._notifier = notifier
        self._interval_seconds = interval_seconds
        self._initial_delay_seconds = initial_delay_seconds
        self._lead_minutes = lead_minutes
        self._grace_minutes = grace_minutes
        self._clock = clock

        self._guard = threading.Lock()
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        with self._guard:
            if self.running:
                return

            ready = threading.Event()

            def runner() -> None:
                loop = asyncio.new_event_loop()
                asyncio.set_event_loop(loop)
                task = loop.create_task(
                    run_reminder_scheduler(
                        self._task_store,
                        self._notifier,
                        interval_seconds=self._interval_seconds,
                        initial_delay_seconds=self._initial_delay_seconds,
                        lead_minutes=self._lead_minutes,
                        grace_minutes=self._grace_minutes,
                        clock=self._clock,
                    )
                )
                self._loop = loop
                self._task = task
                ready.set()

                try:
                    with contextlib.suppress(asyncio.CancelledError):
                        loop.run_until_complete(task)
                finally:
                    with contextlib.suppress(Exception):
                        loop.close()

            t = threading.Thread(target=runner, name="task-reminder", daemon=True)
            self._thread = t
            t.start()
            ready.wait(timeout=5.0)

        logger.info(
            "Reminder scheduler started (interval=%ss, delay=%ss).",
            self._interval_seconds,
            self._initial_delay_seconds,
        )

    def stop(self) -> None:
        with self._guard:
            loop, task = self._loop, self._task
            self._loop = None
            self._task = None

        if loop is None or task is None:
            return

        try:
            loop.call_soon_threadsafe(task.cancel)
        except RuntimeError:
            # Loop already closed.
            logger.debug("Reminder loop already closed.", exc_info=True)
            return
        logger.info("Reminder scheduler stopping.")

    def join(self, timeout: float | None = None) -> None:
        thread = self._thread
        if thread is not None:
            thread.join(timeout=timeout)
