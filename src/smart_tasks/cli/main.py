# src/smart_tasks/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the tasks file, then:
- starts the reminder scheduler in a background thread (optional),
- runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import signal

from ..cli.bootstrap import (
    create_initial_state,
    create_reminder_scheduler,
    demo_tasks,
    load_tasks_file,
    save_tasks_file,
)
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    if settings.autoload:
        load_tasks_file(state)

    if settings.seed_demo_tasks and state.task_store.count() == 0:
        for task in demo_tasks():
            state.task_store.add(task)
        logger.info("Seeded demo tasks.")

    scheduler: ReminderScheduler | None = None
    if settings.reminders_enabled:
        scheduler = create_reminder_scheduler(state)
        scheduler.start()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (AttributeError, ValueError):
        # SIGTERM is not available everywhere.
        pass

    try:
        run_console_loop(state)
    except KeyboardInterrupt:
        pass
    finally:
        if scheduler is not None:
            scheduler.stop()
            scheduler.join(timeout=5.0)

        if settings.autosave:
            save_tasks_file(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
