# src/smart_tasks/connectors/console_connector.py

from __future__ import annotations

import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import NotificationPayload

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Prints reminders to stdout. Called from the reminder thread."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def notify(self, payload: NotificationPayload) -> None:
        body = payload.format_message().rstrip("\n")
        with self._lock:
            _print_ts("[REMINDER] " + body.replace("\n", "\n    "))


def run_console_loop(state: AppState) -> None:
    app_name = str(getattr(state.settings, "app_name", "smart tasks"))
    logger.info("Console started (tasks=%s).", state.task_store.count())
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        _print_ts(text)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a search over all tasks.
            user_input = "/list all " + user_input

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)

    logger.info("Console finished.")
