# tests/test_bootstrap.py

from __future__ import annotations

import logging
from datetime import datetime

from smart_tasks.cli.bootstrap import (
    create_initial_state,
    create_reminder_scheduler,
    demo_tasks,
    load_tasks_file,
    save_tasks_file,
)
from smart_tasks.config import Settings
from smart_tasks.connectors.console_connector import ConsoleNotifier, run_console_loop
from smart_tasks.logging_setup import LOG_FILE_NAME, setup_logging
from smart_tasks.tasks.task_codec import HEADER
from smart_tasks.tasks.task_models import NotificationPayload, Priority

from .conftest import make_task


def test_initial_state_defaults_to_console_notifier(settings) -> None:
    state = create_initial_state(settings=settings)
    assert isinstance(state.notifier, ConsoleNotifier)
    assert state.task_store.count() == 0


def test_tasks_file_round_trip_and_broken_file(settings) -> None:
    state = create_initial_state(settings=settings)
    assert load_tasks_file(state) == 0

    state.task_store.add(make_task("persist me"))
    save_tasks_file(state)

    fresh = create_initial_state(settings=settings)
    assert load_tasks_file(fresh) == 1
    assert fresh.task_store.all()[0].title == "persist me"

    settings.tasks_file_path.write_text("header\nbroken line\n", "utf-8")
    assert load_tasks_file(fresh) == 0
    assert fresh.task_store.all()[0].title == "persist me"

    settings.tasks_file_path.write_bytes(
        HEADER.encode("utf-8") + b"\n\xff|d|LOW|2026-10-21T12:00|2026-10-20T09:30|false\n"
    )
    assert load_tasks_file(fresh) == 0
    assert fresh.task_store.all()[0].title == "persist me"


def test_demo_tasks() -> None:
    now = datetime(2026, 10, 21, 12, 0)
    tasks = demo_tasks(now)
    assert [t.priority for t in tasks] == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]
    assert tasks[1].deadline == datetime(2026, 10, 22, 7, 0)


def test_reminder_scheduler_wiring(state) -> None:
    scheduler = create_reminder_scheduler(state)
    assert not scheduler.running
    scheduler.stop()


def test_settings_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SMART_TASKS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SMART_TASKS_REMINDER_LEAD_MINUTES", "30")
    monkeypatch.setenv("SMART_TASKS_AUTOSAVE", "no")
    monkeypatch.setenv("SMART_TASKS_REMINDER_INTERVAL_SECONDS", "not-a-number")

    s = Settings.from_env()

    assert s.tasks_file_path == tmp_path / "tasks.csv"
    assert s.reminder_lead_minutes == 30
    assert s.autosave is False
    assert s.reminder_interval_seconds == 60.0


def test_console_notifier_prints(capsys) -> None:
    payload = NotificationPayload("Stand-up", Priority.HIGH, datetime(2026, 10, 21, 9, 30), "room 4")
    ConsoleNotifier().notify(payload)
    out = capsys.readouterr().out
    assert "[REMINDER] Stand-up [HIGH]" in out
    assert "Due: 2026-10-21 09:30" in out


def test_console_loop_runs_commands(state, monkeypatch, capsys) -> None:
    lines = iter(["/add Read book | 2026-10-22 20:00", "book", "/exit"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))

    run_console_loop(state)

    out = capsys.readouterr().out
    assert "Added: Read book" in out
    assert "1. [ ] Read book" in out


def test_setup_logging_writes_file(tmp_path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("smart_tasks.test").info("hello log")
        for h in root.handlers:
            h.flush()

        assert log_file == tmp_path / "logs" / LOG_FILE_NAME
        assert "hello log" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
