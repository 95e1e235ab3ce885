# tests/test_commands.py

from __future__ import annotations

from datetime import datetime, timedelta

from smart_tasks.cli.commands import CommandRegistry, registry
from smart_tasks.tasks.task_codec import HEADER
from smart_tasks.tasks.task_models import Priority


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_add_list_next_and_done(state) -> None:
    soon = (datetime.now() + timedelta(days=1)).strftime("%Y-%m-%d %H:%M")
    reply = registry.handle(state, f"/add Buy milk | {soon} | low | 2 litres")
    assert reply is not None and reply.startswith("Added: Buy milk [LOW]")
    registry.handle(state, f"/add Pay rent | {soon} | high")

    listing = registry.handle(state, "/list active") or ""
    assert listing.index("Pay rent") < listing.index("Buy milk")
    assert [t.title for t in state.last_view] == ["Pay rent", "Buy milk"]

    assert "Pay rent [HIGH]" in (registry.handle(state, "/next") or "")

    assert registry.handle(state, "/done 1") == "Pay rent: done"
    assert "Buy milk [LOW]" in (registry.handle(state, "/next") or "")
    assert registry.handle(state, "/status") == "Tasks: 2  |  Showing: 2"


def test_add_rejects_empty_title(state) -> None:
    assert (registry.handle(state, "/add  | 2026-10-21 10:00") or "").startswith("Invalid input")
    assert state.task_store.count() == 0


def test_list_with_search_only(state) -> None:
    registry.handle(state, "/add Workout | 2026-10-22 07:00 | medium | 30 min run")
    registry.handle(state, "/add Groceries | 2026-10-22 09:00")
    listing = registry.handle(state, "/list RUN") or ""
    assert "Workout" in listing
    assert "Groceries" not in listing


def test_edit_and_delete(state) -> None:
    registry.handle(state, "/add Draft | 2026-10-22 07:00")
    registry.handle(state, "/list")
    assert registry.handle(state, "/edit 1 title=Final | priority=high") == "Updated: Final"
    task = state.task_store.all()[0]
    assert (task.title, task.priority) == ("Final", Priority.HIGH)

    assert (registry.handle(state, "/edit 1 deadline=never") or "").startswith("Invalid input")
    assert registry.handle(state, "/del 1") == "Deleted: Final"
    assert state.task_store.count() == 0
    assert "No task #1" in (registry.handle(state, "/done 1") or "")


def test_edit_completed_false_reopens_task(state) -> None:
    registry.handle(state, "/add Report | 2026-10-22 07:00")
    registry.handle(state, "/list")
    assert registry.handle(state, "/done 1") == "Report: done"
    task = state.task_store.all()[0]

    assert registry.handle(state, "/edit 1 completed=false") == "Updated: Report"
    assert task.completed is False

    assert registry.handle(state, "/edit 1 completed=true") == "Updated: Report"
    assert task.completed is True

    assert (registry.handle(state, "/edit 1 completed=maybe") or "").startswith("Invalid input")
    assert task.completed is True


def test_save_and_load(state, tmp_path) -> None:
    registry.handle(state, "/add Keep | 2026-10-22 07:00")
    assert (registry.handle(state, "/save") or "").startswith("Saved 1 tasks")

    bad = tmp_path / "bad.csv"
    bad.write_text(HEADER + "\nonly|five|LOW|2026-10-22T07:00|x\n", "utf-8")
    reply = registry.handle(state, f"/load {bad}") or ""
    assert reply.startswith("Load failed (tasks unchanged)")
    assert [t.title for t in state.task_store.all()] == ["Keep"]

    registry.handle(state, "/add Extra | 2026-10-22 08:00")
    assert (registry.handle(state, "/load") or "").startswith("Loaded 1 tasks")
    assert [t.title for t in state.task_store.all()] == ["Keep"]
