# src/smart_tasks/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import apply_edit, create_task, default_deadline, toggle_completed
from ..tasks.task_errors import TaskParseError, TaskValidationError
from ..tasks.task_filters import TaskFilter
from ..tasks.task_models import DISPLAY_FORMAT, Priority, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task_row(index: int, task: Task) -> str:
    done = "x" if task.completed else " "
    line = f"{index:>3}. [{done}] {task.title} [{task.priority.value}] due {task.deadline.strftime(DISPLAY_FORMAT)}"
    if task.description:
        first = task.description.splitlines()[0]
        line += f" - {first}"
    return line


def _pick(state: AppState, args: list[str]) -> Task:
    """Resolve a 1-based row number from the last /list view."""
    if not args:
        raise TaskValidationError("Task number is required (see /list).")
    try:
        idx = int(args[0])
    except ValueError:
        raise TaskValidationError(f"Not a task number: {args[0]!r}") from None
    if idx < 1 or idx > len(state.last_view):
        raise TaskValidationError(f"No task #{idx} in the last list.")
    task = state.last_view[idx - 1]
    if not state.task_store.contains(task):
        raise TaskValidationError(f"Task #{idx} was removed; run /list again.")
    return task


def _pipe_fields(args: list[str]) -> list[str]:
    return [p.strip() for p in " ".join(args).split("|")]


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    return f"Tasks: {state.task_store.count()}  |  Showing: {len(state.last_view)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                  -> all tasks
    /list overdue          -> one filter kind
    /list active groceries -> filter + search
    """
    kind = TaskFilter.ALL
    query_args = args
    if args:
        try:
            kind = TaskFilter.parse(args[0])
            query_args = args[1:]
        except ValueError:
            query_args = args

    rows = state.task_store.view(kind, datetime.now(), " ".join(query_args))
    state.last_view = rows

    if not rows:
        return f"No tasks ({kind.value})."
    lines = [f"{kind.value} ({len(rows)} of {state.task_store.count()}):"]
    lines.extend(format_task_row(i, t) for i, t in enumerate(rows, start=1))
    return "\n".join(lines)


def cmd_next(state: AppState, args: list[str]) -> str:
    task = state.task_store.next_up()
    if task is None:
        return "No active tasks."
    return (
        "Next up (by priority & deadline):\n"
        f"{task.title} [{task.priority.value}]\n"
        f"Due: {task.deadline.strftime(DISPLAY_FORMAT)}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title | deadline | priority | description
    Only the title is required; the deadline defaults to one hour from now.
    """
    fields = _pipe_fields(args)
    title = fields[0] if fields else ""
    deadline = fields[1] if len(fields) > 1 and fields[1] else default_deadline()
    priority = fields[2] if len(fields) > 2 and fields[2] else Priority.MEDIUM
    description = "|".join(fields[3:]) if len(fields) > 3 else ""

    try:
        task = create_task(
            state.task_store,
            title=title,
            deadline=deadline,
            priority=priority,
            description=description,
        )
    except TaskValidationError as e:
        return f"Invalid input: {e}"
    return f"Added: {task.title} [{task.priority.value}] due {task.deadline.strftime(DISPLAY_FORMAT)}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit N title=New title | deadline=2026-01-02 10:00 | priority=high | description=...
    """
    try:
        task = _pick(state, args)
        fields: dict[str, str] = {}
        for chunk in _pipe_fields(args[1:]):
            if not chunk:
                continue
            key, sep, value = chunk.partition("=")
            if not sep:
                raise TaskValidationError(f"Expected field=value, got {chunk!r}")
            fields[key.strip().lower()] = value.strip()
        if not fields:
            raise TaskValidationError("Nothing to change.")
        apply_edit(state.task_store, task, **fields)
    except TaskValidationError as e:
        return f"Invalid input: {e}"
    return f"Updated: {task.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    try:
        task = _pick(state, args)
    except TaskValidationError as e:
        return str(e)
    completed = toggle_completed(state.task_store, task)
    return f"{task.title}: {'done' if completed else 'not done'}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    try:
        task = _pick(state, args)
    except TaskValidationError as e:
        return str(e)
    state.task_store.remove(task)
    state.last_view = [t for t in state.last_view if t is not task]
    return f"Deleted: {task.title}"


def cmd_rearm(state: AppState, args: list[str]) -> str:
    try:
        task = _pick(state, args)
    except TaskValidationError as e:
        return str(e)
    state.task_store.clear_reminded(task)
    return f"Reminder re-armed: {task.title}"


def _target_path(state: AppState, args: list[str]) -> Path:
    if args:
        return Path(" ".join(args)).expanduser()
    return Path(state.settings.tasks_file_path)


def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    path = _target_path(state, args)
    try:
        n = state.task_store.save(path)
    except OSError as e:
        logger.warning("Save failed path=%s: %s", path, e)
        return f"Save failed: {e}"
    return f"Saved {n} tasks to {path}"


def cmd_load(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    path = _target_path(state, args)
    if emit is not None:
        emit(f"Loading {path}...")
    try:
        n = state.task_store.load(path)
    except TaskParseError as e:
        logger.warning("Load failed path=%s: %s", path, e)
        return f"Load failed (tasks unchanged): {e}"
    except OSError as e:
        logger.warning("Load failed path=%s: %s", path, e)
        return f"Load failed: {e}"
    state.last_view = []
    return f"Loaded {n} tasks from {path}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task totals.")
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [all|today|high|week|overdue|completed|active] [search...].",
    aliases=["ls"],
)
registry.register("next", cmd_next, help_text="Show the most urgent active task.")
registry.register("add", cmd_add, help_text="Add: /add title | YYYY-MM-DD HH:MM | low/medium/high | description.")
registry.register("edit", cmd_edit, help_text="Edit: /edit N field=value | field=value.")
registry.register("done", cmd_done, help_text="Toggle done: /done N.", aliases=["toggle"])
registry.register("del", cmd_delete, help_text="Delete: /del N.", aliases=["rm"])
registry.register("rearm", cmd_rearm, help_text="Allow another reminder for task N.")
registry.register("save", cmd_save, help_text="Save tasks: /save [path].")
registry.register("load", cmd_load, help_text="Load tasks (replaces current): /load [path].")
