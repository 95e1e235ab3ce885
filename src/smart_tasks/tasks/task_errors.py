# tasks/task_errors.py

from __future__ import annotations


class TaskValidationError(ValueError):
    """Rejected user input (empty title, unparseable deadline, unknown priority)."""


class TaskParseError(ValueError):
    """A persisted line could not be decoded; the whole load is aborted."""

    def __init__(self, message: str, *, line_no: int, line: str) -> None:
        super().__init__(f"line {line_no}: {message}: {line!r}")
        self.line_no = line_no
        self.line = line
