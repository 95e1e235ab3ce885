# src/smart_tasks/tasks/task_codec.py

from __future__ import annotations

"""
Tasks file codec.

Line-oriented UTF-8 text:
- line 1: HEADER
- one "|"-delimited line per task: title|description|priority|deadline|created_at|completed|reminded

Inside title/description a backslash escapes "\\" and "|", and a newline is
written as the two characters "\\n". The reminded column is optional on read.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from .task_errors import TaskParseError
from .task_models import Priority, Task

logger = logging.getLogger(__name__)

DELIMITER = "|"
HEADER = "title|description|priority|deadlineIso|createdAtIso|completed|reminded"

MIN_FIELDS = 6


def escape_field(text: str | None) -> str:
    if not text:
        return ""
    return text.replace("\\", "\\\\").replace(DELIMITER, "\\|").replace("\n", "\\n")


def unescape_field(raw: str) -> str:
    out: list[str] = []
    escaped = False
    for ch in raw:
        if escaped:
            out.append("\n" if ch == "n" else ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        else:
            out.append(ch)
    return "".join(out)


def split_line(line: str) -> list[str]:
    """
    Split on unescaped delimiters.

    Escape sequences are kept intact in the returned pieces so that each field
    is unescaped exactly once by unescape_field().
    """
    parts: list[str] = []
    cur: list[str] = []
    escaped = False
    for ch in line:
        if escaped:
            cur.append(ch)
            escaped = False
        elif ch == "\\":
            cur.append(ch)
            escaped = True
        elif ch == DELIMITER:
            parts.append("".join(cur))
            cur = []
        else:
            cur.append(ch)
    parts.append("".join(cur))
    return parts


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() == "true"


def parse_timestamp(raw: str) -> datetime:
    """ISO-8601 date-time as local naive time; offsets are converted to local."""
    value = datetime.fromisoformat(raw.strip())
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def _bool_token(value: bool) -> str:
    return "true" if value else "false"


def encode_task(task: Task) -> str:
    return DELIMITER.join(
        [
            escape_field(task.title),
            escape_field(task.description),
            task.priority.value,
            task.deadline.isoformat(),
            task.created_at.isoformat(),
            _bool_token(task.completed),
            _bool_token(task.reminded),
        ]
    )


def decode_task(line: str, *, line_no: int = 0) -> Task:
    parts = split_line(line)
    if len(parts) < MIN_FIELDS:
        raise TaskParseError(
            f"expected at least {MIN_FIELDS} fields, got {len(parts)}",
            line_no=line_no,
            line=line,
        )

    try:
        priority = Priority.from_name(parts[2].strip())
    except ValueError as e:
        raise TaskParseError(str(e), line_no=line_no, line=line) from e

    try:
        deadline = parse_timestamp(parts[3])
        created_at = parse_timestamp(parts[4])
    except ValueError as e:
        raise TaskParseError(f"bad timestamp ({e})", line_no=line_no, line=line) from e

    return Task(
        title=unescape_field(parts[0]),
        description=unescape_field(parts[1]),
        priority=priority,
        deadline=deadline,
        created_at=created_at,
        completed=_parse_bool(parts[5]),
        reminded=len(parts) > MIN_FIELDS and _parse_bool(parts[6]),
    )


def encode_tasks(tasks: Iterable[Task]) -> str:
    lines = [HEADER]
    lines.extend(encode_task(t) for t in tasks)
    return "\n".join(lines) + "\n"


def decode_bytes(data: bytes) -> str:
    """UTF-8 decode; invalid bytes raise TaskParseError naming the offending line."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        line_no = data.count(b"\n", 0, e.start) + 1
        start = data.rfind(b"\n", 0, e.start) + 1
        end = data.find(b"\n", e.start)
        raw = data[start:] if end < 0 else data[start:end]
        raise TaskParseError(
            "invalid UTF-8",
            line_no=line_no,
            line=raw.decode("utf-8", errors="replace"),
        ) from e


def decode_tasks(text: str) -> list[Task]:
    """
    Decode a whole file body.

    The first line is the header and is always skipped. Blank lines are
    ignored. Any bad line raises TaskParseError for the whole text.
    """
    # Only "\n" / "\r\n" end a line; other separators may appear inside fields.
    lines = [ln.removesuffix("\r") for ln in text.split("\n")]
    if not lines[0].strip() and len(lines) == 1:
        return []

    if lines[0].strip() != HEADER:
        logger.warning("Unexpected tasks file header: %r", lines[0][:120])

    tasks: list[Task] = []
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        tasks.append(decode_task(line, line_no=line_no))
    return tasks
