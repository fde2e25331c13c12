"""Display helpers shared by the dashboard widgets.

Everything here is a pure function of record state, result, type and
timestamps, so the rendering layer stays deterministic.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

UNKNOWN_DURATION = "-"

ICON_CHARS = {
    "running": "●",
    "pending": "○",
    "succeeded": "✓",
    "warning": "◐",
    "failed": "✗",
    "skipped": "○",
}


def icon_category(state: str, result: str) -> str:
    """Map a record's state/result to one of the ICON_CHARS categories."""
    state = (state or "").lower()
    result = (result or "").lower()
    if state == "inprogress":
        return "running"
    if state == "pending":
        return "pending"
    if result == "succeeded":
        return "succeeded"
    if result in ("succeededwithissues", "partiallysucceeded"):
        return "warning"
    if result == "failed":
        return "failed"
    return "skipped"


def indent(depth: int, width: int = 2) -> str:
    return " " * (max(depth, 0) * width)


def format_duration(delta: timedelta) -> str:
    """Format a duration as '45s', '2m5s' or '1h3m0s'."""
    secs = max(int(delta.total_seconds()), 0)
    if secs < 60:
        return f"{secs}s"
    if secs < 3600:
        return f"{secs // 60}m{secs % 60}s"
    return f"{secs // 3600}h{(secs % 3600) // 60}m{secs % 60}s"


def format_record_duration(start: datetime | None, finish: datetime | None) -> str:
    """Duration between start and finish, or UNKNOWN_DURATION if either is missing."""
    if start is None or finish is None:
        return UNKNOWN_DURATION
    return format_duration(finish - start)


def time_ago(dt: datetime | None) -> str:
    """Convert a timestamp to a relative time string like '5m ago'."""
    if dt is None:
        return ""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    mins = int((datetime.now(timezone.utc) - dt).total_seconds() / 60)
    if mins < 1:
        return "just now"
    if mins < 60:
        return f"{mins}m ago"
    hours = mins // 60
    if hours < 24:
        return f"{hours}h {mins % 60}m ago"
    days = hours // 24
    return f"{days}d {hours % 24}h ago"


# Azure DevOps prefixes each log line with e.g. "2024-02-06T10:00:00.0000000Z "
LOG_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d+Z\s*")


def strip_log_timestamp(line: str) -> str:
    return LOG_TIMESTAMP_RE.sub("", line, count=1)


def format_log_lines(content: str) -> list[str]:
    """Split raw log text into display lines without timestamp prefixes.

    A single trailing empty line (from a final newline) is dropped.
    """
    if not content:
        return []
    lines = [strip_log_timestamp(line) for line in content.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines
