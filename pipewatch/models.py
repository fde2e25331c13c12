"""Data model for pipeline runs and their execution timelines.

All records are immutable once parsed. A fresh fetch replaces them wholesale.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

# Azure DevOps emits up to 7 fractional-second digits; fromisoformat wants 6
_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp from the API into an aware datetime.

    Returns None for missing, empty, or unparsable values.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    text = str(value).replace("Z", "+00:00")
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        dt = datetime.fromisoformat(text)
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class Run:
    """One execution instance of a pipeline definition."""

    id: int
    build_number: str
    definition_name: str
    status: str
    result: str = ""
    source_branch: str = ""
    queue_time: datetime | None = None
    start_time: datetime | None = None
    finish_time: datetime | None = None
    web_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Run":
        """Create a Run from a /build/builds API entry."""
        definition = data.get("definition") or {}
        links = data.get("_links") or {}
        web = links.get("web") or {}
        return cls(
            id=int(data.get("id") or 0),
            build_number=str(data.get("buildNumber") or ""),
            definition_name=str(definition.get("name") or ""),
            status=str(data.get("status") or ""),
            result=str(data.get("result") or ""),
            source_branch=str(data.get("sourceBranch") or ""),
            queue_time=parse_timestamp(data.get("queueTime")),
            start_time=parse_timestamp(data.get("startTime")),
            finish_time=parse_timestamp(data.get("finishTime")),
            web_url=str(web.get("href") or ""),
        )

    @property
    def branch_name(self) -> str:
        """Source branch without the refs/heads/ prefix."""
        return self.source_branch.removeprefix("refs/heads/")


@dataclass(frozen=True)
class LogReference:
    """Opaque pointer to a build log attached to a timeline record."""

    id: int
    type: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "LogReference | None":
        if not data:
            return None
        return cls(
            id=int(data.get("id") or 0),
            type=str(data.get("type") or ""),
            url=str(data.get("url") or ""),
        )


@dataclass(frozen=True)
class Issue:
    """An error or warning attached to a timeline record."""

    type: str
    message: str


@dataclass(frozen=True)
class TimelineRecord:
    """One Stage, Job, or Task in a run's execution timeline."""

    id: str
    name: str
    type: str
    parent_id: str | None = None
    state: str = "pending"  # pending, inProgress, completed
    result: str = ""  # succeeded, failed, skipped, ... (empty until completed)
    order: int = 0
    log: LogReference | None = None
    start_time: datetime | None = None
    finish_time: datetime | None = None
    issues: tuple[Issue, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimelineRecord":
        """Create a TimelineRecord from a /timeline API record."""
        issues = tuple(
            Issue(type=str(i.get("type") or ""), message=str(i.get("message") or ""))
            for i in (data.get("issues") or [])
        )
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            type=str(data.get("type") or ""),
            parent_id=data.get("parentId") or None,
            state=str(data.get("state") or "pending"),
            result=str(data.get("result") or ""),
            order=int(data.get("order") or 0),
            log=LogReference.from_dict(data.get("log")),
            start_time=parse_timestamp(data.get("startTime")),
            finish_time=parse_timestamp(data.get("finishTime")),
            issues=issues,
        )

    @property
    def has_log(self) -> bool:
        return self.log is not None
