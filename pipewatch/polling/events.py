"""Messages produced by the polling commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..models import Run


@dataclass(frozen=True)
class TickMsg:
    """Sent when the polling interval elapses; time to fetch again."""


@dataclass(frozen=True)
class RunsUpdated:
    """Result of one fetch attempt: either ``runs`` or ``error``, never both."""

    runs: list[Run] | None = None
    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ConnectionState(Enum):
    CONNECTED = "connected"
    CONNECTING = "connecting"
    DISCONNECTED = "disconnected"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ConnectionStateChanged:
    """Informational message derived from consecutive fetch outcomes."""

    state: ConnectionState
    error: BaseException | None = None


def connection_changed(
    previous: ConnectionState,
    current: ConnectionState,
    error: BaseException | None = None,
) -> ConnectionStateChanged | None:
    """Return a ConnectionStateChanged if the state moved, else None."""
    if previous == current:
        return None
    return ConnectionStateChanged(state=current, error=error)
