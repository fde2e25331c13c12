"""Background polling of pipeline runs.

The poller hands out commands (zero-argument callables) that the dashboard
runs on worker threads. Each command returns exactly one message from
``events``, which the dashboard feeds back into its own event loop.
"""

from .errorhandler import MAX_RECOVERABLE_ERRORS, ErrorHandler
from .events import (
    ConnectionState,
    ConnectionStateChanged,
    RunsUpdated,
    TickMsg,
    connection_changed,
)
from .poller import (
    DEFAULT_INTERVAL,
    DEFAULT_PAGE_SIZE,
    MIN_INTERVAL,
    Command,
    Poller,
    RunSource,
    batch,
)

__all__ = [
    "Command",
    "ConnectionState",
    "ConnectionStateChanged",
    "DEFAULT_INTERVAL",
    "DEFAULT_PAGE_SIZE",
    "ErrorHandler",
    "MAX_RECOVERABLE_ERRORS",
    "MIN_INTERVAL",
    "Poller",
    "RunSource",
    "RunsUpdated",
    "TickMsg",
    "batch",
    "connection_changed",
]
