"""Error state for the polling loop.

Turns each fetch outcome into something safe to display: fresh runs on
success, the last known good runs on failure. Errors never escape as
exceptions; they become state plus a message.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from ..models import Run
from .events import ConnectionState, RunsUpdated

logger = logging.getLogger(__name__)

# Above this many consecutive failures the error is treated as persistent
MAX_RECOVERABLE_ERRORS = 5

RETRYING_MESSAGE = "Connection issue. Retrying..."
MANUAL_RETRY_MESSAGE = "Connection failed. Check your network and press 'r' to retry."


class ErrorHandler:
    """Tracks consecutive fetch failures and the last successful snapshot.

    States:
    - healthy:  no current error
    - degraded: current error, consecutive_errors <= MAX_RECOVERABLE_ERRORS
    - failing:  consecutive_errors > MAX_RECOVERABLE_ERRORS

    The snapshot is copied on the way in and on the way out, so callers never
    hold a reference to the stored list.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._error: BaseException | None = None
        self._consecutive_errors = 0
        self._last_error_time: datetime | None = None
        self._last_known_good: list[Run] | None = None
        self._seen_outcome = False

    def set_error(self, error: BaseException) -> None:
        with self._lock:
            count = self._record_error_locked(error)
        _log_failure(count, error)

    def _record_error_locked(self, error: BaseException) -> int:
        self._error = error
        self._consecutive_errors += 1
        self._last_error_time = datetime.now(timezone.utc)
        self._seen_outcome = True
        return self._consecutive_errors

    def clear_error(self) -> None:
        with self._lock:
            recovered_after = self._reset_locked()
        _log_recovery(recovered_after)

    def _reset_locked(self) -> int:
        """Clear the error state; caller holds the lock. Returns the old count."""
        recovered_after = self._consecutive_errors
        self._error = None
        self._consecutive_errors = 0
        self._seen_outcome = True
        return recovered_after

    def set_last_known_good(self, runs: list[Run]) -> None:
        with self._lock:
            self._last_known_good = list(runs)

    def last_known_good(self) -> list[Run] | None:
        """Return a copy of the last successful snapshot, or None if there is none."""
        with self._lock:
            return self._copy_snapshot_locked()

    def _copy_snapshot_locked(self) -> list[Run] | None:
        if self._last_known_good is None:
            return None
        return list(self._last_known_good)

    def process_update(self, update: RunsUpdated) -> tuple[list[Run] | None, bool]:
        """Absorb one fetch outcome.

        Returns:
            (runs_to_display, had_error). On failure runs_to_display is the
            last known good snapshot (None if nothing has succeeded yet),
            never the failed payload.
        """
        if update.error is not None:
            with self._lock:
                count = self._record_error_locked(update.error)
                snapshot = self._copy_snapshot_locked()
            _log_failure(count, update.error)
            return snapshot, True

        runs = update.runs if update.runs is not None else []
        with self._lock:
            self._last_known_good = list(runs)
            recovered_after = self._reset_locked()
        _log_recovery(recovered_after)
        return runs, False

    @property
    def error(self) -> BaseException | None:
        with self._lock:
            return self._error

    @property
    def consecutive_errors(self) -> int:
        with self._lock:
            return self._consecutive_errors

    @property
    def last_error_time(self) -> datetime | None:
        with self._lock:
            return self._last_error_time

    def has_error(self) -> bool:
        with self._lock:
            return self._error is not None

    def error_message(self) -> str:
        with self._lock:
            return "" if self._error is None else str(self._error)

    def is_recoverable(self) -> bool:
        """True while the failure streak is short enough to keep retrying quietly."""
        with self._lock:
            return self._consecutive_errors <= MAX_RECOVERABLE_ERRORS

    def recovery_message(self) -> str:
        with self._lock:
            if self._error is None:
                return ""
            if self._consecutive_errors <= MAX_RECOVERABLE_ERRORS:
                return RETRYING_MESSAGE
            return MANUAL_RETRY_MESSAGE

    def connection_state(self) -> ConnectionState:
        with self._lock:
            if not self._seen_outcome:
                return ConnectionState.CONNECTING
            if self._error is None:
                return ConnectionState.CONNECTED
            if self._consecutive_errors <= MAX_RECOVERABLE_ERRORS:
                return ConnectionState.ERROR
            return ConnectionState.DISCONNECTED


def _log_failure(count: int, error: BaseException) -> None:
    logger.warning("Fetch failed (%d consecutive): %s", count, error)
    if count == MAX_RECOVERABLE_ERRORS + 1:
        logger.error(
            "Fetch has failed %d times in a row; waiting for manual retry", count
        )


def _log_recovery(recovered_after: int) -> None:
    if recovered_after:
        logger.info("Connection recovered after %d failed fetches", recovered_after)
