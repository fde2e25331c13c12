"""Fixed-interval poller for pipeline runs.

The poller never runs anything itself. It returns commands: zero-argument
callables that the caller runs off its event loop (a worker thread). Each
command returns exactly one message. The loop re-arms itself because every
TickMsg is answered with ``on_tick()``, which yields one fetch command and
one new timer command. Nothing recurses and nothing blocks the loop.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Protocol

from ..models import Run
from .events import RunsUpdated, TickMsg

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0  # seconds
MIN_INTERVAL = 5.0  # seconds
DEFAULT_PAGE_SIZE = 30

Command = Callable[[], object]


class RunSource(Protocol):
    """Anything that can list recent pipeline runs.

    Implementations raise on failure; the poller turns the exception into
    ``RunsUpdated.error``.
    """

    def list_runs(self, limit: int) -> list[Run]: ...


def _clamp_interval(interval: float) -> float:
    if interval <= 0:
        return DEFAULT_INTERVAL
    if interval < MIN_INTERVAL:
        return MIN_INTERVAL
    return float(interval)


def _clamp_page_size(page_size: int) -> int:
    if page_size < 1:
        return DEFAULT_PAGE_SIZE
    return int(page_size)


def batch(*commands: Command | None) -> list[Command]:
    """Collect independent commands, dropping the None a stopped poller returns."""
    return [cmd for cmd in commands if cmd is not None]


class Poller:
    """Owns the polling interval, page size and stopped flag.

    All three are guarded by a lock because ``stop()`` and the setters may be
    called from the controlling thread while a fetch command is running on a
    worker thread.

    Args:
        source: The RunSource to fetch from.
        interval: Seconds between ticks. ``<= 0`` means DEFAULT_INTERVAL,
            anything below MIN_INTERVAL is raised to MIN_INTERVAL.
        page_size: Number of runs to request. ``< 1`` means DEFAULT_PAGE_SIZE.
        sleep: Blocking sleep used by timer commands (tests pass a fake).
    """

    def __init__(
        self,
        source: RunSource,
        interval: float = 0,
        page_size: int = 0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._source = source
        self._sleep = sleep
        self._lock = threading.Lock()
        self._interval = _clamp_interval(interval)
        self._page_size = _clamp_page_size(page_size)
        self._stopped = False

    def configure(self, interval: float, page_size: int) -> None:
        with self._lock:
            self._interval = _clamp_interval(interval)
            self._page_size = _clamp_page_size(page_size)

    def set_interval(self, interval: float) -> None:
        with self._lock:
            self._interval = _clamp_interval(interval)

    def set_page_size(self, page_size: int) -> None:
        with self._lock:
            self._page_size = _clamp_page_size(page_size)

    @property
    def interval(self) -> float:
        with self._lock:
            return self._interval

    @property
    def page_size(self) -> int:
        with self._lock:
            return self._page_size

    @property
    def is_stopped(self) -> bool:
        with self._lock:
            return self._stopped

    def stop(self) -> None:
        """Stop scheduling new work. Commands already handed out still run."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
        logger.info("Poller stopped")

    def fetch_once(self) -> Command | None:
        """Return a command that fetches one page of runs, or None if stopped."""
        with self._lock:
            if self._stopped:
                return None
            page_size = self._page_size
        source = self._source

        def fetch() -> RunsUpdated:
            try:
                runs = source.list_runs(page_size)
            except Exception as exc:
                logger.debug("Fetch of %d runs failed: %s", page_size, exc)
                return RunsUpdated(runs=None, error=exc)
            return RunsUpdated(runs=list(runs or []), error=None)

        return fetch

    def start_polling(self) -> Command | None:
        """Return a command that sleeps one interval then yields a TickMsg.

        Fires once. Returns None if stopped.
        """
        with self._lock:
            if self._stopped:
                return None
            interval = self._interval
        sleep = self._sleep

        def wait_for_tick() -> TickMsg:
            sleep(interval)
            return TickMsg()

        return wait_for_tick

    def on_tick(self) -> list[Command]:
        """Answer a TickMsg: fetch now and arm the next tick.

        Re-arms regardless of how the previous fetch went. Returns an empty
        list once stopped.
        """
        if self.is_stopped:
            return []
        return batch(self.fetch_once(), self.start_polling())
