"""Pipewatch Dashboard: Textual TUI app.

Launch with: python -m pipewatch.dashboard
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Label

from ..client import AzureDevOpsClient
from ..config import DashboardConfig
from ..polling import (
    Command,
    ConnectionState,
    ConnectionStateChanged,
    ErrorHandler,
    Poller,
    RunsUpdated,
    TickMsg,
    batch,
    connection_changed,
)
from .data import DataManager
from .screens.timeline import TimelineScreen
from .widgets.run_table import RunSelected, RunTable

logger = logging.getLogger(__name__)


class PipewatchDashboard(App):
    """Pipeline runs dashboard built with Textual.

    The poller's commands run on worker threads. Each command returns one
    message, which is handed back to the event loop via call_from_thread and
    handled in ``handle_poll_message``. Messages are therefore handled one at
    a time, in the order they arrive.
    """

    TITLE = "Pipewatch"
    SUB_TITLE = "Pipelines"

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "refresh", "Refresh", show=True),
    ]

    DEFAULT_CSS = """
    #status-line { height: 1; padding: 0 1; }
    #status-line.-error { color: $warning; }
    #status-line.-failing { color: $error; }
    """

    def __init__(
        self,
        config: DashboardConfig,
        client: AzureDevOpsClient,
        poller: Poller | None = None,
        error_handler: ErrorHandler | None = None,
        **kwargs: object,
    ) -> None:
        super().__init__(**kwargs)
        self._config = config
        self._client = client
        self._data_manager = DataManager(client)
        # Lets a sleeping timer command wake up early on shutdown
        self._stop_event = threading.Event()
        self.poller = poller or Poller(
            client,
            interval=config.polling_interval,
            page_size=config.run_count,
            sleep=self._stop_event.wait,
        )
        self.error_handler = error_handler or ErrorHandler()
        self.connection_state = ConnectionState.CONNECTING
        self._last_updated: datetime | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield RunTable(id="runs")
        yield Label("Connecting...", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = f"{self._config.organization}/{self._config.project}"
        self.run_commands(batch(self.poller.fetch_once(), self.poller.start_polling()))

    def on_unmount(self) -> None:
        self._stop_polling()

    def action_quit(self) -> None:
        self._stop_polling()
        self.exit()

    def action_refresh(self) -> None:
        self.run_commands(batch(self.poller.fetch_once()))

    def run_commands(self, commands: list[Command]) -> None:
        for command in commands:
            self._run_command(command)

    @work(thread=True)
    def _run_command(self, command: Command) -> None:
        """Run one poller command off the event loop and deliver its message."""
        message = command()
        if self.poller.is_stopped:
            return
        try:
            self.call_from_thread(self.handle_poll_message, message)
        except RuntimeError:
            # App shut down between the check above and delivery
            logger.debug("Dropped %s after shutdown", type(message).__name__)

    def handle_poll_message(self, message: object) -> None:
        """Handle one message from a poller command (event loop only)."""
        if isinstance(message, TickMsg):
            self.run_commands(self.poller.on_tick())
        elif isinstance(message, RunsUpdated):
            self._apply_update(message)
        elif isinstance(message, ConnectionStateChanged):
            self._apply_connection_state(message)
        else:
            logger.warning("Unhandled message: %r", message)

    def _apply_update(self, update: RunsUpdated) -> None:
        if self.poller.is_stopped:
            return

        previous = self.error_handler.connection_state()
        runs, had_error = self.error_handler.process_update(update)
        if runs is not None:
            self.query_one(RunTable).update_runs(runs)
        if not had_error:
            self._last_updated = datetime.now()

        changed = connection_changed(
            previous, self.error_handler.connection_state(), update.error
        )
        if changed is not None:
            self.handle_poll_message(changed)
        self._update_status_line()

    def _apply_connection_state(self, message: ConnectionStateChanged) -> None:
        self.connection_state = message.state
        if message.state == ConnectionState.DISCONNECTED:
            self.notify(
                self.error_handler.recovery_message(), severity="error", timeout=6
            )

    def _update_status_line(self) -> None:
        label = self.query_one("#status-line", Label)
        handler = self.error_handler
        label.set_class(handler.has_error() and handler.is_recoverable(), "-error")
        label.set_class(not handler.is_recoverable(), "-failing")

        parts = [str(self.connection_state)]
        if self._last_updated is not None:
            parts.append(f"updated {self._last_updated:%H:%M:%S}")
        message = handler.recovery_message()
        if message:
            parts.append(message)
            parts.append(handler.error_message())
        label.update("  |  ".join(p for p in parts if p))

    def on_run_selected(self, event: RunSelected) -> None:
        """Open the timeline screen for the selected run."""
        try:
            self.push_screen(TimelineScreen(event.run, self._data_manager))
        except Exception:
            logger.exception("Failed to open timeline for run %s", event.run.id)
            self.notify("Failed to open timeline", severity="error", timeout=4)

    def _stop_polling(self) -> None:
        self.poller.stop()
        self._stop_event.set()
