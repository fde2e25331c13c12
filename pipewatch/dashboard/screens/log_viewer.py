"""LogViewerScreen: plain-text view of one timeline record's log."""

from __future__ import annotations

import logging

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Label, Log
from textual.worker import get_current_worker

from ...models import Run, TimelineRecord
from ...utils import format_log_lines
from ..data import DataManager

logger = logging.getLogger(__name__)


class LogViewerScreen(Screen):
    """Shows the log attached to a timeline record. Escape goes back."""

    BINDINGS = [
        Binding("escape", "app.pop_screen", "Back", show=True),
        Binding("r", "reload", "Reload", show=True),
        Binding("g", "jump_top", "Top", show=True),
        Binding("G", "jump_bottom", "Bottom", show=True),
    ]

    DEFAULT_CSS = """
    LogViewerScreen #log-title { text-style: bold; padding: 0 1; }
    LogViewerScreen Log { height: 1fr; }
    """

    def __init__(
        self,
        run: Run,
        record: TimelineRecord,
        data_manager: DataManager,
        **kwargs: object,
    ) -> None:
        super().__init__(**kwargs)
        self._run = run
        self._record = record
        self._data_manager = data_manager

    def compose(self) -> ComposeResult:
        yield Label(
            f"{self._run.definition_name} #{self._run.build_number} › {self._record.name}",
            id="log-title",
        )
        yield Log(id="log-content", auto_scroll=False)
        yield Footer()

    def on_mount(self) -> None:
        self.action_reload()

    def action_reload(self) -> None:
        self._show_lines(["Loading log..."])
        self._load_log()

    def action_jump_top(self) -> None:
        self.query_one(Log).scroll_home(animate=False)

    def action_jump_bottom(self) -> None:
        self.query_one(Log).scroll_end(animate=False)

    @work(thread=True, exclusive=True, group="log")
    def _load_log(self) -> None:
        """Fetch log content in a background thread."""
        if self._record.log is None:
            return
        worker = get_current_worker()
        try:
            content = self._data_manager.fetch_log_sync(self._run.id, self._record.log.id)
        except Exception as exc:
            logger.exception(
                "Failed to load log %s for run %s", self._record.log.id, self._run.id
            )
            lines = [f"Error loading log: {exc}", "", "Press r to retry, Esc to go back"]
        else:
            lines = format_log_lines(content) or [
                "No log content available.",
                "",
                "Press Esc to go back",
            ]
        if not worker.is_cancelled:
            self.app.call_from_thread(self._show_lines, lines)

    def _show_lines(self, lines: list[str]) -> None:
        log = self.query_one(Log)
        log.clear()
        log.write_lines(lines)
        log.scroll_home(animate=False)
