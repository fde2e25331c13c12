"""TimelineScreen: drill-down into one run's stages, jobs and tasks."""

from __future__ import annotations

import logging

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Label
from textual.worker import get_current_worker

from ...models import Run, TimelineRecord
from ...navigator import DetailNavigator
from ...timeline import build_timeline_tree
from ..data import DataManager
from ..widgets.timeline_view import TimelineView
from .log_viewer import LogViewerScreen

logger = logging.getLogger(__name__)


class TimelineScreen(Screen):
    """Navigable timeline for a single run.

    The timeline loads in a background thread. Each (re)load rebuilds the
    tree from scratch and resets the selection.
    """

    BINDINGS = [
        Binding("escape", "app.pop_screen", "Back", show=True),
        Binding("up,k", "move_up", "Up", show=False),
        Binding("down,j", "move_down", "Down", show=False),
        Binding("pageup", "page_up", "Page up", show=False),
        Binding("pagedown", "page_down", "Page down", show=False),
        Binding("enter", "view_logs", "View logs", show=True),
        Binding("r", "reload", "Reload", show=True),
    ]

    DEFAULT_CSS = """
    TimelineScreen #timeline-title { text-style: bold; padding: 0 1; }
    TimelineScreen #timeline-status { height: 1; padding: 0 1; color: $text-muted; }
    TimelineScreen TimelineView { padding: 0 1; }
    """

    def __init__(self, run: Run, data_manager: DataManager, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._run = run
        self._data_manager = data_manager
        self.navigator = DetailNavigator()
        self.loading_timeline = False

    def compose(self) -> ComposeResult:
        run = self._run
        yield Label(f"{run.definition_name} #{run.build_number}", id="timeline-title")
        yield TimelineView(self.navigator, id="timeline-view")
        yield Label("", id="timeline-status")
        yield Footer()

    def on_mount(self) -> None:
        self.action_reload()

    def action_reload(self) -> None:
        self.loading_timeline = True
        self._set_status(f"Loading timeline for {self._run.definition_name} #{self._run.build_number}...")
        self._load_timeline()

    @work(thread=True, exclusive=True, group="timeline")
    def _load_timeline(self) -> None:
        """Fetch the timeline in a background thread.

        A reload cancels the previous worker; its result is then discarded.
        """
        worker = get_current_worker()
        try:
            records = self._data_manager.fetch_timeline_sync(self._run.id)
        except Exception as exc:
            logger.exception("Failed to load timeline for run %s", self._run.id)
            if not worker.is_cancelled:
                self.app.call_from_thread(self._show_error, exc)
            return
        if worker.is_cancelled:
            logger.debug("Discarding stale timeline for run %s", self._run.id)
            return
        self.app.call_from_thread(self.apply_timeline, records)

    def apply_timeline(self, records: list[TimelineRecord]) -> None:
        """Rebuild the tree and hand it to the navigator (UI thread)."""
        self.loading_timeline = False
        self.navigator.set_timeline(build_timeline_tree(records))
        self._redraw()

    def _show_error(self, exc: Exception) -> None:
        self.loading_timeline = False
        self.query_one(TimelineView).update(
            f"Error loading timeline: {exc}\n\nPress r to retry, Esc to go back"
        )
        self._set_status("")

    def action_move_up(self) -> None:
        self.navigator.move_up()
        self._redraw()

    def action_move_down(self) -> None:
        self.navigator.move_down()
        self._redraw()

    def action_page_up(self) -> None:
        self.navigator.page_up()
        self._redraw()

    def action_page_down(self) -> None:
        self.navigator.page_down()
        self._redraw()

    def action_view_logs(self) -> None:
        if self.navigator.can_view_logs():
            record = self.navigator.selected_item().record
            self.app.push_screen(LogViewerScreen(self._run, record, self._data_manager))
            return
        message = self.navigator.get_status_message()
        if message:
            self.notify(message, severity="warning", timeout=3)

    def _redraw(self) -> None:
        self.query_one(TimelineView).refresh_rows()
        nav = self.navigator
        if not len(nav):
            self._set_status("")
            return
        parts = [f"{nav.selected_index + 1}/{len(nav)}", f"{nav.get_scroll_percent():.0f}%"]
        hint = nav.get_status_message()
        if hint:
            parts.append(hint)
        self._set_status("  |  ".join(parts))

    def _set_status(self, text: str) -> None:
        self.query_one("#timeline-status", Label).update(text)
