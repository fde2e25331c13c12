"""Runs table: one row per pipeline run, newest first."""

from __future__ import annotations

from rich.text import Text
from textual.message import Message
from textual.widgets import DataTable
from textual.widgets.data_table import CellDoesNotExist

from ...models import Run
from ...utils import ICON_CHARS, format_record_duration, icon_category, time_ago

ICON_STYLES = {
    "running": "bold cyan",
    "pending": "dim",
    "succeeded": "green",
    "warning": "yellow",
    "failed": "bold red",
    "skipped": "dim",
}

COLUMNS = ("", "Pipeline", "Build", "Branch", "Queued", "Duration")


def run_icon(run: Run) -> Text:
    """Colored status glyph for a run."""
    status = run.status.lower()
    if status in ("notstarted", "postponed"):
        category = "pending"
    else:
        category = icon_category(run.status, run.result)
    return Text(ICON_CHARS[category], style=ICON_STYLES[category])


class RunSelected(Message):
    """Posted when the user presses Enter on a run row."""

    def __init__(self, run: Run) -> None:
        super().__init__()
        self.run = run


class RunTable(DataTable):
    """DataTable of runs that keeps the cursor on the same run across refreshes."""

    DEFAULT_CSS = """
    RunTable { height: 1fr; }
    """

    def __init__(self, **kwargs: object) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self._runs: dict[str, Run] = {}

    def on_mount(self) -> None:
        self._ensure_columns()

    def _ensure_columns(self) -> None:
        if not self.columns:
            self.add_columns(*COLUMNS)

    def update_runs(self, runs: list[Run]) -> None:
        """Replace all rows with ``runs``."""
        self._ensure_columns()
        selected = self.selected_run()
        self.clear()
        self._runs = {}
        restore_row = 0
        for i, run in enumerate(runs):
            key = str(run.id)
            self._runs[key] = run
            if selected is not None and run.id == selected.id:
                restore_row = i
            self.add_row(
                run_icon(run),
                run.definition_name,
                run.build_number,
                run.branch_name,
                time_ago(run.queue_time),
                format_record_duration(run.start_time, run.finish_time),
                key=key,
            )
        if runs:
            self.move_cursor(row=restore_row)

    def selected_run(self) -> Run | None:
        if not self._runs or self.row_count == 0:
            return None
        try:
            row_key, _ = self.coordinate_to_cell_key(self.cursor_coordinate)
        except CellDoesNotExist:
            return None
        return self._runs.get(row_key.value)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        run = self._runs.get(event.row_key.value)
        if run is not None:
            event.stop()
            self.post_message(RunSelected(run))
