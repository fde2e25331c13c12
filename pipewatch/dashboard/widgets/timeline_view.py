"""Timeline view: renders the navigator's visible window as indented rows."""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.widgets import Static

from ...navigator import DetailNavigator
from ...timeline import FlatRow
from ...utils import ICON_CHARS, UNKNOWN_DURATION, format_record_duration, icon_category, indent
from .run_table import ICON_STYLES


def render_row(row: FlatRow, selected: bool = False) -> Text:
    """Render one timeline row: indent, icon, name, duration, log marker."""
    record = row.record
    category = icon_category(record.state, record.result)

    line = Text(indent(row.depth))
    line.append(ICON_CHARS[category], style=ICON_STYLES[category])
    line.append(" ")
    line.append(record.name, style="bold" if row.node.has_children() else "")

    duration = format_record_duration(record.start_time, record.finish_time)
    if duration != UNKNOWN_DURATION:
        line.append(f" ({duration})", style="dim")
    if record.log is not None:
        line.append(" 📄")
    if record.issues:
        errors = sum(1 for i in record.issues if i.type == "error")
        if errors:
            line.append(f" [{errors} error{'s' if errors != 1 else ''}]", style="red")

    if selected:
        line.stylize("reverse")
    return line


class TimelineView(Static):
    """Shows the rows of a DetailNavigator that fit in this widget."""

    DEFAULT_CSS = """
    TimelineView { height: 1fr; }
    """

    def __init__(self, navigator: DetailNavigator, **kwargs: object) -> None:
        super().__init__("", **kwargs)
        self.navigator = navigator

    def on_resize(self, event: events.Resize) -> None:
        self.navigator.set_size(event.size.width, event.size.height)
        self.refresh_rows()

    def refresh_rows(self) -> None:
        nav = self.navigator
        if not len(nav):
            self.update("No timeline data available.\n\nPress r to refresh, Esc to go back")
            return

        lines = Text()
        for offset, row in enumerate(nav.visible_rows()):
            if offset:
                lines.append("\n")
            lines.append_text(render_row(row, selected=nav.top + offset == nav.selected_index))
        self.update(lines)
