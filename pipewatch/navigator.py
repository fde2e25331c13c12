"""Keyboard navigation over a flattened timeline.

The navigator holds the pre-order rows of one run's timeline, the selected
row, and a viewport window ``[top, top + height)`` over those rows. Moving
the selection out of the window scrolls it by the smallest amount that
brings the selection back into view.
"""

from __future__ import annotations

from typing import Iterable

from .timeline import FlatRow, TreeNode, flatten


class DetailNavigator:
    """Selection and scroll state for the timeline detail view."""

    def __init__(self, roots: Iterable[TreeNode] | None = None) -> None:
        self._rows: list[FlatRow] = []
        self._selected = 0
        self._top = 0
        self._height = 1
        self._width = 0
        if roots is not None:
            self.set_timeline(roots)

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> list[FlatRow]:
        return list(self._rows)

    @property
    def selected_index(self) -> int:
        return self._selected

    @property
    def top(self) -> int:
        return self._top

    @property
    def height(self) -> int:
        return self._height

    def set_size(self, width: int, height: int) -> None:
        """Record the viewport size used for paging and scroll-follow."""
        self._width = width
        self._height = max(1, height)
        self._follow_selection()

    def set_timeline(self, roots: Iterable[TreeNode]) -> None:
        """Replace the rows with a freshly built tree and reset the selection."""
        self._rows = flatten(roots)
        self._selected = 0
        self._top = 0
        self._check_invariants()

    def move_down(self) -> None:
        self._select(self._selected + 1)

    def move_up(self) -> None:
        self._select(self._selected - 1)

    def page_down(self) -> None:
        self._select(self._selected + self._height)

    def page_up(self) -> None:
        self._select(self._selected - self._height)

    def selected_item(self) -> FlatRow | None:
        if not self._rows:
            return None
        return self._rows[self._selected]

    def visible_rows(self) -> list[FlatRow]:
        return self._rows[self._top:self._top + self._height]

    def can_view_logs(self) -> bool:
        row = self.selected_item()
        return row is not None and row.record.log is not None

    def get_status_message(self) -> str:
        """Hint shown when the selected record has nothing to open."""
        row = self.selected_item()
        if row is None or row.record.log is not None:
            return ""
        return f"{row.record.type or 'Record'} has no logs"

    def get_scroll_percent(self) -> float:
        if len(self._rows) <= 1:
            return 0.0
        return self._selected / (len(self._rows) - 1) * 100

    def _select(self, index: int) -> None:
        if not self._rows:
            return
        self._selected = min(max(index, 0), len(self._rows) - 1)
        self._follow_selection()

    def _follow_selection(self) -> None:
        if self._selected < self._top:
            self._top = self._selected
        elif self._selected >= self._top + self._height:
            self._top = self._selected - self._height + 1
        self._check_invariants()

    def _check_invariants(self) -> None:
        if self._rows:
            assert 0 <= self._selected < len(self._rows), (
                f"selection {self._selected} outside 0..{len(self._rows) - 1}"
            )
            assert self._top <= self._selected < self._top + self._height
        else:
            assert self._selected == 0 and self._top == 0
