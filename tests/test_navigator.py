"""Tests for DetailNavigator selection and viewport scrolling."""

import pytest

from pipewatch.navigator import DetailNavigator
from pipewatch.timeline import build_timeline_tree
from tests.helpers import make_record


def flat_navigator(count, height=None):
    """Navigator over ``count`` root-level rows."""
    records = [make_record(f"r{i}", type="Task", order=i) for i in range(count)]
    nav = DetailNavigator(build_timeline_tree(records))
    if height is not None:
        nav.set_size(80, height)
    return nav


class TestEmpty:
    def test_empty_navigator(self):
        nav = DetailNavigator()
        assert len(nav) == 0
        assert nav.selected_item() is None
        assert not nav.can_view_logs()
        assert nav.get_status_message() == ""
        assert nav.get_scroll_percent() == 0.0

    def test_movement_on_empty_is_noop(self):
        nav = DetailNavigator()
        nav.set_size(80, 10)
        nav.move_down()
        nav.page_down()
        nav.move_up()
        nav.page_up()
        assert nav.selected_index == 0
        assert nav.top == 0


class TestMovement:
    """move_*/page_* clamp and scroll-follow minimally."""

    def test_thirty_moves_down_in_fifty_rows(self):
        nav = flat_navigator(50, height=14)

        for _ in range(30):
            nav.move_down()

        assert nav.selected_index == 30
        assert nav.top <= 30 < nav.top + 14
        assert nav.top == 17

    def test_move_down_clamps_at_end(self):
        nav = flat_navigator(3, height=10)
        for _ in range(5):
            nav.move_down()
        assert nav.selected_index == 2

    def test_move_up_clamps_at_start(self):
        nav = flat_navigator(3, height=10)
        nav.move_up()
        assert nav.selected_index == 0

    def test_no_scroll_while_inside_window(self):
        nav = flat_navigator(50, height=14)
        for _ in range(13):
            nav.move_down()
        assert nav.top == 0
        nav.move_down()
        assert nav.top == 1

    def test_move_up_scrolls_to_selection(self):
        nav = flat_navigator(50, height=14)
        for _ in range(30):
            nav.move_down()
        for _ in range(14):
            nav.move_up()
        assert nav.selected_index == 16
        assert nav.top == 16

    def test_page_down_moves_by_height(self):
        nav = flat_navigator(50, height=14)
        nav.page_down()
        assert nav.selected_index == 14
        assert nav.top == 1

    def test_page_down_clamps(self):
        nav = flat_navigator(20, height=14)
        nav.page_down()
        nav.page_down()
        assert nav.selected_index == 19
        assert nav.top == 6

    def test_page_up_clamps_and_follows(self):
        nav = flat_navigator(50, height=14)
        for _ in range(3):
            nav.page_down()
        nav.page_up()
        assert nav.selected_index == 28
        nav.page_up()
        nav.page_up()
        nav.page_up()
        assert nav.selected_index == 0
        assert nav.top == 0

    def test_visible_rows_window(self):
        nav = flat_navigator(50, height=5)
        for _ in range(7):
            nav.move_down()
        visible = [row.record.id for row in nav.visible_rows()]
        assert visible == ["r3", "r4", "r5", "r6", "r7"]


class TestSetSize:
    def test_shrinking_keeps_selection_visible(self):
        nav = flat_navigator(50, height=20)
        for _ in range(15):
            nav.move_down()
        nav.set_size(80, 5)
        assert nav.top <= 15 < nav.top + 5

    def test_height_floor_is_one(self):
        nav = flat_navigator(5)
        nav.set_size(80, 0)
        assert nav.height == 1
        nav.page_down()
        assert nav.selected_index == 1


class TestSetTimeline:
    def test_reload_resets_selection(self, sample_records):
        nav = flat_navigator(50, height=10)
        for _ in range(20):
            nav.move_down()

        nav.set_timeline(build_timeline_tree(sample_records))

        assert len(nav) == 5
        assert nav.selected_index == 0
        assert nav.top == 0
        assert nav.selected_item().record.id == "s1"


class TestQueries:
    def test_selected_item_has_depth(self, sample_records):
        nav = DetailNavigator(build_timeline_tree(sample_records))
        nav.set_size(80, 10)
        nav.move_down()
        nav.move_down()
        row = nav.selected_item()
        assert row.record.id == "t1"
        assert row.depth == 2

    def test_stage_without_log(self, sample_records):
        nav = DetailNavigator(build_timeline_tree(sample_records))
        assert not nav.can_view_logs()
        assert nav.get_status_message() == "Stage has no logs"

    def test_job_with_log(self, sample_records):
        nav = DetailNavigator(build_timeline_tree(sample_records))
        nav.move_down()
        assert nav.can_view_logs()
        assert nav.get_status_message() == ""

    def test_scroll_percent(self):
        nav = flat_navigator(5, height=10)
        assert nav.get_scroll_percent() == 0.0
        nav.move_down()
        assert nav.get_scroll_percent() == pytest.approx(25.0)
        nav.page_down()
        assert nav.get_scroll_percent() == pytest.approx(100.0)

    def test_scroll_percent_single_row(self):
        nav = flat_navigator(1, height=10)
        assert nav.get_scroll_percent() == 0.0

    def test_rows_returns_copy(self):
        nav = flat_navigator(3)
        nav.rows.clear()
        assert len(nav) == 3


class TestInvariants:
    def test_out_of_bounds_selection_fails_loudly(self):
        nav = flat_navigator(3)
        nav._selected = 7
        with pytest.raises(AssertionError):
            nav._check_invariants()
