"""Shared test fixtures for pipewatch tests."""

import pytest

from tests.helpers import make_record, make_run


@pytest.fixture
def sample_records():
    """The five-record stage/job/task timeline, deliberately shuffled."""
    return [
        make_record("t2", parent="j1", type="Task", order=2, log_id=12),
        make_record("s2", type="Stage", order=2),
        make_record("j1", parent="s1", type="Job", order=1, log_id=5),
        make_record("s1", type="Stage", order=1),
        make_record("t1", parent="j1", type="Task", order=1, log_id=11),
    ]


@pytest.fixture
def runs():
    return [make_run(1), make_run(2, status="inProgress", result="")]


@pytest.fixture
def fake_sleep():
    """Records requested sleep durations instead of sleeping."""
    calls = []

    def sleep(seconds):
        calls.append(seconds)

    sleep.calls = calls
    return sleep
