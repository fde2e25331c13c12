"""Builders and test doubles shared by the pipewatch tests."""

from datetime import datetime, timedelta, timezone

from pipewatch.models import LogReference, Run, TimelineRecord


def make_record(
    id,
    parent=None,
    type="Task",
    order=1,
    state="completed",
    result="succeeded",
    log_id=None,
    name=None,
    start=None,
    finish=None,
):
    """Build a TimelineRecord with sensible defaults."""
    return TimelineRecord(
        id=id,
        name=name or id,
        type=type,
        parent_id=parent,
        state=state,
        result=result,
        order=order,
        log=LogReference(id=log_id) if log_id is not None else None,
        start_time=start,
        finish_time=finish,
    )


def make_run(id=1, status="completed", result="succeeded", name="ci"):
    return Run(
        id=id,
        build_number=f"20240115.{id}",
        definition_name=name,
        status=status,
        result=result,
        source_branch="refs/heads/main",
        queue_time=datetime.now(timezone.utc) - timedelta(minutes=5),
    )


class FakeSource:
    """RunSource test double. Pops one outcome per call; exceptions are raised."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def list_runs(self, limit):
        self.calls.append(limit)
        outcome = self.outcomes.pop(0) if self.outcomes else []
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


