from .run_table import RunSelected, RunTable
from .timeline_view import TimelineView

__all__ = ["RunSelected", "RunTable", "TimelineView"]
