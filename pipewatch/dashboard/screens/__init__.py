from .log_viewer import LogViewerScreen
from .timeline import TimelineScreen

__all__ = ["LogViewerScreen", "TimelineScreen"]
