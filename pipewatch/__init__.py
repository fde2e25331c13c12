"""
pipewatch: terminal dashboard for Azure DevOps pipeline runs.

Example:
    >>> from pipewatch import AzureDevOpsClient, ErrorHandler, Poller
    >>>
    >>> client = AzureDevOpsClient('my-org', 'my-project', pat='...')
    >>> poller = Poller(client, interval=60, page_size=30)
    >>> handler = ErrorHandler()
    >>>
    >>> fetch = poller.fetch_once()
    >>> runs, had_error = handler.process_update(fetch())
"""

from .client import AzureDevOpsClient
from .exceptions import (
    PipewatchAPIError,
    PipewatchAuthenticationError,
    PipewatchError,
    PipewatchNotFoundError,
)
from .models import LogReference, Run, TimelineRecord
from .navigator import DetailNavigator
from .polling import ErrorHandler, Poller
from .timeline import FlatRow, TreeNode, build_timeline_tree, flatten

__version__ = "0.1.0"
__all__ = [
    "AzureDevOpsClient",
    "DetailNavigator",
    "ErrorHandler",
    "FlatRow",
    "LogReference",
    "PipewatchAPIError",
    "PipewatchAuthenticationError",
    "PipewatchError",
    "PipewatchNotFoundError",
    "Poller",
    "Run",
    "TimelineRecord",
    "TreeNode",
    "build_timeline_tree",
    "flatten",
]
