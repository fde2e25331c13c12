"""Data layer for the dashboard screens.

Wraps the Azure DevOps client calls the detail screens need. Every method is
synchronous and is meant to be called from a background thread (via
Textual's @work).
"""

from ..client import AzureDevOpsClient
from ..models import TimelineRecord


class DataManager:
    """Fetches timelines and log content for individual runs."""

    def __init__(self, client: AzureDevOpsClient) -> None:
        self._client = client

    def fetch_timeline_sync(self, build_id: int) -> list[TimelineRecord]:
        """Fetch the flat timeline records for one run.

        Raises:
            PipewatchError: If the API call fails or the payload is malformed.
            TimeoutError: If the request times out.
        """
        return self._client.get_build_timeline(build_id)

    def fetch_log_sync(self, build_id: int, log_id: int) -> str:
        """Fetch the text of one build log."""
        return self._client.get_log_content(build_id, log_id)
