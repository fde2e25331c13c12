"""
Azure DevOps client
Thin REST client for the build endpoints the dashboard polls
"""

import base64
import logging
from typing import Any, Dict, List, Optional

import requests

from .exceptions import (
    PipewatchAPIError,
    PipewatchAuthenticationError,
    PipewatchNotFoundError,
)
from .models import Run, TimelineRecord

logger = logging.getLogger(__name__)

API_VERSION = '7.1'


class AzureDevOpsClient:
    """
    Azure DevOps build API client

    Satisfies the RunSource protocol used by the poller.

    Usage:
        client = AzureDevOpsClient('my-org', 'my-project', pat='...')

        runs = client.list_runs(30)
        records = client.get_build_timeline(runs[0].id)
    """

    def __init__(
        self,
        organization: str,
        project: str,
        pat: str,
        timeout: int = 30,
        base_url: Optional[str] = None
    ):
        if not organization:
            raise ValueError('organization cannot be empty')
        if not project:
            raise ValueError('project cannot be empty')
        if not pat:
            raise ValueError('PAT cannot be empty')

        self.organization = organization
        self.project = project
        self.timeout = timeout
        self.base_url = (
            base_url or f'https://dev.azure.com/{organization}/{project}/_apis'
        ).rstrip('/')
        self.session = requests.Session()

        # Azure DevOps expects basic auth with an empty user and the PAT as password
        token = base64.b64encode(f':{pat}'.encode()).decode()
        self.session.headers['Authorization'] = f'Basic {token}'
        self.session.headers['Accept'] = 'application/json'

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        expect_json: bool = True
    ) -> Any:
        """Make HTTP request to API"""
        query = {'api-version': API_VERSION}
        if params:
            query.update(params)

        url = f'{self.base_url}{path}'
        logger.debug('%s %s', method, url)

        try:
            response = self.session.request(
                method,
                url,
                params=query,
                timeout=self.timeout
            )
        except requests.Timeout:
            raise TimeoutError(f'Request to {url} timed out after {self.timeout}s')
        except requests.ConnectionError as e:
            raise PipewatchAPIError(f'Failed to reach {url}: {e}')

        if response.status_code in (401, 403):
            raise PipewatchAuthenticationError(
                f'Authentication failed ({response.status_code}). Check your PAT and its scopes.',
                status_code=response.status_code,
            )
        if response.status_code == 404:
            raise PipewatchNotFoundError(f'Resource not found: {path}', path=path)
        if not 200 <= response.status_code < 300:
            raise PipewatchAPIError(
                f'HTTP {response.status_code}: {response.text[:200]}',
                status_code=response.status_code,
            )

        if not expect_json:
            return response.text

        try:
            return response.json()
        except ValueError:
            raise PipewatchAPIError(
                f'Failed to parse Azure DevOps API response for {path}. '
                'This may indicate an API structure change.'
            )

    def list_runs(self, limit: int) -> List[Run]:
        """List the most recent pipeline runs, newest first

        Args:
            limit: Maximum number of runs to return

        Returns:
            List of Run objects ordered by queue time descending
        """
        response = self._request(
            'GET',
            '/build/builds',
            params={'$top': limit, 'queryOrder': 'queueTimeDescending'},
        )
        try:
            return [Run.from_dict(item) for item in response.get('value', [])]
        except (AttributeError, TypeError, ValueError) as e:
            raise PipewatchAPIError(
                f'Failed to parse Azure DevOps API response for pipeline runs: {e}. '
                'This may indicate an API structure change.'
            )

    def get_build_timeline(self, build_id: int) -> List[TimelineRecord]:
        """Get the flat list of timeline records for a build

        Args:
            build_id: Build (run) ID

        Returns:
            List of TimelineRecord objects in server order (an empty list if
            the build has no timeline yet)
        """
        response = self._request('GET', f'/build/builds/{build_id}/timeline')
        if not response:
            return []
        try:
            return [TimelineRecord.from_dict(r) for r in response.get('records') or []]
        except (AttributeError, TypeError, ValueError) as e:
            raise PipewatchAPIError(
                f'Failed to parse Azure DevOps API response for build timeline: {e}. '
                'This may indicate an API structure change.'
            )

    def get_log_content(self, build_id: int, log_id: int) -> str:
        """Get the plain-text content of one build log

        Args:
            build_id: Build (run) ID
            log_id: Log ID from a timeline record's log reference

        Returns:
            Log text
        """
        return self._request(
            'GET',
            f'/build/builds/{build_id}/logs/{log_id}',
            expect_json=False,
        )

    def close(self):
        """Close the session"""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
