"""Tests for AzureDevOpsClient with the HTTP session mocked out."""

import base64
from unittest.mock import MagicMock, patch

import pytest
import requests

from pipewatch.client import AzureDevOpsClient
from pipewatch.exceptions import (
    PipewatchAPIError,
    PipewatchAuthenticationError,
    PipewatchNotFoundError,
)


def mock_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def client():
    """Client whose requests.Session is a MagicMock."""
    with patch("pipewatch.client.requests.Session"):
        yield AzureDevOpsClient("my-org", "my-project", pat="secret")


class TestConstruction:
    def test_builds_base_url(self):
        c = AzureDevOpsClient("my-org", "my-project", pat="secret")
        assert c.base_url == "https://dev.azure.com/my-org/my-project/_apis"

    def test_basic_auth_header(self):
        c = AzureDevOpsClient("my-org", "my-project", pat="secret")
        expected = base64.b64encode(b":secret").decode()
        assert c.session.headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.parametrize(
        "org,project,pat",
        [("", "p", "t"), ("o", "", "t"), ("o", "p", "")],
    )
    def test_rejects_missing_values(self, org, project, pat):
        with pytest.raises(ValueError):
            AzureDevOpsClient(org, project, pat)

    def test_context_manager_closes_session(self):
        with patch("pipewatch.client.requests.Session") as session_cls:
            with AzureDevOpsClient("o", "p", "t"):
                pass
        session_cls.return_value.close.assert_called_once()


class TestListRuns:
    def test_parses_runs_and_sends_query(self, client):
        client.session.request.return_value = mock_response(
            json_data={
                "count": 2,
                "value": [
                    {"id": 2, "buildNumber": "2", "status": "inProgress", "definition": {"name": "CI"}},
                    {"id": 1, "buildNumber": "1", "status": "completed", "result": "succeeded",
                     "definition": {"name": "CI"}},
                ],
            }
        )

        runs = client.list_runs(25)

        assert [r.id for r in runs] == [2, 1]
        method, url = client.session.request.call_args.args
        params = client.session.request.call_args.kwargs["params"]
        assert method == "GET"
        assert url.endswith("/_apis/build/builds")
        assert params["$top"] == 25
        assert params["queryOrder"] == "queueTimeDescending"
        assert params["api-version"] == "7.1"
        assert client.session.request.call_args.kwargs["timeout"] == 30

    def test_empty_value(self, client):
        client.session.request.return_value = mock_response(json_data={"value": []})
        assert client.list_runs(10) == []

    def test_malformed_payload(self, client):
        client.session.request.return_value = mock_response(json_data=["not", "a", "dict"])
        with pytest.raises(PipewatchAPIError, match="API structure change"):
            client.list_runs(10)

    def test_invalid_json(self, client):
        client.session.request.return_value = mock_response(json_data=ValueError("bad"))
        with pytest.raises(PipewatchAPIError):
            client.list_runs(10)


class TestErrors:
    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_errors(self, client, status):
        client.session.request.return_value = mock_response(status_code=status)
        with pytest.raises(PipewatchAuthenticationError) as exc_info:
            client.list_runs(10)
        assert exc_info.value.status_code == status
        assert exc_info.value.missing_scope is (status == 403)

    def test_not_found(self, client):
        client.session.request.return_value = mock_response(status_code=404)
        with pytest.raises(PipewatchNotFoundError) as exc_info:
            client.get_build_timeline(5)
        assert exc_info.value.status_code == 404
        assert exc_info.value.path == "/build/builds/5/timeline"

    def test_server_error(self, client):
        client.session.request.return_value = mock_response(status_code=503, text="unavailable")
        with pytest.raises(PipewatchAPIError) as exc_info:
            client.list_runs(10)
        assert exc_info.value.status_code == 503

    def test_timeout(self, client):
        client.session.request.side_effect = requests.Timeout()
        with pytest.raises(TimeoutError):
            client.list_runs(10)

    def test_connection_error(self, client):
        client.session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(PipewatchAPIError, match="Failed to reach"):
            client.list_runs(10)


class TestTimelineAndLogs:
    def test_get_build_timeline(self, client):
        client.session.request.return_value = mock_response(
            json_data={
                "records": [
                    {"id": "s1", "type": "Stage", "name": "Build", "order": 1},
                    {"id": "j1", "parentId": "s1", "type": "Job", "name": "Job", "order": 1,
                     "log": {"id": 4}},
                ]
            }
        )
        records = client.get_build_timeline(42)
        assert [r.id for r in records] == ["s1", "j1"]
        assert records[1].log.id == 4
        url = client.session.request.call_args.args[1]
        assert url.endswith("/build/builds/42/timeline")

    def test_timeline_not_ready(self, client):
        client.session.request.return_value = mock_response(json_data=None)
        assert client.get_build_timeline(42) == []

    def test_get_log_content_returns_text(self, client):
        client.session.request.return_value = mock_response(text="line 1\nline 2")
        assert client.get_log_content(42, 7) == "line 1\nline 2"
        url = client.session.request.call_args.args[1]
        assert url.endswith("/build/builds/42/logs/7")
