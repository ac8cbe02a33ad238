"""Tests for GitLab API client."""

from __future__ import annotations

import httpx
import pytest
import respx

from gitlab_mr_mcp.client import ApiResult, GitLabClient
from gitlab_mr_mcp.config import GitLabConfig
from gitlab_mr_mcp.exceptions import (
    GitLabApiError,
    GitLabConfigError,
    GitLabResponseError,
    GitLabTransportError,
)
from gitlab_mr_mcp.models.common import User

BASE = "https://gitlab.example.com/api/v4"


class TestEncodeId:
    def test_numeric_string(self):
        assert GitLabClient._encode_id("123") == "123"

    def test_integer(self):
        assert GitLabClient._encode_id(123) == "123"

    def test_path(self):
        assert GitLabClient._encode_id("my-group/my-project") == "my-group%2Fmy-project"


class TestApiResult:
    def test_ok(self):
        result = ApiResult(data={"id": 1})
        assert result.ok
        assert result.detail == "unknown cause"

    def test_error(self):
        result = ApiResult(error=GitLabConfigError())
        assert not result.ok
        assert "GITLAB_TOKEN" in result.detail


class TestRequest:
    async def test_sends_token_headers(self, client, mock_api):
        route = mock_api.get("/user").mock(
            return_value=httpx.Response(200, json={"id": 1, "username": "u", "name": "U"})
        )
        result = await client.request("/user")
        assert result.ok
        assert result.data["id"] == 1
        sent = route.calls.last.request
        assert sent.headers["Private-Token"] == "test-token"
        assert sent.headers["Content-Type"] == "application/json"

    async def test_missing_token_skips_network(self):
        gl = GitLabClient(GitLabConfig(api_base=BASE, token=""))
        async with respx.mock(base_url=BASE, assert_all_called=False) as router:
            route = router.get("/user").mock(return_value=httpx.Response(200, json={}))
            result = await gl.request("/user")
            assert not route.called
        await gl.close()
        assert isinstance(result.error, GitLabConfigError)
        assert "GITLAB_TOKEN is not set" in result.detail

    async def test_http_error_captures_status_url_and_snippet(self, client, mock_api):
        mock_api.get("/user").mock(return_value=httpx.Response(401, text="x" * 800))
        result = await client.request("/user")
        assert isinstance(result.error, GitLabApiError)
        assert result.error.status_code == 401
        assert result.error.status_text == "Unauthorized"
        assert result.error.url == f"{BASE}/user"
        assert result.error.body == "x" * 500
        assert "HTTP 401 Unauthorized" in result.detail

    async def test_server_error(self, client, mock_api):
        mock_api.get("/user").mock(return_value=httpx.Response(500, text="Internal Server Error"))
        result = await client.request("/user")
        assert isinstance(result.error, GitLabApiError)
        assert result.error.status_code == 500

    async def test_transport_error(self, client, mock_api):
        mock_api.get("/user").mock(side_effect=httpx.ConnectError("connection refused"))
        result = await client.request("/user")
        assert isinstance(result.error, GitLabTransportError)
        assert result.error.code == "ConnectError"
        assert result.detail == f"Fetch failed [ConnectError]: connection refused | URL: {BASE}/user"

    async def test_timeout_is_transport_error(self, client, mock_api):
        mock_api.get("/user").mock(side_effect=httpx.ReadTimeout("timed out"))
        result = await client.request("/user")
        assert isinstance(result.error, GitLabTransportError)
        assert result.error.code == "ReadTimeout"

    async def test_malformed_json_is_handled(self, client, mock_api):
        mock_api.get("/user").mock(
            return_value=httpx.Response(
                200, text="{not json", headers={"content-type": "application/json"}
            )
        )
        result = await client.request("/user")
        assert isinstance(result.error, GitLabResponseError)
        assert "JSON parse error" in result.detail

    async def test_non_utf8_body_is_handled(self, client, mock_api):
        mock_api.get("/user").mock(
            return_value=httpx.Response(
                200, content=b'{"x": "\xff"}', headers={"content-type": "application/json"}
            )
        )
        result = await client.request("/user")
        assert isinstance(result.error, GitLabResponseError)
        assert "JSON parse error" in result.detail

    async def test_decoding_error_is_transport_error(self, client, mock_api):
        mock_api.get("/user").mock(side_effect=httpx.DecodingError("bad gzip stream"))
        result = await client.request("/user")
        assert isinstance(result.error, GitLabTransportError)
        assert result.error.code == "DecodingError"

    async def test_html_response_error(self, client, mock_api):
        mock_api.get("/user").mock(
            return_value=httpx.Response(
                200,
                text="<html><body>Login</body></html>",
                headers={"content-type": "text/html"},
            )
        )
        result = await client.request("/user")
        assert isinstance(result.error, GitLabResponseError)
        assert "HTML" in result.detail

    async def test_each_call_carries_its_own_error(self, client, mock_api):
        mock_api.get("/user").mock(return_value=httpx.Response(503, text="down"))
        mock_api.get("/projects/1").mock(return_value=httpx.Response(200, json={"id": 1}))
        failed = await client.request("/user")
        succeeded = await client.request("/projects/1")
        assert not failed.ok
        assert succeeded.ok
        assert "503" in failed.detail


class TestTypedCalls:
    async def test_get_current_user(self, client, mock_api, sample_user):
        mock_api.get("/user").mock(return_value=httpx.Response(200, json=sample_user))
        result = await client.get_current_user()
        assert isinstance(result.data, User)
        assert result.data.username == "jdoe"

    async def test_unexpected_shape(self, client, mock_api):
        mock_api.get("/user").mock(return_value=httpx.Response(200, json=["not", "a", "user"]))
        result = await client.get_current_user()
        assert isinstance(result.error, GitLabResponseError)
        assert "Unexpected response shape" in result.detail

    async def test_list_assigned_merge_requests_query(self, client, mock_api, sample_merge_request):
        route = mock_api.get(
            "/merge_requests", params={"assignee_id": "7", "state": "merged", "scope": "all"}
        ).mock(return_value=httpx.Response(200, json=[sample_merge_request]))
        result = await client.list_assigned_merge_requests(7, "merged")
        assert route.called
        assert [mr.iid for mr in result.data] == [42]

    async def test_project_path_encoding(self, client, mock_api):
        route = mock_api.get("/projects/my-group%2Fmy-project").mock(
            return_value=httpx.Response(200, json={"id": 1})
        )
        result = await client.get_project("my-group/my-project")
        assert route.called
        assert result.data.id == 1

    async def test_changes_missing_field(self, client, mock_api):
        mock_api.get("/projects/5/merge_requests/9/changes").mock(
            return_value=httpx.Response(200, json={"iid": 9})
        )
        result = await client.get_merge_request_changes(5, "9")
        assert isinstance(result.error, GitLabResponseError)
        assert "changes" in result.detail

    @pytest.mark.parametrize("flags", [{}, {"new_file": None, "deleted_file": None}])
    async def test_change_flags_always_boolean(self, client, mock_api, flags):
        change = {"old_path": "a.py", "new_path": "a.py", "diff": "@@ -1 +1 @@", **flags}
        mock_api.get("/projects/5/merge_requests/9/changes").mock(
            return_value=httpx.Response(200, json={"changes": [change]})
        )
        result = await client.get_merge_request_changes(5, 9)
        parsed = result.data.changes[0]
        assert parsed.new_file is False
        assert parsed.renamed_file is False
        assert parsed.deleted_file is False
