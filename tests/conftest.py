"""Shared test fixtures for gitlab-mr-mcp."""

from __future__ import annotations

import pytest
import respx

from gitlab_mr_mcp.client import GitLabClient
from gitlab_mr_mcp.config import GitLabConfig

TEST_API = "https://gitlab.example.com/api/v4"
TEST_TOKEN = "test-token"


@pytest.fixture
def config() -> GitLabConfig:
    return GitLabConfig(api_base=TEST_API, token=TEST_TOKEN)


@pytest.fixture
async def client(config: GitLabConfig):
    gl = GitLabClient(config)
    yield gl
    await gl.close()


@pytest.fixture
def mock_api() -> respx.MockRouter:
    with respx.mock(base_url=TEST_API) as router:
        yield router


@pytest.fixture
def sample_user() -> dict:
    return {"id": 7, "username": "jdoe", "name": "Jane Doe"}


@pytest.fixture
def sample_merge_request() -> dict:
    return {
        "id": 456,
        "iid": 42,
        "title": "Add retry to webhook sender",
        "description": "Retries failed deliveries",
        "state": "opened",
        "created_at": "2024-03-05T12:00:00.000Z",
        "updated_at": "2024-03-06T12:00:00.000Z",
        "web_url": "https://gitlab.example.com/group/sub/project/-/merge_requests/42",
        "source_branch": "feat/retry",
        "target_branch": "main",
        "author": {"id": 3, "username": "asmith", "name": "Alex Smith"},
        "assignee": {"id": 7, "username": "jdoe", "name": "Jane Doe"},
        "assignees": [{"id": 7, "username": "jdoe", "name": "Jane Doe"}],
        "project_id": 99,
        "references": {"short": "!42", "relative": "!42", "full": "group/sub/project!42"},
    }
