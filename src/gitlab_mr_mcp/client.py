"""GitLab API client using httpx."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from .config import GitLabConfig
from .exceptions import (
    GitLabApiError,
    GitLabConfigError,
    GitLabError,
    GitLabResponseError,
    GitLabTransportError,
)
from .models.common import Project, User
from .models.merge_requests import MergeRequest, MergeRequestChanges

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 500


@dataclass(frozen=True)
class ApiResult:
    """Outcome of one API call: ``data`` on success, ``error`` on failure."""

    data: Any = None
    error: GitLabError | None = None
    url: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def detail(self) -> str:
        return str(self.error) if self.error is not None else "unknown cause"


class GitLabClient:
    """Async HTTP client for the read-only slice of the GitLab REST API v4 this server uses."""

    def __init__(self, config: GitLabConfig | None = None) -> None:
        self.config = config or GitLabConfig.from_env()
        self._client = httpx.AsyncClient(
            base_url=self.config.api_base,
            headers={
                "Private-Token": self.config.token,
                "Content-Type": "application/json",
            },
            timeout=self.config.timeout,
            verify=self.config.ssl_verify,
        )

    async def close(self) -> None:
        await self._client.aclose()

    # ── HTTP helpers ──────────────────────────────────────────────

    @staticmethod
    def _encode_id(project_id: str | int) -> str:
        """Encode a project ID. Numeric IDs pass through; paths are URL-encoded."""
        if isinstance(project_id, int):
            return str(project_id)
        if project_id.isascii() and project_id.isdigit():
            return project_id
        return quote(project_id, safe="")

    async def _get(self, request: httpx.Request) -> Any:
        """Send a prepared GET and return parsed JSON, raising a GitLabError on any failure."""
        url = str(request.url)
        if not self.config.token:
            raise GitLabConfigError

        logger.debug("GET %s", url)
        try:
            resp = await self._client.send(request)
        except httpx.RequestError as e:
            raise GitLabTransportError(url, str(e) or repr(e), type(e).__name__) from e

        if not resp.is_success:
            raise GitLabApiError(
                resp.status_code,
                resp.reason_phrase or "",
                url,
                resp.text[:SNIPPET_LENGTH],
            )

        content_type = resp.headers.get("content-type", "")
        if "text/html" in content_type:
            msg = "Unexpected HTML response — check URL and authentication"
            raise GitLabResponseError(msg, url, resp.text[:SNIPPET_LENGTH])

        try:
            return resp.json()
        except ValueError as e:  # also UnicodeDecodeError on non-UTF-8 bodies
            raise GitLabResponseError(
                f"JSON parse error: {e}",
                url,
                resp.text[:SNIPPET_LENGTH],
            ) from e

    async def request(self, endpoint: str, params: dict[str, Any] | None = None) -> ApiResult:
        """Issue one authenticated GET against ``endpoint``.

        Never raises for GitLab-side problems: a missing token, transport
        failure, error status or unusable body comes back as ``ApiResult.error``.
        """
        req = self._client.build_request("GET", endpoint, params=params)
        url = str(req.url)
        try:
            data = await self._get(req)
        except GitLabError as e:
            logger.warning("GitLab request failed: %s", e)
            return ApiResult(error=e, url=url)
        return ApiResult(data=data, url=url)

    async def _fetch(
        self, endpoint: str, schema: Any, params: dict[str, Any] | None = None
    ) -> ApiResult:
        """Like ``request`` but validates the body into ``schema``."""
        result = await self.request(endpoint, params)
        if not result.ok:
            return result
        try:
            data = TypeAdapter(schema).validate_python(result.data)
        except ValidationError as e:
            error = GitLabResponseError(
                f"Unexpected response shape ({e.error_count()} validation errors)",
                result.url,
            )
            logger.warning("GitLab request failed: %s", error)
            return ApiResult(error=error, url=result.url)
        return ApiResult(data=data, url=result.url)

    # ── Users ─────────────────────────────────────────────────────

    async def get_current_user(self) -> ApiResult:
        return await self._fetch("/user", User)

    # ── Projects ──────────────────────────────────────────────────

    async def get_project(self, project_id: str | int) -> ApiResult:
        enc = self._encode_id(project_id)
        return await self._fetch(f"/projects/{enc}", Project)

    # ── Merge Requests ────────────────────────────────────────────

    async def list_assigned_merge_requests(self, assignee_id: int, state: str) -> ApiResult:
        params = {"assignee_id": assignee_id, "state": state, "scope": "all"}
        return await self._fetch("/merge_requests", list[MergeRequest], params)

    async def get_merge_request_changes(self, project_id: str | int, mr_iid: str | int) -> ApiResult:
        enc = self._encode_id(project_id)
        iid = quote(str(mr_iid), safe="")
        result = await self._fetch(
            f"/projects/{enc}/merge_requests/{iid}/changes", MergeRequestChanges
        )
        if result.ok and result.data.changes is None:
            error = GitLabResponseError("Response has no 'changes' field", result.url)
            logger.warning("GitLab request failed: %s", error)
            return ApiResult(error=error, url=result.url)
        return result
