"""Project identifier resolution."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING
from urllib.parse import unquote

from .client import ApiResult
from .exceptions import GitLabResponseError

if TYPE_CHECKING:
    from .client import GitLabClient

logger = logging.getLogger(__name__)

# Matches:  <host>/<namespace/project>, optionally followed by /-/<anything>
_PROJECT_RE = re.compile(r"https?://[^/]+/(.+?)/?(?:/-/.*)?$")
_NUMERIC_RE = re.compile(r"[0-9]+")


def parse_project_url(value: str) -> str:
    """Extract the namespaced project path from a GitLab project or MR URL.

    If *value* is not a URL, returns it unchanged.
    """
    if not value.startswith(("http://", "https://")):
        return value
    m = _PROJECT_RE.match(value)
    if m:
        return unquote(m.group(1))
    return value


async def resolve_project_id(client: GitLabClient, identifier: str) -> ApiResult:
    """Map a project ID, namespaced path or project URL to the numeric project ID.

    All-digit identifiers are returned as-is without touching the network.
    Anything else costs exactly one ``/projects/:id`` lookup.
    """
    if _NUMERIC_RE.fullmatch(identifier):
        return ApiResult(data=int(identifier))

    path = parse_project_url(identifier)
    if path != identifier:
        logger.debug("Reduced project URL %s to %s", identifier, path)

    result = await client.get_project(path)
    if not result.ok:
        return result
    if result.data.id is None:
        error = GitLabResponseError("Project response has no 'id' field", result.url)
        return ApiResult(error=error, url=result.url)
    return ApiResult(data=result.data.id, url=result.url)
