"""Plain-text rendering of merge requests for the calling agent."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlparse

from .models.merge_requests import MergeRequest

NO_ASSIGNEES = "None"
UNKNOWN_PROJECT = "Unknown"
SEPARATOR = "---"

_MR_MARKER = "/-/merge_requests"


def extract_project_path_from_url(web_url: str | None) -> str | None:
    """Recover ``namespace/project`` from a merge request web URL.

    ``https://host/group/sub/project/-/merge_requests/42`` gives
    ``group/sub/project``. Without the marker the first two path segments are
    used; fewer than two segments yields None.
    """
    if not web_url:
        return None
    try:
        path = urlparse(web_url).path
    except ValueError:
        return None
    idx = path.find(_MR_MARKER)
    if idx > 1:
        return path[1:idx]
    parts = [p for p in path.split("/") if p]
    if len(parts) >= 2:
        return f"{parts[0]}/{parts[1]}"
    return None


def project_path(mr: MergeRequest) -> str:
    if mr.project and mr.project.path_with_namespace:
        return mr.project.path_with_namespace
    if mr.references and mr.references.full:
        ref_path = mr.references.full.split("!")[0]
        if ref_path:
            return ref_path
    from_url = extract_project_path_from_url(mr.web_url)
    if from_url:
        return from_url
    if mr.project_id is not None:
        return f"project_id:{mr.project_id}"
    return UNKNOWN_PROJECT


def format_timestamp(value: str) -> str:
    """Render an ISO-8601 timestamp in the server's local timezone; pass anything else through."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_merge_request(mr: MergeRequest) -> str:
    assignees = ", ".join(a.name for a in mr.assignees or [] if a.name) or NO_ASSIGNEES
    if mr.author:
        author = f"{mr.author.name} (@{mr.author.username})"
    else:
        author = "Unknown (@unknown)"
    return "\n".join(
        [
            f"Title: {mr.title}",
            f"Project: {project_path(mr)}",
            f"State: {mr.state}",
            f"Author: {author}",
            f"Assignees: {assignees}",
            f"Branch: {mr.source_branch} → {mr.target_branch}",
            f"Created: {format_timestamp(mr.created_at)}",
            f"Updated: {format_timestamp(mr.updated_at)}",
            f"URL: {mr.web_url}",
            SEPARATOR,
        ]
    )
