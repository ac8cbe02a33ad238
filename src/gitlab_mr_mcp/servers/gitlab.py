"""GitLab MCP server — tool registrations."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any, Literal

from fastmcp import Context, FastMCP
from pydantic import Field

from ..client import GitLabClient
from ..config import GitLabConfig
from ..formatters import format_merge_request
from ..resolvers import resolve_project_id

logger = logging.getLogger(__name__)

MergeRequestState = Literal["opened", "closed", "merged", "all"]


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    config = GitLabConfig.from_env()
    if config.insecure_tls:
        logger.warning("TLS certificate verification is disabled (INSECURE_TLS=true)")
    if not config.token:
        logger.warning("GITLAB_TOKEN is not set; every tool call will report it")
    client = GitLabClient(config)
    logger.info("Using GitLab API at %s", config.api_base)
    try:
        yield {"client": client}
    finally:
        await client.close()


mcp = FastMCP(
    name="GitLab MR MCP Server",
    instructions=(
        "Lists merge requests assigned to the authenticated GitLab user and"
        " returns the raw file changes of a merge request for review."
    ),
    lifespan=lifespan,
)


def _get_client(ctx: Context) -> GitLabClient:
    return ctx.request_context.lifespan_context["client"]


def _ok(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _err(message: str, detail: str) -> str:
    return f"{message}\nDetail: {detail}"


def _normalize_iid(mr: str) -> str:
    """Strip a single leading ``!`` from an MR reference such as ``!123``."""
    mr = str(mr).strip()
    return mr[1:] if mr.startswith("!") else mr


# ════════════════════════════════════════════════════════════════════
# Merge Requests
# ════════════════════════════════════════════════════════════════════


@mcp.tool(
    name="get-assigned-merge-requests",
    tags={"gitlab", "merge_requests", "read"},
    annotations={"readOnlyHint": True, "idempotentHint": True, "openWorldHint": True},
)
async def get_assigned_merge_requests(
    ctx: Context,
    state: Annotated[
        MergeRequestState, Field(description="MR state: opened, closed, merged, or all")
    ] = "opened",
) -> str:
    """List merge requests assigned to the current GitLab user across all projects."""
    client = _get_client(ctx)
    logger.info("Listing %s merge requests assigned to the current user", state)

    user_result = await client.get_current_user()
    if not user_result.ok:
        return _err(
            "GitLab authentication failed. Check token, network and TLS settings.",
            user_result.detail,
        )
    user = user_result.data

    mrs_result = await client.list_assigned_merge_requests(user.id, state)
    if not mrs_result.ok:
        return _err("Failed to fetch merge requests.", mrs_result.detail)

    mrs = mrs_result.data
    who = f"{user.name} (@{user.username})"
    if not mrs:
        return f"No {state} merge requests assigned to {who}."

    blocks = "\n".join(format_merge_request(mr) for mr in mrs)
    return f"Merge requests assigned to {who} ({state}):\n\n{blocks}"


@mcp.tool(
    name="get-merge-request-changes",
    tags={"gitlab", "merge_requests", "read"},
    annotations={"readOnlyHint": True, "idempotentHint": True, "openWorldHint": True},
)
async def get_merge_request_changes(
    ctx: Context,
    project: Annotated[
        str,
        Field(
            description=(
                "Project ID or path_with_namespace (e.g. 'group/subgroup/project');"
                " a project or MR web URL is also accepted"
            ),
        ),
    ],
    mr: Annotated[str, Field(description="MR IID, optionally prefixed with '!' (e.g. 123 or !123)")],
) -> str:
    """Get the changed files and raw diffs of a merge request, without any interpretation."""
    client = _get_client(ctx)

    project_result = await resolve_project_id(client, project)
    if not project_result.ok:
        return _err(f"Project not found: {project}.", project_result.detail)
    project_id = project_result.data

    iid = _normalize_iid(mr)
    logger.info("Fetching changes of !%s in project %s", iid, project_id)
    changes_result = await client.get_merge_request_changes(project_id, iid)
    if not changes_result.ok:
        return _err("Failed to fetch merge request changes.", changes_result.detail)

    return _ok(
        {
            "project": project,
            "project_id": project_id,
            "mr": f"!{iid}",
            "changes": [change.to_dict() for change in changes_result.data.changes],
        }
    )
