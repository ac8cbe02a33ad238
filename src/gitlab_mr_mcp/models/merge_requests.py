"""Merge request models."""

from __future__ import annotations

from .base import GitLabModel
from .common import Change, Project, User


class References(GitLabModel):
    short: str = ""
    relative: str = ""
    full: str = ""


class MergeRequest(GitLabModel):
    id: int
    iid: int
    title: str = ""
    description: str | None = None
    state: str = ""
    created_at: str = ""
    updated_at: str = ""
    web_url: str = ""
    source_branch: str = ""
    target_branch: str = ""
    author: User | None = None
    assignee: User | None = None
    assignees: list[User] | None = None
    project: Project | None = None
    project_id: int | None = None
    references: References | None = None


class MergeRequestChanges(GitLabModel):
    """Payload of ``/merge_requests/:iid/changes``; only the change list is kept."""

    iid: int | None = None
    changes: list[Change] | None = None
