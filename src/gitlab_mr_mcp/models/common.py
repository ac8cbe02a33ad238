"""Models shared by merge requests and projects."""

from __future__ import annotations

from pydantic import field_validator

from .base import GitLabModel


class User(GitLabModel):
    id: int
    username: str = ""
    name: str = ""


class Project(GitLabModel):
    id: int | None = None
    name: str = ""
    path_with_namespace: str = ""
    web_url: str = ""


class Change(GitLabModel):
    """One changed file of a merge request, reduced to what callers consume."""

    old_path: str = ""
    new_path: str = ""
    new_file: bool = False
    renamed_file: bool = False
    deleted_file: bool = False
    diff: str = ""

    @field_validator("new_file", "renamed_file", "deleted_file", mode="before")
    @classmethod
    def _coerce_flag(cls, value: object) -> bool:
        return bool(value)

    @field_validator("diff", mode="before")
    @classmethod
    def _coerce_diff(cls, value: object) -> str:
        return "" if value is None else str(value)
