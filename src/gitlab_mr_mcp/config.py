"""GitLab MCP server configuration."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

DEFAULT_API_BASE = "https://gitlab.com/api/v4"
API_SUFFIX = "/api/v4"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def _with_scheme(url: str) -> str:
    return url if _SCHEME_RE.match(url) else f"https://{url}"


def resolve_api_base(api_base: str = "", url: str = "") -> str:
    """Pick the effective API root.

    An explicit API base wins verbatim; otherwise a host is promoted to a full
    URL with the v4 suffix; otherwise the public default is used.
    """
    if api_base:
        return api_base.rstrip("/")
    if url:
        return f"{_with_scheme(url).rstrip('/')}{API_SUFFIX}"
    return DEFAULT_API_BASE


@dataclass(frozen=True)
class GitLabConfig:
    """Configuration for the GitLab MCP server, loaded from environment variables."""

    api_base: str = DEFAULT_API_BASE
    token: str = ""
    insecure_tls: bool = False
    timeout: int = 30

    @classmethod
    def from_env(cls) -> GitLabConfig:
        api_base = resolve_api_base(
            os.getenv("GITLAB_API_BASE", ""),
            os.getenv("GITLAB_URL", ""),
        )
        token = os.getenv("GITLAB_TOKEN", "")
        insecure_tls = os.getenv("INSECURE_TLS", "").lower() == "true"
        timeout = int(os.getenv("GITLAB_TIMEOUT", "30"))

        return cls(
            api_base=api_base,
            token=token,
            insecure_tls=insecure_tls,
            timeout=timeout,
        )

    @property
    def ssl_verify(self) -> bool:
        return not self.insecure_tls
