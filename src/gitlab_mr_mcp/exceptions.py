"""GitLab API exceptions.

These describe why a single API call failed. The client never raises them to
tool handlers; they travel inside an ``ApiResult``.
"""

from __future__ import annotations


class GitLabError(Exception):
    """Base exception for GitLab operations."""


class GitLabConfigError(GitLabError):
    """Raised when the server is missing configuration needed to call GitLab."""

    def __init__(self, message: str = "GITLAB_TOKEN is not set") -> None:
        super().__init__(message)


class GitLabTransportError(GitLabError):
    """Raised when the request never produced an HTTP response (DNS, TLS, refused, timeout)."""

    def __init__(self, url: str, message: str, code: str = "") -> None:
        self.url = url
        self.message = message
        self.code = code
        tag = f" [{code}]" if code else ""
        super().__init__(f"Fetch failed{tag}: {message} | URL: {url}")


class GitLabApiError(GitLabError):
    """Raised when the GitLab API returns a non-success response."""

    def __init__(self, status_code: int, status_text: str, url: str, body: str = "") -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.url = url
        self.body = body
        super().__init__(f"HTTP {status_code} {status_text} | URL: {url} | Body: {body}")


class GitLabResponseError(GitLabError):
    """Raised when a successful response cannot be used (bad JSON, HTML, missing field)."""

    def __init__(self, message: str, url: str, body: str = "") -> None:
        self.message = message
        self.url = url
        self.body = body
        detail = f"{message} | URL: {url}"
        if body:
            detail += f" | Body: {body}"
        super().__init__(detail)
