"""Custom exceptions for ghstats."""

from __future__ import annotations


class GhStatsError(Exception):
    """Base exception for all ghstats errors."""


class GitHubAPIError(GhStatsError):
    """Raised when a GitHub API request fails (transport error or non-2xx)."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body: str | None = None,
        url: str | None = None,
    ) -> None:
        self.status = status
        self.body = body
        self.url = url
        super().__init__(message)


class RateLimitError(GitHubAPIError):
    """Raised when GitHub rate limit is exhausted."""

    def __init__(
        self,
        retry_after: int,
        *,
        status: int = 403,
        url: str | None = None,
        body: str | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(
            f"rate limit exceeded, retry after {retry_after}s",
            status=status,
            body=body,
            url=url,
        )
