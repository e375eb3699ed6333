"""Async GitHub API client — page-at-a-time listings and rate-limit detection."""

from __future__ import annotations

import re
import time
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ghstats import __version__
from ghstats.core.config import Settings
from ghstats.errors import GitHubAPIError, RateLimitError
from ghstats.schemas import CommitMeta, EventMeta, Page, RepositoryDetail, RepositoryMeta

log = structlog.get_logger("ghstats.github")

_NEXT_LINK_RE = re.compile(r'<([^>]+)>;\s*rel="next"')


class GitHubClient:
    """Thin async wrapper around the GitHub REST API.

    Every request is a single attempt bounded by the configured timeout;
    failures surface as :class:`GitHubAPIError` and are never retried here.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or Settings()
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"ghstats/{__version__}",
        }
        if self.settings.token:
            headers["Authorization"] = f"token {self.settings.token}"
        else:
            log.info("github.unauthenticated")
        self._client = httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers=headers,
            timeout=self.settings.timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── endpoints ──────────────────────────────────────────────────────────

    async def list_repositories(self, username: str, page: int) -> Page[RepositoryMeta]:
        """GET /users/{username}/repos — one page."""
        return await self._get_page(f"/users/{username}/repos", page, RepositoryMeta)

    async def get_repository(self, owner: str, name: str) -> RepositoryDetail:
        """GET /repos/{owner}/{repo}."""
        data = await self.get(f"/repos/{owner}/{name}")
        return self._validate(RepositoryDetail, data, f"/repos/{owner}/{name}")

    async def list_commits(self, owner: str, name: str, page: int) -> Page[CommitMeta]:
        """GET /repos/{owner}/{repo}/commits — one page, newest first."""
        return await self._get_page(f"/repos/{owner}/{name}/commits", page, CommitMeta)

    async def list_public_events(self, username: str, page: int) -> Page[EventMeta]:
        """GET /users/{username}/events/public — one page, newest first."""
        return await self._get_page(f"/users/{username}/events/public", page, EventMeta)

    # ── generic ────────────────────────────────────────────────────────────

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Single-resource GET, returns parsed JSON."""
        response = await self._request(path, params)
        return self._json(response, path)

    async def get_page_raw(
        self,
        path: str,
        page: int,
        params: dict[str, Any] | None = None,
    ) -> tuple[list[Any], bool]:
        """Fetch page *page* of a listing.

        Returns ``(items, has_more)`` where *has_more* reflects a
        ``Link: <...>; rel="next"`` header on the response.
        """
        query = dict(params or {})
        query["page"] = page
        query.setdefault("per_page", self.settings.page_size)
        response = await self._request(path, query)
        data = self._json(response, path)
        items = data if isinstance(data, list) else [data]
        has_more = self._parse_next_link(response.headers.get("Link", "")) is not None
        log.debug("github.page", path=path, page=page, items=len(items), has_more=has_more)
        return items, has_more

    # ── internal ───────────────────────────────────────────────────────────

    async def _get_page(self, path: str, page: int, model: type[BaseModel]) -> Page:
        items, has_more = await self.get_page_raw(path, page)
        parsed = [self._validate(model, item, path) for item in items]
        return Page(items=parsed, has_more=has_more)

    @staticmethod
    def _json(response: httpx.Response, path: str) -> Any:
        """Decode a 2xx body; a non-JSON body is an API error like any other."""
        try:
            return response.json()
        except ValueError as exc:
            log.warning("github.invalid_json", url=path, status=response.status_code)
            raise GitHubAPIError(
                f"invalid JSON from {path}",
                status=response.status_code,
                body=response.text,
                url=path,
            ) from exc

    @staticmethod
    def _validate(model: type[BaseModel], data: Any, path: str) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise GitHubAPIError(f"unexpected response shape from {path}: {exc}", url=path) from exc

    async def _request(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """One GET; translate transport and HTTP failures into GitHubAPIError."""
        try:
            resp = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            log.warning("github.timeout", url=path)
            raise GitHubAPIError(f"request to {path} timed out", url=path) from exc
        except httpx.HTTPError as exc:
            log.warning("github.request_failed", url=path, error=str(exc))
            raise GitHubAPIError(f"request to {path} failed: {exc}", url=path) from exc

        if resp.status_code in (403, 429) and self._is_rate_limited(resp):
            wait = self._get_rate_limit_wait(resp)
            log.warning("github.rate_limit", url=path, wait_seconds=wait)
            raise RateLimitError(wait, status=resp.status_code, url=path, body=resp.text)

        if resp.status_code >= 400:
            log.warning("github.http_error", url=path, status=resp.status_code)
            raise GitHubAPIError(
                f"GET {path} returned {resp.status_code}",
                status=resp.status_code,
                body=resp.text,
                url=path,
            )
        return resp

    @staticmethod
    def _is_rate_limited(response: httpx.Response) -> bool:
        """Check if a 403/429 response is due to rate limiting."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None:
            try:
                return int(remaining) == 0
            except (ValueError, TypeError):
                pass
        # GitHub also uses Retry-After header for abuse rate limits
        return "Retry-After" in response.headers

    @staticmethod
    def _get_rate_limit_wait(response: httpx.Response) -> int:
        """Calculate how long to wait based on rate-limit headers."""
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return max(int(retry_after), 1)
            except (ValueError, TypeError):
                pass
        reset_ts = response.headers.get("X-RateLimit-Reset")
        if reset_ts is not None:
            try:
                return max(int(reset_ts) - int(time.time()), 1)
            except (ValueError, TypeError):
                pass
        return 60

    @staticmethod
    def _parse_next_link(link_header: str) -> str | None:
        """Extract the ``next`` URL from a GitHub ``Link`` header."""
        match = _NEXT_LINK_RE.search(link_header)
        return match.group(1) if match else None
