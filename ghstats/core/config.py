"""Runtime settings read from the environment."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass

import structlog

log = structlog.get_logger("ghstats.config")

DEFAULT_API_URL = "https://api.github.com"


def _env_int(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        log.warning("config.invalid_int", key=key, value=value, default=default)
        return default


def _env_float(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        log.warning("config.invalid_float", key=key, value=value, default=default)
        return default


def get_github_token(explicit: str | None = None) -> str | None:
    """Resolve a GitHub token: CLI flag, then env, then ``gh auth token``.

    Returns None when nothing is found; callers run unauthenticated.
    """
    if explicit:
        return explicit
    token = os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
    if token:
        return token
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return None


@dataclass(frozen=True)
class Settings:
    """Knobs for the GitHub client and the collection fan-out."""

    token: str | None = None
    api_url: str = DEFAULT_API_URL
    page_size: int = 100
    timeout: float = 10.0
    concurrency: int = 10
    max_pages: int | None = None  # None = follow every next link

    @classmethod
    def from_env(cls, token: str | None = None) -> Settings:
        """Build settings from ``GHSTATS_*`` variables and the resolved token."""
        max_pages = _env_int("GHSTATS_MAX_PAGES", 0)
        return cls(
            token=get_github_token(token),
            api_url=os.environ.get("GHSTATS_API_URL", DEFAULT_API_URL).rstrip("/"),
            page_size=max(1, min(_env_int("GHSTATS_PAGE_SIZE", 100), 100)),
            timeout=_env_float("GHSTATS_TIMEOUT", 10.0),
            concurrency=max(1, _env_int("GHSTATS_CONCURRENCY", 10)),
            max_pages=max_pages if max_pages > 0 else None,
        )
