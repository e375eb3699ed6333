"""Shared fixtures for ghstats tests — no network access required."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ghstats.core.config import Settings
from ghstats.github_client import GitHubClient


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(token=None, page_size=100, timeout=5.0, concurrency=4)


@pytest.fixture
def mock_client(settings):
    """An AsyncMock GitHubClient; tests set ``side_effect`` per endpoint."""
    client = AsyncMock(spec=GitHubClient)
    client.settings = settings
    return client
