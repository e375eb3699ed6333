"""Repository discovery — list a user's repositories and resolve forks."""

from __future__ import annotations

import asyncio
from functools import partial

import structlog

from ghstats.errors import GitHubAPIError
from ghstats.github_client import GitHubClient
from ghstats.models import DiscoveryResult, RepositoryRef
from ghstats.pagination import collect_all
from ghstats.schemas import RepositoryMeta

log = structlog.get_logger("ghstats.discovery")


def to_ref(meta: RepositoryMeta) -> RepositoryRef:
    return RepositoryRef(
        name=meta.name,
        full_name=meta.full_name,
        owner=meta.owner.login,
        is_fork=meta.fork,
    )


async def discover(client: GitHubClient, username: str) -> DiscoveryResult:
    """Return every repository to scan for *username*.

    Each fork is expanded to ``[parent, fork]`` so commits on either side
    are seen.  A failed parent lookup keeps the fork alone and is recorded
    in ``errors``.  Failure to list the repositories at all propagates.
    """
    listing = await collect_all(
        partial(client.list_repositories, username),
        max_pages=client.settings.max_pages,
    )
    base = [to_ref(meta) for meta in listing]
    log.info("discovery.listed", username=username, repositories=len(base))

    result = DiscoveryResult()
    sem = asyncio.Semaphore(client.settings.concurrency)
    expansions = await asyncio.gather(
        *(_expand(client, repo, sem, result.errors) for repo in base),
    )

    seen: set[str] = set()
    for expansion in expansions:
        for repo in expansion:
            if repo.key in seen:
                continue
            seen.add(repo.key)
            result.repositories.append(repo)
    return result


async def _expand(
    client: GitHubClient,
    repo: RepositoryRef,
    sem: asyncio.Semaphore,
    errors: dict[str, str],
) -> list[RepositoryRef]:
    if not repo.is_fork:
        return [repo]
    try:
        async with sem:
            parent = await resolve_parent(client, repo)
    except GitHubAPIError as exc:
        log.error("discovery.fork_failed", repository=repo.full_name, error=str(exc))
        errors[repo.full_name] = str(exc)
        return [repo]
    if parent is None:
        return [repo]
    return [parent, repo]


async def resolve_parent(client: GitHubClient, repo: RepositoryRef) -> RepositoryRef | None:
    """Fetch *repo*'s upstream parent; None if GitHub reports no parent."""
    detail = await client.get_repository(repo.owner, repo.name)
    if detail.parent is None:
        log.warning("discovery.fork_without_parent", repository=repo.full_name)
        return None
    return to_ref(detail.parent)
