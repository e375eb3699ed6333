"""Record collector — pure API collection of commits and public events."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from functools import partial

import structlog

from ghstats.bucketing import bucket_key, to_utc
from ghstats.errors import GitHubAPIError
from ghstats.github_client import GitHubClient
from ghstats.models import (
    CollectResult,
    CommitPayload,
    EventPayload,
    RawRecord,
    RepositoryRef,
)
from ghstats.pagination import walk
from ghstats.schemas import CommitMeta, EventMeta

log = structlog.get_logger("ghstats.collector")

# Public event types that count towards the report.
EVENT_TYPES: tuple[str, ...] = (
    "CreateEvent",
    "GistEvent",
    "IssueCommentEvent",
    "PullRequestEvent",
    "PushEvent",
)


# ── commits ───────────────────────────────────────────────────────────────


async def collect_commits(
    client: GitHubClient,
    repository: RepositoryRef,
    username: str,
    *,
    year: int,
    dimension: str,
) -> CollectResult:
    """GET /repos/{owner}/{repo}/commits — commits by *username* since *year*.

    Pagination stops at the first commit older than January 1st of *year*.
    Only commits whose GitHub committer login is exactly *username* are
    kept.  A failed page ends this repository's pagination; the records
    collected so far are returned with the error recorded.
    """
    result = CollectResult()

    def _too_old(item: CommitMeta) -> bool:
        return to_utc(item.date).year < year

    try:
        async for item in walk(
            partial(client.list_commits, repository.owner, repository.name),
            stop=_too_old,
            max_pages=client.settings.max_pages,
        ):
            if item.login != username:
                continue
            result.records.append(commit_record(item, repository, dimension))
    except GitHubAPIError as exc:
        log.error(
            "collector.repository_failed",
            repository=repository.full_name,
            error=str(exc),
            kept=len(result.records),
        )
        result.errors[repository.full_name] = str(exc)
    return result


def commit_record(item: CommitMeta, repository: RepositoryRef, dimension: str) -> RawRecord:
    date = to_utc(item.date)
    return RawRecord(
        bucket_key=bucket_key(date, dimension, repository),
        timestamp=date,
        payload=CommitPayload(
            message=item.message,
            committer_login=item.login,
            committer_date=date,
        ),
        repository=repository,
    )


async def collect_all_commits(
    client: GitHubClient,
    repositories: Iterable[RepositoryRef],
    username: str,
    *,
    year: int,
    dimension: str,
    on_progress: Callable[[RepositoryRef], None] | None = None,
) -> CollectResult:
    """Collect commits for every repository concurrently and merge the results.

    One task per repository, at most ``settings.concurrency`` in flight.
    The merged record order across repositories is not deterministic.
    """
    sem = asyncio.Semaphore(client.settings.concurrency)

    async def _run_one(repo: RepositoryRef) -> CollectResult:
        async with sem:
            if on_progress is not None:
                on_progress(repo)
            return await collect_commits(client, repo, username, year=year, dimension=dimension)

    results = await asyncio.gather(*(_run_one(repo) for repo in repositories))

    merged = CollectResult()
    for r in results:
        merged.extend(r)
    log.info(
        "collector.commits_done",
        username=username,
        records=len(merged.records),
        failed=len(merged.errors),
    )
    return merged


# ── events ────────────────────────────────────────────────────────────────


async def collect_events(
    client: GitHubClient,
    username: str,
    *,
    dimension: str,
) -> CollectResult:
    """GET /users/{username}/events/public — events of the tracked types.

    No year cutoff: GitHub only serves roughly the last 90 days.  Any
    failed page aborts the whole collection.
    """
    result = CollectResult()
    async for item in walk(
        partial(client.list_public_events, username),
        max_pages=client.settings.max_pages,
    ):
        if item.type not in EVENT_TYPES:
            continue
        result.records.append(event_record(item, dimension))
    log.info("collector.events_done", username=username, records=len(result.records))
    return result


def event_record(item: EventMeta, dimension: str) -> RawRecord:
    date = to_utc(item.created_at)
    return RawRecord(
        bucket_key=bucket_key(date, dimension),
        timestamp=date,
        payload=derive_event_counters(item),
    )


def derive_event_counters(item: EventMeta) -> EventPayload:
    """Per-event tallies: pushed commits, created issue comments, creates, opened PRs."""
    payload = item.payload
    return EventPayload(
        type=item.type,
        repo_name=item.repo.name,
        commits=len(payload.commits) if payload.commits else 0,
        issue_comments=1 if payload.issue is not None and payload.action == "created" else 0,
        creates=1 if item.type == "CreateEvent" else 0,
        pull_requests=1 if item.type == "PullRequestEvent" and payload.action == "opened" else 0,
    )
