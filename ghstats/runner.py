"""Runner — wires discovery, collection and aggregation into one report."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from ghstats.aggregator import aggregate
from ghstats.bucketing import normalize_dimension
from ghstats.collector import collect_all_commits, collect_events
from ghstats.discovery import discover
from ghstats.github_client import GitHubClient
from ghstats.models import RepositoryRef, Report

log = structlog.get_logger("ghstats.runner")


async def run_commits(
    client: GitHubClient,
    username: str,
    *,
    year: int,
    dimension: str | None = None,
    on_discovered: Callable[[list[RepositoryRef]], None] | None = None,
    on_progress: Callable[[RepositoryRef], None] | None = None,
) -> Report:
    """Commit statistics for *username* since the start of *year*.

    1. Discover repositories (forks expand to parent + fork)
    2. Collect commits per repository in parallel
    3. Aggregate into rows sorted by bucket key

    Per-repository and per-fork failures land in ``Report.errors``; a
    failure to list the user's repositories propagates.
    """
    dim = normalize_dimension(dimension)
    discovered = await discover(client, username)
    if on_discovered is not None:
        on_discovered(discovered.repositories)

    collected = await collect_all_commits(
        client,
        discovered.repositories,
        username,
        year=year,
        dimension=dim,
        on_progress=on_progress,
    )
    rows, totals = aggregate(collected.records, "commits")

    report = Report(
        mode="commits",
        dimension=dim,
        rows=rows,
        totals=totals,
        repositories_scanned=len(discovered.repositories),
    )
    report.add_errors(discovered.errors)
    report.add_errors(collected.errors)
    log.info(
        "runner.commits_report",
        username=username,
        rows=len(rows),
        records=totals.records,
        errors=len(report.errors),
    )
    return report


async def run_events(
    client: GitHubClient,
    username: str,
    *,
    dimension: str | None = None,
) -> Report:
    """Public-event statistics for *username*; any API failure propagates."""
    dim = normalize_dimension(dimension)
    if dim == "repository":
        raise ValueError("the repository dimension is only available for commits")
    collected = await collect_events(client, username, dimension=dim)
    rows, totals = aggregate(collected.records, "events")
    log.info("runner.events_report", username=username, rows=len(rows), records=totals.records)
    return Report(mode="events", dimension=dim, rows=rows, totals=totals)
