"""CLI entry point: ghstats.

Subcommands:
    ghstats commits <username> [-y 2023] [-d month]   # commit statistics since a year
    ghstats events <username> [-d week]               # public event statistics (~90 days)
"""

from __future__ import annotations

import asyncio
import re
import sys
from datetime import datetime, timezone
from typing import NoReturn

import click

from ghstats import __version__
from ghstats.core.config import Settings
from ghstats.core.logging import setup_logging
from ghstats.errors import GhStatsError
from ghstats.github_client import GitHubClient
from ghstats.models import DIMENSIONS, EVENT_DIMENSIONS, RepositoryRef, Report
from ghstats.render import format_error, render_report
from ghstats.runner import run_commits, run_events

_YEAR_RE = re.compile(r"^\d{4}$")


def _current_year() -> str:
    return str(datetime.now(timezone.utc).year)


def _validate_year(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not _YEAR_RE.match(value):
        raise click.BadParameter("expected a four-digit year, e.g. 2023")
    return value


def _require_username(ctx: click.Context, username: str | None) -> str:
    """Exit 1 with the command help when no username was given."""
    if not username:
        click.secho("Please enter GitHub username", fg="red")
        click.echo(ctx.get_help())
        ctx.exit(1)
    return username


def _fail(error: BaseException) -> NoReturn:
    click.secho(format_error(error), fg="red", err=True)
    sys.exit(1)


def _print_errors(report: Report) -> None:
    for name, messages in sorted(report.errors.items()):
        click.echo(name)
        for message in messages:
            click.secho(message, fg="red")


@click.group()
@click.version_option(__version__, prog_name="ghstats")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """ghstats: GitHub user activity statistics."""
    setup_logging(verbose=verbose)


@main.command("commits")
@click.argument("username", required=False)
@click.option(
    "-y",
    "--year",
    default=_current_year,
    callback=_validate_year,
    show_default="current year",
    help="From which year to start to fetch data",
)
@click.option(
    "-d",
    "--dimension",
    type=click.Choice(DIMENSIONS, case_sensitive=False),
    default="month",
    show_default=True,
    help="Row dimension",
)
@click.option("-t", "--token", default=None, help="GitHub token (default: $GITHUB_TOKEN)")
@click.pass_context
def commits(
    ctx: click.Context,
    username: str | None,
    year: str,
    dimension: str,
    token: str | None,
) -> None:
    """Collect commit statistics of USERNAME with the desired dimension."""
    username = _require_username(ctx, username)
    settings = Settings.from_env(token)
    click.echo(
        f"GitHub commit statistics of user {click.style(username, bold=True)} "
        f"since {click.style(year, bold=True)} year start"
    )

    def _on_discovered(repositories: list[RepositoryRef]) -> None:
        click.echo(f"Total number of repositories: {len(repositories)} to check")

    def _on_progress(repository: RepositoryRef) -> None:
        click.echo(f"Crunching data for {repository.key}...")

    async def _run() -> Report:
        async with GitHubClient(settings) as client:
            return await run_commits(
                client,
                username,
                year=int(year),
                dimension=dimension.lower(),
                on_discovered=_on_discovered,
                on_progress=_on_progress,
            )

    try:
        report = asyncio.run(_run())
    except GhStatsError as exc:
        _fail(exc)

    _print_errors(report)
    click.echo(render_report(report))


@main.command("events")
@click.argument("username", required=False)
@click.option(
    "-d",
    "--dimension",
    type=click.Choice(EVENT_DIMENSIONS, case_sensitive=False),
    default="month",
    show_default=True,
    help="Row dimension",
)
@click.option("-t", "--token", default=None, help="GitHub token (default: $GITHUB_TOKEN)")
@click.pass_context
def events(ctx: click.Context, username: str | None, dimension: str, token: str | None) -> None:
    """Collect public event statistics of USERNAME (GitHub keeps about 90 days)."""
    username = _require_username(ctx, username)
    settings = Settings.from_env(token)
    click.echo(f"GitHub event statistics of user {click.style(username, bold=True)}")
    click.echo("Crunching data...")

    async def _run() -> Report:
        async with GitHubClient(settings) as client:
            return await run_events(client, username, dimension=dimension.lower())

    try:
        report = asyncio.run(_run())
    except GhStatsError as exc:
        _fail(exc)

    click.echo(render_report(report))


if __name__ == "__main__":
    main()
