"""Tests for CLI commands — runner calls are mocked, no network."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from ghstats.cli import main
from ghstats.core.config import Settings
from ghstats.errors import GitHubAPIError
from ghstats.models import Report, ReportRow, TotalsRow


@pytest.fixture(autouse=True)
def _offline():
    """No logging reconfiguration, no token lookup."""
    with patch("ghstats.cli.setup_logging"), patch(
        "ghstats.cli.Settings.from_env", return_value=Settings()
    ):
        yield


def _commit_report(**kwargs) -> Report:
    return Report(
        mode="commits",
        dimension="month",
        rows=[ReportRow(key="2023-01", count=2, repositories=["alice/proj"])],
        totals=TotalsRow(records=2, repositories=1),
        repositories_scanned=1,
        **kwargs,
    )


class TestCommits:
    def test_missing_username_exits_1(self):
        result = CliRunner().invoke(main, ["commits"])
        assert result.exit_code == 1
        assert "Please enter GitHub username" in result.output
        assert "Usage:" in result.output

    def test_success(self):
        runner = AsyncMock(return_value=_commit_report())
        with patch("ghstats.cli.run_commits", runner):
            result = CliRunner().invoke(main, ["commits", "alice", "--year", "2023", "-d", "WEEK"])

        assert result.exit_code == 0, result.output
        assert "GitHub commit statistics of user alice since 2023 year start" in result.output
        assert "Total number of commits: 2" in result.output
        kwargs = runner.await_args.kwargs
        assert kwargs["year"] == 2023
        assert kwargs["dimension"] == "week"

    def test_partial_errors_printed(self):
        report = _commit_report(errors={"bob/x": ["GET /repos/bob/x/commits returned 500"]})
        with patch("ghstats.cli.run_commits", AsyncMock(return_value=report)):
            result = CliRunner().invoke(main, ["commits", "alice"])

        assert result.exit_code == 0
        assert "bob/x" in result.output
        assert "returned 500" in result.output

    def test_invalid_year_rejected(self):
        result = CliRunner().invoke(main, ["commits", "alice", "--year", "23"])
        assert result.exit_code == 2

    def test_invalid_dimension_rejected(self):
        result = CliRunner().invoke(main, ["commits", "alice", "-d", "hour"])
        assert result.exit_code == 2

    def test_global_failure_exits_1(self):
        error = GitHubAPIError(
            "GET /users/ghost/repos returned 404", status=404, body='{"message": "Not Found"}'
        )
        with patch("ghstats.cli.run_commits", AsyncMock(side_effect=error)):
            result = CliRunner().invoke(main, ["commits", "ghost"])

        assert result.exit_code == 1
        assert "Not Found" in result.output
        assert "Total number" not in result.output


class TestEvents:
    def test_missing_username_exits_1(self):
        result = CliRunner().invoke(main, ["events"])
        assert result.exit_code == 1
        assert "Please enter GitHub username" in result.output

    def test_repository_dimension_not_offered(self):
        result = CliRunner().invoke(main, ["events", "alice", "-d", "repository"])
        assert result.exit_code == 2

    def test_success(self):
        report = Report(
            mode="events",
            dimension="day",
            rows=[ReportRow(key="2024-05-01", count=1, counters={"commits": 3})],
            totals=TotalsRow(records=1, repositories=1, counters={"commits": 3}),
        )
        runner = AsyncMock(return_value=report)
        with patch("ghstats.cli.run_events", runner):
            result = CliRunner().invoke(main, ["events", "alice", "-d", "day"])

        assert result.exit_code == 0, result.output
        assert "2024-05-01" in result.output
        assert "Total number of events: 1" in result.output
        assert runner.await_args.kwargs["dimension"] == "day"

    def test_pagination_failure_exits_1_without_table(self):
        error = GitHubAPIError("request timed out")
        with patch("ghstats.cli.run_events", AsyncMock(side_effect=error)):
            result = CliRunner().invoke(main, ["events", "alice"])

        assert result.exit_code == 1
        assert "request timed out" in result.output
        assert "Dimension" not in result.output


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "ghstats" in result.output
