"""Plain-text rendering of reports and errors."""

from __future__ import annotations

import json

from ghstats.errors import GitHubAPIError
from ghstats.models import Report

_COMMIT_HEADERS = ["Dimension", "Commits", "Repositories"]
_EVENT_HEADERS = ["Dimension", "Events", "Commits", "Issue comments", "Creates", "PRs opened"]


def _table(headers: list[str], rows: list[list[str]], right: set[int]) -> str:
    """Draw a bordered table; cells may contain newlines."""
    split_rows = [[cell.split("\n") for cell in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in split_rows:
        for i, lines in enumerate(row):
            widths[i] = max(widths[i], *(len(line) for line in lines))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def _line(cells: list[str]) -> str:
        parts = []
        for i, cell in enumerate(cells):
            text = cell.rjust(widths[i]) if i in right else cell.ljust(widths[i])
            parts.append(f" {text} ")
        return "|" + "|".join(parts) + "|"

    out = [border, _line(headers), border]
    for row in split_rows:
        height = max(len(lines) for lines in row)
        for n in range(height):
            out.append(_line([lines[n] if n < len(lines) else "" for lines in row]))
        out.append(border)
    return "\n".join(out)


def render_report(report: Report) -> str:
    """Render *report* as a table followed by its totals lines."""
    if report.mode == "events":
        body = [
            [
                row.key,
                str(row.count),
                str(row.counters.get("commits", 0)),
                str(row.counters.get("issue_comments", 0)),
                str(row.counters.get("creates", 0)),
                str(row.counters.get("pull_requests", 0)),
            ]
            for row in report.rows
        ]
        table = _table(_EVENT_HEADERS, body, right={1, 2, 3, 4, 5})
        c = report.totals.counters
        totals = [
            f"Total number of events: {report.totals.records}",
            f"Total number of repositories: {report.totals.repositories}",
            f"Total commits: {c.get('commits', 0)}, issue comments: {c.get('issue_comments', 0)}, "
            f"creates: {c.get('creates', 0)}, PRs opened: {c.get('pull_requests', 0)}",
        ]
    else:
        body = [[row.key, str(row.count), "\n".join(row.repositories)] for row in report.rows]
        table = _table(_COMMIT_HEADERS, body, right={1})
        totals = [
            f"Total number of commits: {report.totals.records}",
            f"Total number of repositories: {report.totals.repositories}",
        ]
    return "\n".join([table, *totals])


def format_error(error: BaseException) -> str:
    """Human-readable error text.

    GitHub error bodies are JSON with ``message`` and ``documentation_url``;
    both are shown when present.
    """
    if isinstance(error, GitHubAPIError) and error.body:
        try:
            parsed = json.loads(error.body)
        except ValueError:
            return str(error)
        if isinstance(parsed, dict):
            lines = [str(parsed[k]) for k in ("message", "documentation_url") if parsed.get(k)]
            if lines:
                return "\n".join(lines)
    return str(error)
