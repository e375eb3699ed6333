"""Data models shared by discovery, collection, aggregation and rendering.

These are pure data structures — no network or I/O dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

Dimension = Literal["month", "week", "day", "weekday", "repository"]
Mode = Literal["commits", "events"]

DIMENSIONS: tuple[str, ...] = ("month", "week", "day", "weekday", "repository")
EVENT_DIMENSIONS: tuple[str, ...] = ("month", "week", "day", "weekday")
DEFAULT_DIMENSION: Dimension = "month"

# Derived per-event counters, in report column order.
EVENT_COUNTERS: tuple[str, ...] = ("commits", "issue_comments", "creates", "pull_requests")


@dataclass(frozen=True)
class RepositoryRef:
    """A repository to be scanned for commits."""

    name: str
    full_name: str
    owner: str
    is_fork: bool = False

    @property
    def key(self) -> str:
        """Logical identity — two refs with the same ``owner/name`` are one target."""
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class CommitPayload:
    message: str
    committer_login: str | None
    committer_date: datetime


@dataclass(frozen=True)
class EventPayload:
    type: str
    repo_name: str
    commits: int = 0
    issue_comments: int = 0
    creates: int = 0
    pull_requests: int = 0

    def counters(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in EVENT_COUNTERS}


@dataclass(frozen=True)
class RawRecord:
    """One collected commit or event, already assigned to its bucket."""

    bucket_key: str
    timestamp: datetime
    payload: CommitPayload | EventPayload
    repository: RepositoryRef | None = None  # None for events

    @property
    def repository_name(self) -> str | None:
        if self.repository is not None:
            return self.repository.full_name
        if isinstance(self.payload, EventPayload):
            return self.payload.repo_name
        return None


@dataclass
class BucketGroup:
    """Records sharing one bucket key, in arrival order."""

    key: str
    items: list[RawRecord] = field(default_factory=list)


@dataclass
class ReportRow:
    key: str
    count: int
    repositories: list[str] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)


@dataclass
class TotalsRow:
    records: int = 0
    repositories: int = 0
    counters: dict[str, int] = field(default_factory=dict)


@dataclass
class CollectResult:
    """Records from one or more collection streams plus per-stream failures.

    *errors* maps a repository full name to the error message that cut its
    pagination short.
    """

    records: list[RawRecord] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    def extend(self, other: CollectResult) -> None:
        self.records.extend(other.records)
        self.errors.update(other.errors)


@dataclass
class DiscoveryResult:
    repositories: list[RepositoryRef] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)


@dataclass
class Report:
    """Summary of a single run, ready for rendering."""

    mode: Mode
    dimension: str
    rows: list[ReportRow] = field(default_factory=list)
    totals: TotalsRow = field(default_factory=TotalsRow)
    repositories_scanned: int = 0
    # one repository can fail in discovery and again in collection
    errors: dict[str, list[str]] = field(default_factory=dict)

    def add_errors(self, errors: dict[str, str]) -> None:
        for name, message in errors.items():
            self.errors.setdefault(name, []).append(message)
