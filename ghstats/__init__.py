"""ghstats: GitHub commit and event statistics for a single user."""

__version__ = "0.3.0"

from ghstats.aggregator import aggregate, group_by_key
from ghstats.bucketing import bucket_key
from ghstats.collector import collect_all_commits, collect_commits, collect_events
from ghstats.core.config import Settings
from ghstats.discovery import discover
from ghstats.errors import GhStatsError, GitHubAPIError, RateLimitError
from ghstats.github_client import GitHubClient
from ghstats.models import RawRecord, Report, RepositoryRef
from ghstats.pagination import walk
from ghstats.runner import run_commits, run_events

__all__ = [
    "GhStatsError",
    "GitHubAPIError",
    "GitHubClient",
    "RateLimitError",
    "RawRecord",
    "Report",
    "RepositoryRef",
    "Settings",
    "aggregate",
    "bucket_key",
    "collect_all_commits",
    "collect_commits",
    "collect_events",
    "discover",
    "group_by_key",
    "run_commits",
    "run_events",
    "walk",
]
