"""Time bucketing — map a record timestamp to its report row key."""

from __future__ import annotations

from datetime import datetime, timezone

from ghstats.models import DEFAULT_DIMENSION, DIMENSIONS, RepositoryRef

# Sunday-first so that "<index> <name>" keys sort Sunday..Saturday.
_WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def to_utc(value: datetime) -> datetime:
    """Normalize to timezone-aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_dimension(dimension: str | None) -> str:
    """Lower-case *dimension*, falling back to ``month`` when unknown."""
    value = (dimension or "").strip().lower()
    return value if value in DIMENSIONS else DEFAULT_DIMENSION


def bucket_key(
    timestamp: datetime,
    dimension: str | None,
    repository: RepositoryRef | None = None,
) -> str:
    """Return the bucket key for *timestamp* under *dimension*.

    ``month`` -> ``YYYY-MM``, ``week`` -> ``YYYY-WW`` (ISO year and week),
    ``day`` -> ``YYYY-MM-DD``, ``weekday`` -> ``"<d> <Name>"`` with Sunday=0,
    ``repository`` -> the repository full name.
    """
    dim = normalize_dimension(dimension)
    if dim == "repository":
        if repository is None:
            raise ValueError("the repository dimension needs a repository")
        return repository.full_name

    ts = to_utc(timestamp)
    if dim == "day":
        return f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"
    if dim == "week":
        iso_year, iso_week, _ = ts.isocalendar()
        return f"{iso_year:04d}-{iso_week:02d}"
    if dim == "weekday":
        index = ts.isoweekday() % 7
        return f"{index} {_WEEKDAY_NAMES[index]}"
    return f"{ts.year:04d}-{ts.month:02d}"
