"""Aggregator — group raw records by bucket key and derive report rows."""

from __future__ import annotations

from collections.abc import Iterable

from ghstats.models import (
    EVENT_COUNTERS,
    BucketGroup,
    EventPayload,
    Mode,
    RawRecord,
    ReportRow,
    TotalsRow,
)


def group_by_key(records: Iterable[RawRecord]) -> list[BucketGroup]:
    """Group *records* by ``bucket_key``.

    Groups appear in first-seen order; items keep their arrival order.
    """
    groups: dict[str, BucketGroup] = {}
    for record in records:
        group = groups.get(record.bucket_key)
        if group is None:
            group = groups[record.bucket_key] = BucketGroup(key=record.bucket_key)
        group.items.append(record)
    return list(groups.values())


def sort_groups(groups: list[BucketGroup]) -> list[BucketGroup]:
    """Sort by key using plain string order.

    Zero-padded ``YYYY-MM``/``YYYY-WW``/``YYYY-MM-DD`` keys come out
    chronological; weekday keys sort by their leading Sunday=0 index.
    """
    return sorted(groups, key=lambda g: g.key)


def _event_counters(items: Iterable[RawRecord]) -> dict[str, int]:
    sums = dict.fromkeys(EVENT_COUNTERS, 0)
    for item in items:
        if isinstance(item.payload, EventPayload):
            for name, value in item.payload.counters().items():
                sums[name] += value
    return sums


def build_row(group: BucketGroup, mode: Mode) -> ReportRow:
    if mode == "events":
        return ReportRow(
            key=group.key, count=len(group.items), counters=_event_counters(group.items)
        )
    repositories = sorted({r.repository_name for r in group.items if r.repository_name})
    return ReportRow(key=group.key, count=len(group.items), repositories=repositories)


def build_totals(groups: list[BucketGroup], mode: Mode) -> TotalsRow:
    """Totals across all groups.

    The repository count is the size of the union over every group, so a
    repository touched in two buckets counts once.
    """
    all_items = [item for g in groups for item in g.items]
    repositories = {r.repository_name for r in all_items if r.repository_name}
    totals = TotalsRow(records=sum(len(g.items) for g in groups), repositories=len(repositories))
    if mode == "events":
        totals.counters = _event_counters(all_items)
    return totals


def aggregate(records: Iterable[RawRecord], mode: Mode) -> tuple[list[ReportRow], TotalsRow]:
    """Group, sort and summarize *records* into report rows plus totals."""
    groups = sort_groups(group_by_key(records))
    rows = [build_row(g, mode) for g in groups]
    return rows, build_totals(groups, mode)
