"""Page walker — exhaust a paginated listing one page at a time."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TypeVar

import structlog

from ghstats.schemas import Page

log = structlog.get_logger("ghstats.pagination")

T = TypeVar("T")

FetchPage = Callable[[int], Awaitable[Page[T]]]


async def walk(
    fetch_page: FetchPage[T],
    *,
    stop: Callable[[T], bool] | None = None,
    max_pages: int | None = None,
    start: int = 1,
) -> AsyncGenerator[T, None]:
    """Yield items from ``fetch_page(1)``, ``fetch_page(2)``, ... in page order.

    The next page is requested only while the current one reports
    ``has_more``.  *stop* is the early-stop predicate: an item for which it
    returns True is not yielded and no further pages are requested, though
    the rest of the current page is still offered.  Listings are assumed to
    be newest-first, so one out-of-range item means every later page is too.
    """
    page_number = start
    pages = 0
    while True:
        page = await fetch_page(page_number)
        pages += 1
        has_more = page.has_more
        for item in page.items:
            if stop is not None and stop(item):
                has_more = False
                continue
            yield item

        if not has_more:
            return
        if max_pages is not None and pages >= max_pages:
            log.debug("pagination.max_pages", max_pages=max_pages, last_page=page_number)
            return
        page_number += 1


async def collect_all(
    fetch_page: FetchPage[T],
    *,
    stop: Callable[[T], bool] | None = None,
    max_pages: int | None = None,
) -> list[T]:
    """Materialize :func:`walk` into a list."""
    return [item async for item in walk(fetch_page, stop=stop, max_pages=max_pages)]
