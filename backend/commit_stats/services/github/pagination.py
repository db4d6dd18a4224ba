"""
Bounded pagination over upstream list endpoints.

Cursors are opaque: whatever a page fetcher returns as ``next_token`` is handed
back to it unchanged on the next call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    AsyncIterable,
    AsyncIterator,
    Awaitable,
    Callable,
    Collection,
    Generic,
    List,
    NewType,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from commit_stats.services.github.exceptions import GithubError, GithubRequestError

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageToken = NewType("PageToken", str)

PageFetcher = Callable[[Optional[PageToken]], Awaitable["Page[T]"]]


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    next_token: Optional[PageToken] = None


async def paginate(
    fetch_page: PageFetcher[T],
    *,
    max_pages: int,
    page_size: int,
    benign_statuses: Collection[int] = (),
    fatal_errors: Tuple[Type[GithubError], ...] = (),
    resource: str = "resource",
) -> AsyncIterator[T]:
    """
    Yield items page by page until the upstream runs dry or max_pages is hit.

    Stops when there is no next token, a page is empty, a page is short
    (fewer than page_size items) or the page cap is reached. A failed page
    fetch ends pagination for this resource only; items already yielded stand.
    Statuses in benign_statuses mean "no data" and are not reported as failures.
    Errors matching fatal_errors propagate to the caller instead.
    """
    token: Optional[PageToken] = None
    for page_number in range(1, max_pages + 1):
        try:
            page = await fetch_page(token)
        except GithubError as exc:
            if isinstance(exc, fatal_errors):
                raise
            if (
                isinstance(exc, GithubRequestError)
                and exc.status_code in benign_statuses
            ):
                logger.info(
                    "%s returned %s on page %d, treating as end of data",
                    resource,
                    exc.status_code,
                    page_number,
                )
            else:
                logger.warning(
                    "Failed to fetch %s (page %d): %s", resource, page_number, exc
                )
            return

        for item in page.items:
            yield item

        if not page.items or len(page.items) < page_size:
            return
        if page.next_token is None:
            return
        token = page.next_token

    logger.info("Reached page cap (%d) for %s", max_pages, resource)


async def collect(source: AsyncIterable[T], limit: Optional[int] = None) -> List[T]:
    """Drain an async iterable into a list, stopping early once limit is reached."""
    items: List[T] = []
    if limit is not None and limit <= 0:
        return items
    async for item in source:
        items.append(item)
        if limit is not None and len(items) >= limit:
            break

    aclose = getattr(source, "aclose", None)
    if aclose is not None:
        await aclose()
    return items
