"""Tests for bounded pagination."""

from typing import List, Optional

import pytest

from commit_stats.services.github.exceptions import GithubRequestError, GithubResponseError
from commit_stats.services.github.pagination import Page, PageToken, collect, paginate
from tests._fakes import run


class ScriptedPages:
    """Serves a fixed list of pages; a page may be an exception to raise."""

    def __init__(self, pages):
        self.pages = pages
        self.tokens: List[Optional[PageToken]] = []

    async def __call__(self, token):
        self.tokens.append(token)
        page = self.pages[len(self.tokens) - 1]
        if isinstance(page, Exception):
            raise page
        return page


def full_page(start: int, size: int, next_token: Optional[str]) -> Page:
    return Page(
        items=list(range(start, start + size)),
        next_token=PageToken(next_token) if next_token else None,
    )


def drain(fetcher, **kwargs):
    kwargs.setdefault("page_size", 3)
    kwargs.setdefault("max_pages", 10)
    return run(collect(paginate(fetcher, **kwargs)))


class TestPaginate:
    def test_follows_opaque_tokens_until_none(self):
        fetcher = ScriptedPages(
            [full_page(0, 3, "cursor-a"), full_page(3, 3, "cursor-b"), full_page(6, 3, None)]
        )

        assert drain(fetcher) == list(range(9))
        assert fetcher.tokens == [None, "cursor-a", "cursor-b"]

    def test_short_page_ends_pagination(self):
        fetcher = ScriptedPages([full_page(0, 3, "next"), full_page(3, 2, "next")])

        assert drain(fetcher) == [0, 1, 2, 3, 4]
        assert len(fetcher.tokens) == 2

    def test_empty_page_ends_pagination(self):
        fetcher = ScriptedPages([full_page(0, 3, "next"), Page(items=[], next_token="x")])

        assert drain(fetcher) == [0, 1, 2]

    def test_page_cap_bounds_total_items(self):
        pages = [full_page(i * 3, 3, f"t{i}") for i in range(20)]
        fetcher = ScriptedPages(pages)

        items = drain(fetcher, max_pages=4)

        assert len(items) == 12
        assert len(fetcher.tokens) == 4

    def test_failure_keeps_items_already_fetched(self):
        fetcher = ScriptedPages(
            [full_page(0, 3, "next"), GithubRequestError("boom", status_code=502)]
        )

        assert drain(fetcher) == [0, 1, 2]

    def test_undecodable_page_keeps_items_already_fetched(self, caplog):
        fetcher = ScriptedPages(
            [full_page(0, 3, "next"), GithubResponseError("Malformed JSON from /repos/o/r/commits")]
        )

        with caplog.at_level("WARNING"):
            items = drain(fetcher, resource="commits of o/r")

        assert items == [0, 1, 2]
        assert "Failed to fetch commits of o/r (page 2)" in caplog.text

    def test_fatal_errors_propagate(self):
        fetcher = ScriptedPages(
            [full_page(0, 3, "next"), GithubResponseError("Malformed JSON from /search/commits")]
        )

        with pytest.raises(GithubResponseError):
            drain(fetcher, fatal_errors=(GithubResponseError,))

    def test_benign_status_on_first_page_yields_nothing(self, caplog):
        fetcher = ScriptedPages([GithubRequestError("empty", status_code=409)])

        with caplog.at_level("INFO"):
            items = drain(fetcher, benign_statuses=(409,), resource="commits of o/r")

        assert items == []
        assert "treating as end of data" in caplog.text
        assert not [r for r in caplog.records if r.levelname == "WARNING"]


class TestCollect:
    def test_limit_stops_early(self):
        fetcher = ScriptedPages([full_page(0, 3, "a"), full_page(3, 3, "b")])

        items = run(collect(paginate(fetcher, page_size=3, max_pages=10), limit=2))

        assert items == [0, 1]
        assert len(fetcher.tokens) == 1
