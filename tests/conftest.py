"""Shared fixtures for closeness extraction tests."""

from collections.abc import Callable

import pytest

from gnod_closeness.common.checked_html import CheckedHtmlElement
from gnod_closeness.common.exceptions import FetchError
from gnod_closeness.models import ClosenessEdge, ClosenessTable
from tests.mock_pages import (
    BEATLES_ITEMS,
    generate_map_html,
    parse_page,
)


@pytest.fixture
def map_html() -> str:
    """HTML of the Beatles map page.

    Returns:
        HTML string with four items and a 4x4 scores matrix.
    """
    return generate_map_html()


@pytest.fixture
def map_page(map_html: str) -> CheckedHtmlElement:
    """Parsed Beatles map page."""
    return parse_page(map_html)


@pytest.fixture
def expected_item_count() -> int:
    """The number of items on the Beatles map page."""
    return len(BEATLES_ITEMS)


@pytest.fixture
def make_table() -> Callable[..., ClosenessTable]:
    """Factory building a table from ``(item_a, item_b, closeness)`` tuples."""

    def _make(*rows: tuple[str, str, float | None]) -> ClosenessTable:
        return ClosenessTable(
            ClosenessEdge(item_a=a, item_b=b, closeness=c) for a, b, c in rows
        )

    return _make


class FakeFetcher:
    """Fetcher serving canned pages by URL.

    URLs missing from ``pages`` raise FetchError with a 404 status.
    """

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    def fetch(self, url: str) -> CheckedHtmlElement:
        self.requested.append(url)
        if url not in self.pages:
            raise FetchError(url, "Not Found", status_code=404)
        return parse_page(self.pages[url], url)


@pytest.fixture
def fake_fetcher_factory() -> Callable[[dict[str, str]], FakeFetcher]:
    return FakeFetcher
