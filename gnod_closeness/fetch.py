"""Page retrieval.

Extraction only needs a way to turn a URL into a parsed document, expressed
by the Fetcher protocol. HttpFetcher is the default implementation on top
of an httpx client. It reports every failure as FetchError and never
retries; retry, backoff and rate limiting belong to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from lxml import etree, html

from gnod_closeness.common.checked_html import CheckedHtmlElement
from gnod_closeness.common.exceptions import FetchError
from gnod_closeness.sites import SiteConfig

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Anything that can fetch and parse a page."""

    def fetch(self, url: str) -> CheckedHtmlElement: ...


def parse_document(html_text: str, url: str = "") -> CheckedHtmlElement:
    """Parse page text into a checked document.

    Raises:
        FetchError: If the text isn't parseable HTML (e.g. empty body).
    """
    try:
        element = html.fromstring(html_text)
    except (etree.ParserError, ValueError) as e:
        raise FetchError(url, f"unparseable document: {e}") from e
    return CheckedHtmlElement(element, url)


class HttpFetcher:
    """Fetches pages over HTTP with an httpx client.

    Example::

        with HttpFetcher(timeout=30.0) as fetcher:
            page = fetcher.fetch("https://www.music-map.com/the+beatles")
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float | None = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Client to use instead of creating one. The fetcher does
                not close a client it was given.
            timeout: Request timeout in seconds for a client created here.
                None means no timeout.
            headers: Default headers for a client created here.
        """
        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = httpx.Client(
                timeout=timeout, headers=headers, follow_redirects=True
            )
            self._owns_client = True
        self.timeout = timeout

    def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def fetch(self, url: str) -> CheckedHtmlElement:
        """Fetch ``url`` and parse it.

        Raises:
            FetchError: On timeouts, transport errors and non-2xx responses.
        """
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(url, f"timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise FetchError(
                url,
                response.reason_phrase or "unexpected status",
                status_code=response.status_code,
            )

        logger.debug(
            "Fetched %s (%d bytes)", url, len(response.content)
        )
        return parse_document(response.text, str(response.url))


def fetch_page(
    fetcher: Fetcher, site: SiteConfig, subject_ref: str | None = None
) -> CheckedHtmlElement:
    """Fetch a subject's map page, or the site root if no subject is given."""
    return fetcher.fetch(site.page_url(subject_ref))
