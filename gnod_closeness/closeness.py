"""Closeness extraction entry points.

extract_closeness runs the whole per-document pipeline (item list, embedded
matrix, edge table). scrape_closeness adds the page fetch in front of it,
and collect_closeness repeats that over several subjects, merging each
result into the accumulated table it is given.

Any failure aborts the document it occurred on; there are no partial
tables and no retries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from lxml.html import HtmlElement

from gnod_closeness.common.checked_html import (
    CheckedHtmlElement,
    ensure_checked,
)
from gnod_closeness.common.exceptions import (
    ClosenessAssumptionException,
    FetchError,
)
from gnod_closeness.extraction.items import extract_items
from gnod_closeness.extraction.matrix import MatrixDecoder, extract_matrix
from gnod_closeness.extraction.table import build_table
from gnod_closeness.fetch import Fetcher, fetch_page
from gnod_closeness.merge import TableLike, as_table, merge
from gnod_closeness.models import ClosenessTable
from gnod_closeness.sites import DEFAULT_SITE, SiteConfig

logger = logging.getLogger(__name__)

__all__ = [
    "collect_closeness",
    "extract_closeness",
    "extract_items",
    "scrape_closeness",
]

ErrorCallback = Callable[[str, Exception], bool]


def extract_closeness(
    document: CheckedHtmlElement | HtmlElement,
    subject_ref: str,
    site: SiteConfig = DEFAULT_SITE,
    decoder: MatrixDecoder | None = None,
) -> ClosenessTable:
    """Extract the closeness table from one map page.

    Args:
        document: Parsed page.
        subject_ref: Slug of the page's own subject.
        site: Layout configuration for the page's site.
        decoder: Alternative matrix decoder.

    Returns:
        Table with one edge per ordered item pair, self-pairs included.

    Raises:
        StructuralMismatch: If the anchors or the scores block are missing.
        ParseError: If a row of the embedded matrix can't be decoded.
        IdentifierError: If item ids are empty or collide.
    """
    doc = ensure_checked(document)
    items = extract_items(doc, subject_ref, site)
    matrix = extract_matrix(doc, len(items), site, decoder)
    table = build_table(items, matrix, doc.request_url)
    logger.debug(
        "Extracted %d edges over %d items for %s",
        len(table),
        len(items),
        subject_ref,
    )
    return table


def scrape_closeness(
    fetcher: Fetcher,
    subject_ref: str,
    site: SiteConfig = DEFAULT_SITE,
    decoder: MatrixDecoder | None = None,
) -> ClosenessTable:
    """Fetch a subject's map page and extract its closeness table.

    Raises:
        FetchError: Propagated unchanged from the fetcher.
        StructuralMismatch, ParseError, IdentifierError: As for
            :func:`extract_closeness`.
    """
    page = fetch_page(fetcher, site, subject_ref)
    table = extract_closeness(page, subject_ref, site, decoder)
    logger.info(
        "Scraped %s: %d edges", site.page_url(subject_ref), len(table)
    )
    return table


def collect_closeness(
    fetcher: Fetcher,
    subject_refs: Iterable[str],
    site: SiteConfig = DEFAULT_SITE,
    decoder: MatrixDecoder | None = None,
    base: TableLike | None = None,
    on_error: ErrorCallback | None = None,
) -> ClosenessTable:
    """Scrape several subjects and merge them into one table.

    Subjects are scraped in order and each result is merged into the
    accumulated table (first-write-wins).

    Args:
        fetcher: Page fetcher.
        subject_refs: Subject slugs to scrape.
        site: Layout configuration for the site.
        decoder: Matrix decoder used for every subject; defaults to
            AidArrayDecoder.
        base: Previously accumulated table (or its records).
        on_error: Optional callback invoked with the subject slug and the
            exception when a subject fails. Return True to skip the
            subject and continue, False to stop and return the table
            accumulated so far. If not provided, the exception propagates.

    Returns:
        The accumulated table.
    """
    result = as_table(base) if base is not None else ClosenessTable.empty()
    for subject_ref in subject_refs:
        try:
            table = scrape_closeness(fetcher, subject_ref, site, decoder)
        except (ClosenessAssumptionException, FetchError) as e:
            if on_error is None:
                raise
            if not on_error(subject_ref, e):
                logger.warning(
                    "Stopping after %s failed: %s", subject_ref, e
                )
                break
            logger.warning("Skipping %s: %s", subject_ref, e)
            continue
        result = merge(result, table)
    return result
