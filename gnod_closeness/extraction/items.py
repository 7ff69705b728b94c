"""Item list extraction from the suggestion anchors.

The page lists the related items as suggestion anchors; the first anchor is
always the page's own subject and carries no usable link target, so its
reference is replaced by the caller-supplied subject slug.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from lxml.html import HtmlElement

from gnod_closeness.common.checked_html import (
    CheckedHtmlElement,
    ensure_checked,
)
from gnod_closeness.common.exceptions import IdentifierError
from gnod_closeness.common.identifiers import normalize_all
from gnod_closeness.models import Item
from gnod_closeness.sites import DEFAULT_SITE, SiteConfig

logger = logging.getLogger(__name__)


def extract_items(
    document: CheckedHtmlElement | HtmlElement,
    subject_ref: str,
    site: SiteConfig = DEFAULT_SITE,
) -> list[Item]:
    """Extract the ordered item list from a map page.

    Args:
        document: Parsed page.
        subject_ref: Slug of the page's own subject (e.g. ``"the+beatles"``).
        site: Layout configuration for the page's site.

    Returns:
        Items in document order, with positions ``0..n-1``.

    Raises:
        StructuralMismatch: If the page has no suggestion anchors.
        IdentifierError: If an id is empty or two entries share an id.
    """
    doc = ensure_checked(document)
    anchors = doc.checked_css(
        site.anchor_selector, "suggestion anchors", min_count=1
    )

    refs = [anchor.get("href") or "" for anchor in anchors]
    refs[0] = subject_ref
    ids = normalize_all(refs)
    _check_unique_ids(ids, refs, doc.request_url)

    items = [
        Item(
            id=item_id,
            name=anchor.text_content().strip(),
            source_ref=ref,
            position=position,
        )
        for position, (anchor, ref, item_id) in enumerate(
            zip(anchors, refs, ids)
        )
    ]
    logger.debug("Extracted %d items for %s", len(items), subject_ref)
    return items


def _check_unique_ids(
    ids: list[str], refs: list[str], request_url: str
) -> None:
    refs_by_id: dict[str, list[str]] = defaultdict(list)
    for item_id, ref in zip(ids, refs):
        refs_by_id[item_id].append(ref)

    for item_id, raw_refs in refs_by_id.items():
        if not item_id or len(raw_refs) > 1:
            raise IdentifierError(item_id, raw_refs, request_url)
