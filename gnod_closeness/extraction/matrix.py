"""Decoding of the similarity arrays embedded in a map page's inline script.

Contract with the source site
-----------------------------
Gnod map pages carry one JavaScript array literal per listed item inside an
inline ``<script>`` block::

    Aid[0]=new Array(-1,5.2,3.1);
    Aid[1]=new Array(5.2,-1,2.0);
    Aid[2]=new Array(3.1,2.0,-1);

Row ``i`` holds the closeness of item ``i`` to every item on the page, in
list order, with ``-1`` meaning "no relation computed". The block is the
third ``<script>`` element on the page (``SiteConfig.script_index``). Both
facts are conventions of the site, not a published format: if the block is
missing or holds no arrays the page is rejected with StructuralMismatch,
and a row that can't be decoded in full raises ParseError. No partial
matrix is ever returned.

The string matching lives in AidArrayDecoder behind the MatrixDecoder
protocol, so a different decoder can be passed to extract_matrix if the
site changes its script layout.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from lxml.html import HtmlElement

from gnod_closeness.common.checked_html import (
    CheckedHtmlElement,
    ensure_checked,
)
from gnod_closeness.common.exceptions import ParseError, StructuralMismatch
from gnod_closeness.models import SENTINEL
from gnod_closeness.sites import DEFAULT_SITE, SiteConfig

logger = logging.getLogger(__name__)

Matrix = dict[int, list[float | None]]


class MatrixDecoder(Protocol):
    """Turns the scores script text into one row of scores per position."""

    def decode(
        self, script_text: str, item_count: int, request_url: str = ""
    ) -> Matrix: ...


class AidArrayDecoder:
    """Decoder for ``Aid[i]=new Array(...);`` assignments."""

    any_array = re.compile(r"Aid\s*\[\s*\d+\s*\]\s*=\s*new\s+Array\s*\(")
    number = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

    def row_pattern(self, position: int) -> re.Pattern[str]:
        return re.compile(
            rf"Aid\s*\[\s*{position}\s*\]\s*=\s*new\s+Array\s*\(([^)]*)\)\s*;"
        )

    def decode(
        self, script_text: str, item_count: int, request_url: str = ""
    ) -> Matrix:
        """Decode rows ``0..item_count-1`` from the script text.

        Raises:
            StructuralMismatch: If the text has no array assignment at all.
            ParseError: If a row is missing, holds a non-numeric value, or
                has a length other than ``item_count``.
        """
        if not self.any_array.search(script_text):
            raise StructuralMismatch(
                selector=self.any_array.pattern,
                selector_type="regex",
                description="closeness array assignments",
                expected_min=1,
                expected_max=None,
                actual_count=0,
                request_url=request_url,
            )

        matrix: Matrix = {}
        for position in range(item_count):
            matrix[position] = self._decode_row(
                script_text, position, item_count, request_url
            )
        logger.debug("Decoded %d closeness rows", len(matrix))
        return matrix

    def _decode_row(
        self,
        script_text: str,
        position: int,
        item_count: int,
        request_url: str,
    ) -> list[float | None]:
        match = self.row_pattern(position).search(script_text)
        if match is None:
            raise ParseError(
                position,
                "array assignment not found",
                expected_count=item_count,
                request_url=request_url,
            )

        body = match.group(1).strip()
        tokens = [token.strip() for token in body.split(",")] if body else []
        if len(tokens) != item_count:
            raise ParseError(
                position,
                f"expected {item_count} values, found {len(tokens)}",
                expected_count=item_count,
                actual_count=len(tokens),
                request_url=request_url,
            )

        row: list[float | None] = []
        for token in tokens:
            if not self.number.fullmatch(token):
                raise ParseError(
                    position,
                    f"non-numeric value {token!r}",
                    expected_count=item_count,
                    actual_count=len(tokens),
                    request_url=request_url,
                )
            value = float(token)
            row.append(None if value == SENTINEL else value)
        return row


def extract_matrix(
    document: CheckedHtmlElement | HtmlElement,
    item_count: int,
    site: SiteConfig = DEFAULT_SITE,
    decoder: MatrixDecoder | None = None,
) -> Matrix:
    """Extract the closeness rows embedded in a map page.

    Args:
        document: Parsed page.
        item_count: Number of items listed on the page.
        site: Layout configuration (which script block holds the arrays).
        decoder: Alternative decoder; defaults to AidArrayDecoder.

    Returns:
        Mapping from position to ``item_count`` scores, None for the
        "no relation" sentinel.

    Raises:
        ValueError: If ``item_count`` is less than 1.
        StructuralMismatch: If the scores script block is absent or holds
            no arrays.
        ParseError: If any row can't be decoded in full.
    """
    if item_count < 1:
        raise ValueError(f"item_count must be positive, got {item_count}")

    doc = ensure_checked(document)
    scripts = doc.checked_xpath(
        "//script", "script blocks", min_count=site.script_index + 1
    )
    script_text = scripts[site.script_index].text_content()

    decoder = decoder or AidArrayDecoder()
    return decoder.decode(script_text, item_count, doc.request_url)
