"""Join of the item list and the decoded matrix into closeness edges."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from gnod_closeness.common.exceptions import ParseError
from gnod_closeness.models import ClosenessEdge, ClosenessTable, Item

logger = logging.getLogger(__name__)


def build_table(
    items: Sequence[Item],
    matrix: Mapping[int, Sequence[float | None]],
    request_url: str = "",
) -> ClosenessTable:
    """Build the complete directed relation over one page's items.

    Emits ``(items[i].id, items[j].id, matrix[i][j])`` for every ``i`` and
    ``j``, self-pairs included, so the table has exactly ``len(items) ** 2``
    edges. Consumers that don't want self-pairs use
    :meth:`ClosenessTable.without_self_pairs`.

    Raises:
        ParseError: If item positions aren't ``0..n-1`` in order, or the
            matrix rows don't line up with them.
    """
    item_count = len(items)
    for expected, item in enumerate(items):
        if item.position != expected:
            raise ParseError(
                expected,
                f"item list has position {item.position} at index {expected}",
                request_url=request_url,
            )

    for position in range(item_count):
        row = matrix.get(position)
        if row is None:
            raise ParseError(
                position,
                "no matrix row for position",
                expected_count=item_count,
                request_url=request_url,
            )
        if len(row) != item_count:
            raise ParseError(
                position,
                f"expected {item_count} values, found {len(row)}",
                expected_count=item_count,
                actual_count=len(row),
                request_url=request_url,
            )

    extra = sorted(set(matrix) - set(range(item_count)))
    if extra:
        raise ParseError(
            extra[0],
            "matrix row has no matching item",
            request_url=request_url,
        )

    edges: list[ClosenessEdge] = []
    for row_item in items:
        logger.debug("row %d %s", row_item.position, row_item.id)
        edges.extend(
            ClosenessEdge(
                item_a=row_item.id, item_b=col_item.id, closeness=score
            )
            for col_item, score in zip(items, matrix[row_item.position])
        )
    return ClosenessTable(edges)
