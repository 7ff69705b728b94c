"""Merging of closeness tables from successive scrapes.

The accumulated dataset is an explicit value: callers pass the table they
have and get a new one back. A pair already present keeps its original
score (first-write-wins), so re-scraping a subject never rewrites history.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any, Union

from gnod_closeness.models import ClosenessEdge, ClosenessTable, Pair

logger = logging.getLogger(__name__)

TableLike = Union[ClosenessTable, Iterable[Mapping[str, Any]]]


def as_table(table: TableLike) -> ClosenessTable:
    """Coerce row mappings into a ClosenessTable.

    Raises:
        SchemaError: If a row lacks ``item_a`` or ``item_b``.
    """
    if isinstance(table, ClosenessTable):
        return table
    return ClosenessTable.from_records(table)


def merge(base: TableLike, incoming: TableLike) -> ClosenessTable:
    """Combine two tables, deduplicating on ``(item_a, item_b)``.

    Edges from ``base`` come first; an ``incoming`` edge whose pair is
    already present is dropped. Neither input is modified.

    Args:
        base: Table accumulated so far, or its records.
        incoming: Newly extracted table, or its records.

    Returns:
        A new table.

    Raises:
        SchemaError: If either input's records lack a key column.
    """
    base_table = as_table(base)
    incoming_table = as_table(incoming)

    edges: list[ClosenessEdge] = list(base_table)
    seen: set[Pair] = set(base_table.pairs())
    for edge in incoming_table:
        if edge.pair in seen:
            continue
        seen.add(edge.pair)
        edges.append(edge)

    logger.info(
        "Merged %d incoming edges into %d: %d new",
        len(incoming_table),
        len(base_table),
        len(edges) - len(base_table),
    )
    return ClosenessTable(edges)


def merge_all(
    tables: Iterable[TableLike], base: TableLike | None = None
) -> ClosenessTable:
    """Fold :func:`merge` over ``tables``, left to right."""
    result = as_table(base) if base is not None else ClosenessTable.empty()
    for table in tables:
        result = merge(result, table)
    return result


class SharedClosenessTable:
    """Accumulated table shared by several scraping threads.

    Extraction needs no coordination; the read-merge-write of the shared
    result does, and that is the only lock in the package.

    Example::

        shared = SharedClosenessTable()
        # in each worker
        shared.merge_in(extract_closeness(page, subject_ref))
        # when done
        table = shared.snapshot()
    """

    def __init__(self, initial: TableLike | None = None) -> None:
        self._table = (
            as_table(initial) if initial is not None else ClosenessTable()
        )
        self._lock = threading.Lock()

    def merge_in(self, incoming: TableLike) -> ClosenessTable:
        """Merge ``incoming`` into the shared table and return the result."""
        incoming_table = as_table(incoming)
        with self._lock:
            self._table = merge(self._table, incoming_table)
            return self._table

    def snapshot(self) -> ClosenessTable:
        with self._lock:
            return self._table

    def __len__(self) -> int:
        return len(self.snapshot())
