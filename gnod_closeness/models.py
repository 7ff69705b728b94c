"""Pydantic data models for items and closeness edges.

Items and edges are created fresh for every document and never mutated
afterwards, so both models are frozen. ClosenessTable is the immutable,
pair-keyed collection that extraction returns and merging combines.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gnod_closeness.common.exceptions import RecordValueError, SchemaError

SENTINEL = -1
KEY_COLUMNS = ("item_a", "item_b")
COLUMNS = (*KEY_COLUMNS, "closeness")
MISSING_MARKERS = frozenset({"", "na", "nan", "null"})

Pair = tuple[str, str]


class Item(BaseModel):
    """One catalogued entity listed on a Gnod page."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Normalized item id")
    name: str = Field(..., description="Display text as rendered")
    source_ref: str = Field(
        ..., description="URL fragment the id was derived from"
    )
    position: int = Field(
        ..., ge=0, description="Index in the list and in the score arrays"
    )


class ClosenessEdge(BaseModel):
    """Closeness of ``item_b`` as seen from ``item_a``'s row.

    ``closeness`` is None when the site reports no relation for the pair.
    """

    model_config = ConfigDict(frozen=True)

    item_a: str
    item_b: str
    closeness: float | None = None

    @field_validator("closeness")
    @classmethod
    def _reject_sentinel(cls, value: float | None) -> float | None:
        if value is not None and value == SENTINEL:
            raise ValueError(
                "closeness sentinel -1 must be converted to None"
            )
        return value

    @property
    def pair(self) -> Pair:
        return (self.item_a, self.item_b)

    @property
    def is_self_pair(self) -> bool:
        return self.item_a == self.item_b


def _record_closeness(value: Any, row_index: int) -> float | None:
    """Closeness from a record cell, with missing markers mapped to None."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in MISSING_MARKERS:
        return None
    try:
        closeness = float(value)
    except (TypeError, ValueError):
        raise RecordValueError("closeness", value, row_index) from None
    if math.isnan(closeness) or closeness == SENTINEL:
        return None
    return closeness


class ClosenessTable:
    """Ordered, immutable collection of edges keyed by ``(item_a, item_b)``.

    At most one edge per pair. Construction rejects duplicates; combining
    tables that share pairs is the job of
    :func:`gnod_closeness.merge.merge`.

    Example::

        table = ClosenessTable(edges)
        table.get("the_beatles", "queen")
        rows = table.to_records()
    """

    __slots__ = ("_edges", "_index")

    def __init__(self, edges: Iterable[ClosenessEdge] = ()) -> None:
        self._edges: tuple[ClosenessEdge, ...] = tuple(edges)
        self._index: dict[Pair, ClosenessEdge] = {}
        for edge in self._edges:
            if edge.pair in self._index:
                raise ValueError(
                    f"duplicate closeness edge for pair {edge.pair}"
                )
            self._index[edge.pair] = edge

    @classmethod
    def empty(cls) -> ClosenessTable:
        return cls()

    @classmethod
    def from_records(
        cls, records: Iterable[Mapping[str, Any]]
    ) -> ClosenessTable:
        """Build a table from row mappings (e.g. a loaded tabular file).

        Rows need ``item_a`` and ``item_b``; ``closeness`` is optional and
        a raw ``-1``, a missing value and the markers ``""``, ``NA``, ``NaN``
        and ``null`` (any case) become None.
        Duplicate pairs keep the first row.

        Raises:
            SchemaError: If a row lacks one of the key columns.
            RecordValueError: If a closeness value is not a number.
        """
        edges: list[ClosenessEdge] = []
        seen: set[Pair] = set()
        for row_index, record in enumerate(records):
            missing = [col for col in KEY_COLUMNS if col not in record]
            if missing:
                raise SchemaError(missing, row_index)
            edge = ClosenessEdge(
                item_a=record["item_a"],
                item_b=record["item_b"],
                closeness=_record_closeness(
                    record.get("closeness"), row_index
                ),
            )
            if edge.pair in seen:
                continue
            seen.add(edge.pair)
            edges.append(edge)
        return cls(edges)

    def to_records(self) -> list[dict[str, Any]]:
        """Rows with columns ``item_a``, ``item_b``, ``closeness``.

        Unknown closeness is None, never the raw sentinel.
        """
        return [edge.model_dump() for edge in self._edges]

    @property
    def edges(self) -> tuple[ClosenessEdge, ...]:
        return self._edges

    def get(self, item_a: str, item_b: str) -> ClosenessEdge | None:
        return self._index.get((item_a, item_b))

    def pairs(self) -> list[Pair]:
        return list(self._index)

    def item_ids(self) -> set[str]:
        ids: set[str] = set()
        for item_a, item_b in self._index:
            ids.add(item_a)
            ids.add(item_b)
        return ids

    def without_self_pairs(self) -> ClosenessTable:
        return ClosenessTable(e for e in self._edges if not e.is_self_pair)

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[ClosenessEdge]:
        return iter(self._edges)

    def __contains__(self, pair: object) -> bool:
        return pair in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClosenessTable):
            return NotImplemented
        return self._edges == other._edges

    def __hash__(self) -> int:
        return hash(self._edges)

    def __repr__(self) -> str:
        return f"ClosenessTable({len(self._edges)} edges)"
