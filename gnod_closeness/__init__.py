"""
Gnod closeness extraction.

This package reads the "map" pages of the Gnod sites (music-map.com,
literature-map.com, movie-map.com), recovers the visible list of related
items together with the similarity arrays embedded in the page's inline
script, and joins them into a table of (item, related item, closeness)
edges that can be merged across successive scrapes.
"""

from gnod_closeness.closeness import (
    collect_closeness,
    extract_closeness,
    extract_items,
    scrape_closeness,
)
from gnod_closeness.common.exceptions import (
    ClosenessAssumptionException,
    FetchError,
    IdentifierError,
    ParseError,
    RecordValueError,
    SchemaError,
    StructuralMismatch,
)
from gnod_closeness.common.identifiers import normalize
from gnod_closeness.merge import SharedClosenessTable, merge, merge_all
from gnod_closeness.models import ClosenessEdge, ClosenessTable, Item

__all__ = [
    "ClosenessAssumptionException",
    "ClosenessEdge",
    "ClosenessTable",
    "FetchError",
    "IdentifierError",
    "Item",
    "ParseError",
    "RecordValueError",
    "SchemaError",
    "SharedClosenessTable",
    "StructuralMismatch",
    "collect_closeness",
    "extract_closeness",
    "extract_items",
    "merge",
    "merge_all",
    "normalize",
    "scrape_closeness",
]
