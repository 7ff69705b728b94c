"""Tests for Item, ClosenessEdge and ClosenessTable."""

import pytest
from pydantic import ValidationError

from gnod_closeness.common.exceptions import SchemaError
from gnod_closeness.models import ClosenessEdge, ClosenessTable, Item


class TestItem:
    """Tests for the Item model."""

    def test_is_frozen(self):
        """Items shall not be mutable after creation."""
        item = Item(id="queen", name="Queen", source_ref="queen", position=1)

        with pytest.raises(ValidationError):
            item.position = 2

    def test_rejects_empty_id(self):
        """Items shall require a non-empty id."""
        with pytest.raises(ValidationError):
            Item(id="", name="?", source_ref="", position=0)

    def test_rejects_negative_position(self):
        """Items shall require a non-negative position."""
        with pytest.raises(ValidationError):
            Item(id="queen", name="Queen", source_ref="queen", position=-1)


class TestClosenessEdge:
    """Tests for the ClosenessEdge model."""

    def test_unknown_closeness_is_none(self):
        """closeness shall default to None (no relation)."""
        edge = ClosenessEdge(item_a="queen", item_b="abba")

        assert edge.closeness is None
        assert edge.pair == ("queen", "abba")
        assert not edge.is_self_pair

    def test_rejects_raw_sentinel(self):
        """The raw -1 sentinel shall never be stored as a closeness."""
        with pytest.raises(ValidationError):
            ClosenessEdge(item_a="queen", item_b="abba", closeness=-1)

    def test_self_pair(self):
        """is_self_pair shall be True when both ids match."""
        assert ClosenessEdge(item_a="queen", item_b="queen").is_self_pair


class TestClosenessTable:
    """Tests for ClosenessTable."""

    def test_mapping_like_access(self, make_table):
        """The table shall support len, iteration, membership and lookup."""
        table = make_table(("a", "b", 0.5), ("b", "a", None))

        assert len(table) == 2
        assert [edge.pair for edge in table] == [("a", "b"), ("b", "a")]
        assert ("a", "b") in table
        assert ("a", "c") not in table
        assert table.get("a", "b").closeness == 0.5
        assert table.get("a", "c") is None
        assert table.pairs() == [("a", "b"), ("b", "a")]
        assert table.item_ids() == {"a", "b"}

    def test_rejects_duplicate_pairs(self, make_table):
        """Constructing a table with a repeated pair shall fail."""
        with pytest.raises(ValueError, match="duplicate"):
            make_table(("a", "b", 0.5), ("a", "b", 0.9))

    def test_without_self_pairs(self, make_table):
        """without_self_pairs shall drop only edges from an item to itself."""
        table = make_table(("a", "a", None), ("a", "b", 1.0), ("b", "b", None))

        assert table.without_self_pairs().pairs() == [("a", "b")]
        assert len(table) == 3

    def test_to_records_uses_none_for_unknown(self, make_table):
        """to_records shall emit the three columns, with None for unknown."""
        table = make_table(("a", "b", 0.5), ("b", "a", None))

        assert table.to_records() == [
            {"item_a": "a", "item_b": "b", "closeness": 0.5},
            {"item_a": "b", "item_b": "a", "closeness": None},
        ]

    def test_equality(self, make_table):
        """Tables with the same edges in the same order shall be equal."""
        assert make_table(("a", "b", 0.5)) == make_table(("a", "b", 0.5))
        assert make_table(("a", "b", 0.5)) != make_table(("a", "b", 0.6))
        assert ClosenessTable.empty() == ClosenessTable()


class TestFromRecords:
    """Tests for ClosenessTable.from_records."""

    def test_round_trips_records(self, make_table):
        """from_records shall rebuild the table to_records produced."""
        table = make_table(("a", "b", 0.5), ("b", "a", None))

        assert ClosenessTable.from_records(table.to_records()) == table

    def test_converts_sentinel_and_blank_to_none(self):
        """A raw -1, "-1" or empty closeness shall become None."""
        table = ClosenessTable.from_records(
            [
                {"item_a": "a", "item_b": "b", "closeness": -1},
                {"item_a": "a", "item_b": "c", "closeness": "-1"},
                {"item_a": "a", "item_b": "d", "closeness": ""},
                {"item_a": "a", "item_b": "e", "closeness": "2.5"},
            ]
        )

        assert [edge.closeness for edge in table] == [None, None, None, 2.5]

    def test_closeness_column_is_optional(self):
        """Rows without a closeness column shall get None."""
        table = ClosenessTable.from_records([{"item_a": "a", "item_b": "b"}])

        assert table.get("a", "b").closeness is None

    def test_keeps_first_of_duplicate_rows(self):
        """Duplicate pairs in records shall keep the first row."""
        table = ClosenessTable.from_records(
            [
                {"item_a": "a", "item_b": "b", "closeness": 0.5},
                {"item_a": "a", "item_b": "b", "closeness": 0.9},
            ]
        )

        assert len(table) == 1
        assert table.get("a", "b").closeness == 0.5

    def test_missing_key_column_raises_schema_error(self):
        """A row without item_a or item_b shall raise SchemaError."""
        records = [
            {"item_a": "a", "item_b": "b", "closeness": 0.5},
            {"band_a": "a", "item_b": "c", "closeness": 0.5},
        ]

        with pytest.raises(SchemaError) as exc_info:
            ClosenessTable.from_records(records)

        assert exc_info.value.missing_columns == ["item_a"]
        assert exc_info.value.row_index == 1
