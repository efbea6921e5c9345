"""Tests for edge record extraction and weight parsing."""
from __future__ import annotations

import math

import pytest

from snalab.graph.rows import EdgeRecord, EdgeRecords, extract_edge_records, node_label, parse_weight


@pytest.mark.unit
class TestParseWeight:
    def test_blank_defaults_to_one(self):
        assert parse_weight("") == 1.0
        assert parse_weight(None) == 1.0

    def test_numeric_string(self):
        assert parse_weight("3.5") == 3.5

    def test_numbers_pass_through(self):
        assert parse_weight(2) == 2.0
        assert parse_weight(0.25) == 0.25

    def test_leading_numeric_prefix(self):
        assert parse_weight("3.5kg") == 3.5
        assert parse_weight("  -2 ") == -2.0
        assert parse_weight(".5") == 0.5
        assert parse_weight("1e2") == 100.0

    def test_non_numeric_text_defaults(self):
        assert parse_weight("heavy") == 1.0

    def test_non_finite_defaults(self):
        assert parse_weight(math.nan) == 1.0
        assert parse_weight(math.inf) == 1.0

    def test_zero_is_kept(self):
        assert parse_weight("0") == 0.0

    def test_bool_defaults(self):
        assert parse_weight(True) == 1.0


@pytest.mark.unit
def test_node_label_normalizes_whole_floats():
    assert node_label(2.0) == "2"
    assert node_label(2.5) == "2.5"
    assert node_label("  Alice ") == "Alice"


@pytest.mark.unit
class TestExtractEdgeRecords:
    def test_blank_weight_defaults(self):
        records = list(extract_edge_records([["A", "B", ""]]))
        assert records == [EdgeRecord("A", "B", 1.0)]

    def test_string_weight(self):
        records = list(extract_edge_records([["A", "B", "3.5"]]))
        assert records[0].weight == 3.5

    def test_rows_missing_endpoints_are_dropped(self):
        rows = [["A", "B", 2], ["", "C", 1], ["D", "", 5]]
        assert list(extract_edge_records(rows)) == [EdgeRecord("A", "B", 2.0)]

    def test_short_and_non_list_rows_are_dropped(self):
        rows = [["A", "B"], "A,B,1", None, ["C", "D", 1]]
        assert list(extract_edge_records(rows)) == [EdgeRecord("C", "D", 1.0)]

    def test_whitespace_only_labels_are_dropped(self):
        assert list(extract_edge_records([["  ", "B", 1]])) == []

    def test_header_row_is_skipped(self, triangle_rows):
        records = list(extract_edge_records(triangle_rows))
        assert [r.source for r in records] == ["Alice", "Bob", "Alice"]
        assert records[0].weight == 2.0

    def test_reordered_columns(self):
        rows = [["Weight", "Target", "Source"], [4, "B", "A"]]
        assert list(extract_edge_records(rows)) == [EdgeRecord("A", "B", 4.0)]

    def test_numeric_node_ids_become_strings(self):
        records = list(extract_edge_records([[1, 2.0, 1]]))
        assert records == [EdgeRecord("1", "2", 1.0)]

    def test_empty_input(self):
        assert list(extract_edge_records([])) == []


@pytest.mark.unit
class TestEdgeRecords:
    def test_is_restartable(self, triangle_rows):
        records = EdgeRecords(triangle_rows)
        assert len(records) == 3
        assert list(records) == list(records)
        assert records.layout.has_header

    def test_bool_reflects_usable_rows(self):
        assert not EdgeRecords([["", "", ""]])
        assert EdgeRecords([["A", "B", 1]])

    def test_as_row(self):
        assert EdgeRecord("A", "B", 2.0).as_row() == ["A", "B", 2.0]
