"""Unit tests for the CSV hub: reading, writing and the Table model.

Tests cover:
  - read_rows / parse_csv: quoting, blank lines, malformed input
  - generate_csv: quoting and the empty-rows rule
  - Table: value stringification, heterogeneous records, helpers
"""

import logging

import pytest

from dto.table import Table, stringify_value
from errors import MalformedInputError
from utils.csv_text import generate_csv, parse_csv, read_rows

# ===========================================================================
# Parsing
# ===========================================================================


class TestParseCsv:
    """Tests for CSV text -> Table."""

    def test_header_and_rows(self, sample_csv):
        """The first line is the header list; later lines map onto it."""
        table = parse_csv(sample_csv)
        assert table.headers == ["name", "age", "email"]
        assert len(table.rows) == 3
        assert table.rows[0] == {"name": "John Doe", "age": "30", "email": "john@example.com"}

    def test_values_are_never_typed(self):
        """Numbers and booleans stay strings."""
        table = parse_csv("n,flag\n007,true")
        assert table.rows[0] == {"n": "007", "flag": "true"}

    def test_quoted_fields(self):
        """Quoted fields may hold commas, doubled quotes and newlines."""
        text = 'text,note\n"contains ""quotes"" and, commas","line1\nline2"'
        table = parse_csv(text)
        assert table.rows[0]["text"] == 'contains "quotes" and, commas'
        assert table.rows[0]["note"] == "line1\nline2"

    def test_unterminated_quote_is_malformed(self):
        """An opening quote that never closes is a MalformedInputError."""
        with pytest.raises(MalformedInputError) as excinfo:
            parse_csv('a,b\n"oops,1')
        assert excinfo.value.kind == "MalformedInput"

    def test_empty_input(self):
        """Empty text gives an empty Table, not an error."""
        table = parse_csv("")
        assert table.headers == []
        assert table.rows == []

    def test_blank_and_all_empty_lines_skipped(self):
        """Blank lines and rows whose cells are all empty are dropped."""
        table = parse_csv("a,b\n\n1,2\n,\n")
        assert table.rows == [{"a": "1", "b": "2"}]

    def test_short_row_is_partial(self):
        """A row with fewer fields than headers lacks the trailing cells."""
        table = parse_csv("a,b\n1")
        assert table.rows == [{"a": "1"}]
        assert table.records() == [{"a": "1", "b": ""}]

    def test_extra_fields_dropped_with_warning(self, caplog):
        """Fields beyond the header count are dropped and reported."""
        with caplog.at_level(logging.WARNING):
            table = parse_csv("a\n1,2")
        assert table.rows == [{"a": "1"}]
        assert "extra fields dropped" in caplog.text

    def test_read_rows_with_tab_delimiter(self):
        """read_rows honours a custom delimiter."""
        assert read_rows("a\tb\n1\t2", delimiter="\t") == [["a", "b"], ["1", "2"]]


# ===========================================================================
# Writing
# ===========================================================================


class TestGenerateCsv:
    """Tests for Table -> CSV text."""

    def test_quotes_only_when_needed(self):
        """Fields with commas or quotes are quoted and quotes doubled."""
        table = Table(
            headers=["text", "n"],
            rows=[{"text": 'contains "quotes" and, commas', "n": "1"}],
        )
        assert generate_csv(table) == 'text,n\n"contains ""quotes"" and, commas",1'

    def test_no_trailing_newline(self, sample_csv):
        """Round-tripping a simple document is byte-identical."""
        assert generate_csv(parse_csv(sample_csv)) == sample_csv

    def test_headers_without_rows_give_empty_string(self):
        """A table with headers but no rows serializes to ""."""
        assert generate_csv(Table(headers=["a", "b"])) == ""

    def test_missing_cells_written_empty(self):
        """Partial rows are padded with empty cells."""
        table = Table(headers=["a", "b"], rows=[{"b": "2"}])
        assert generate_csv(table) == "a,b\n,2"


# ===========================================================================
# Table model
# ===========================================================================


class TestTable:
    """Tests for the canonical Table model."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, ""),
            ("x", "x"),
            (True, "true"),
            (False, "false"),
            (30, "30"),
            (1.5, "1.5"),
            ({"k": 1}, '{"k":1}'),
            ([1, 2], "[1,2]"),
        ],
    )
    def test_stringify_value(self, value, expected):
        """Decoded JSON values become cell strings."""
        assert stringify_value(value) == expected

    def test_from_records_uses_first_record_keys(self, caplog):
        """Later-only keys are kept on rows but reported and excluded from headers."""
        with caplog.at_level(logging.WARNING):
            table = Table.from_records([{"a": 1}, {"a": 2, "b": 3}], source="json")
        assert table.headers == ["a"]
        assert table.extra_keys() == ["b"]
        assert "b" in caplog.text

    def test_from_records_empty(self):
        """No records gives an empty table."""
        assert Table.from_records([]).is_empty

    def test_column_and_cell(self):
        """Missing cells read as ""."""
        table = Table(headers=["a", "b"], rows=[{"a": "1"}, {"a": "2", "b": "x"}])
        assert table.column("b") == ["", "x"]
        assert Table.cell({"a": "1"}, "zzz") == ""
