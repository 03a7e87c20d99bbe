"""Tests for column extraction and row filtering."""

import pytest
from pydantic import ValidationError

from dto.filters import FilterSpec
from errors import ColumnNotFoundError, MalformedInputError
from extraction import extract_columns, matches_filter

CITIES = "name,age,city\nJohn,30,NYC\nJane,25,LA\nJoan,30,Boston"


class TestExtractColumns:
    """Projection onto requested columns."""

    def test_requested_order(self):
        assert extract_columns(CITIES, ["city", "name"]) == "city,name\nNYC,John\nLA,Jane\nBoston,Joan"

    def test_deterministic(self):
        assert extract_columns(CITIES, ["age"]) == extract_columns(CITIES, ["age"])

    def test_missing_columns_all_reported(self):
        """Every unknown name is listed at once, in request order."""
        with pytest.raises(ColumnNotFoundError) as excinfo:
            extract_columns(CITIES, ["nonexistent", "name", "other"])
        assert excinfo.value.missing == ["nonexistent", "other"]
        assert excinfo.value.kind == "ColumnNotFound"
        assert '"nonexistent"' in str(excinfo.value) and '"other"' in str(excinfo.value)

    def test_empty_column_list(self):
        assert extract_columns(CITIES, []) == ""

    def test_empty_column_list_still_validates_csv(self):
        with pytest.raises(MalformedInputError):
            extract_columns('a,b\n"unterminated', [])

    def test_header_written_when_no_rows_survive(self):
        filters = [FilterSpec(column="city", value="Paris")]
        assert extract_columns(CITIES, ["name"], filters) == "name"


class TestFilters:
    """Row predicates applied before projection."""

    def test_equals(self):
        filters = [FilterSpec(column="age", value="30", operator="equals")]
        assert extract_columns(CITIES, ["name", "age"], filters) == "name,age\nJohn,30\nJoan,30"

    def test_dict_filters_default_to_equals(self):
        assert extract_columns(CITIES, ["name"], [{"column": "city", "value": "LA"}]) == "name\nJane"

    @pytest.mark.parametrize(
        "operator, value, expected",
        [
            ("contains", "o", "name\nJohn\nJoan"),
            ("startsWith", "Ja", "name\nJane"),
            ("endsWith", "n", "name\nJohn\nJoan"),
        ],
    )
    def test_string_operators(self, operator, value, expected):
        filters = [{"column": "name", "value": value, "operator": operator}]
        assert extract_columns(CITIES, ["name"], filters) == expected

    def test_filters_are_anded(self):
        filters = [
            {"column": "age", "value": "30"},
            {"column": "city", "value": "Bos", "operator": "startsWith"},
        ]
        assert extract_columns(CITIES, ["name"], filters) == "name\nJoan"

    def test_filter_on_unknown_column_compares_empty(self):
        """A cell that does not exist compares as ""."""
        filters = [{"column": "zip", "value": ""}]
        assert extract_columns(CITIES, ["name"], filters) == "name\nJohn\nJane\nJoan"

    def test_unknown_operator_rejected(self):
        with pytest.raises(ValidationError):
            extract_columns(CITIES, ["name"], [{"column": "name", "value": "x", "operator": "like"}])

    def test_matches_filter_is_case_sensitive(self):
        assert not matches_filter({"name": "John"}, FilterSpec(column="name", value="john"))
