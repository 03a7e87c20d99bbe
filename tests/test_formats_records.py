"""Tests for the record-shaped codecs: JSON, JSON Lines, YAML and TOML."""

import json
import logging

import pytest

from dto.table import Table
from errors import EmptyResultError, MalformedInputError
from formats.json_codec import JsonCodec, JsonLinesCodec
from formats.toml_codec import TomlCodec
from formats.yaml_codec import YamlCodec

# ===========================================================================
# JSON
# ===========================================================================


class TestJson:
    """Array-of-objects JSON."""

    def test_single_object_is_one_row(self):
        """A lone object is treated as a one-element array."""
        table = JsonCodec().parse('{"name": "John", "age": 30}')
        assert table.headers == ["name", "age"]
        assert table.rows == [{"name": "John", "age": "30"}]

    def test_non_string_values_are_stringified(self):
        table = JsonCodec().parse('[{"a": true, "b": null, "c": 1.5, "d": [1, 2]}]')
        assert table.rows[0] == {"a": "true", "b": "", "c": "1.5", "d": "[1,2]"}

    def test_heterogeneous_rows_keep_first_keys(self, caplog):
        """Keys missing from the first object are dropped and reported."""
        codec = JsonCodec()
        with caplog.at_level(logging.WARNING):
            csv_text = codec.to_csv('[{"a": "1"}, {"a": "2", "b": "3"}]')
        assert csv_text == "a\n1\n2"
        assert "b" in caplog.text

    def test_invalid_json(self):
        with pytest.raises(MalformedInputError):
            JsonCodec().parse("[{")

    def test_array_of_scalars_is_malformed(self):
        """Items must be objects."""
        with pytest.raises(MalformedInputError, match="expected an object"):
            JsonCodec().parse("[1, 2]")

    def test_serialize_is_pretty_printed(self):
        table = Table(headers=["name"], rows=[{"name": "John"}])
        assert JsonCodec().serialize(table) == '[\n  {\n    "name": "John"\n  }\n]'

    def test_unicode_is_not_escaped(self):
        table = Table(headers=["text"], rows=[{"text": "你好世界"}])
        assert "你好世界" in JsonCodec().serialize(table)


# ===========================================================================
# JSON Lines
# ===========================================================================


class TestJsonLines:
    """One JSON object per line; bad lines are tolerated."""

    def test_invalid_lines_skipped(self, caplog):
        """Invalid JSON and non-objects are skipped; valid objects survive."""
        text = '{"a": "1"}\ninvalid\n{"a": "2"}\n[1, 2]\n\n'
        with caplog.at_level(logging.WARNING):
            table = JsonLinesCodec().parse(text)
        assert table.rows == [{"a": "1"}, {"a": "2"}]
        assert "skipped 2 line(s)" in caplog.text

    def test_only_invalid_lines_is_empty_result(self):
        with pytest.raises(EmptyResultError) as excinfo:
            JsonLinesCodec().parse("invalid")
        assert excinfo.value.kind == "EmptyResult"

    def test_serialize_compact_lines(self):
        table = Table(
            headers=["name", "age"],
            rows=[{"name": "John", "age": "30"}, {"name": "Jane", "age": "25"}],
        )
        text = JsonLinesCodec().serialize(table)
        assert text.split("\n") == ['{"name":"John","age":"30"}', '{"name":"Jane","age":"25"}']

    def test_numbers_become_strings(self):
        table = JsonLinesCodec().parse('{"name":"John","age":30}\n{"name":"Jane","age":25}')
        assert table.column("age") == ["30", "25"]


# ===========================================================================
# YAML
# ===========================================================================


class TestYaml:
    """Flat list-of-maps YAML subset."""

    def test_serialize_shape(self):
        table = Table(headers=["name", "age"], rows=[{"name": "John Doe", "age": "30"}])
        assert YamlCodec().serialize(table) == '- record_1:\n    name: "John Doe"\n    age: "30"\n'

    def test_serialize_escapes_quotes_and_newlines(self):
        table = Table(headers=["note"], rows=[{"note": 'say "hi"\nbye'}])
        assert 'note: "say \\"hi\\"\\nbye"' in YamlCodec().serialize(table)

    def test_parse_serialized_form(self):
        """The record label line is not stored as a cell."""
        text = '- record_1:\n    name: "John \\"JD\\" Doe"\n    city: \'O\'\'Hare\'\n'
        table = YamlCodec().parse(text)
        assert table.headers == ["name", "city"]
        assert table.rows == [{"name": 'John "JD" Doe', "city": "O'Hare"}]

    def test_parse_inline_pairs(self):
        """'- key: value' starts a row and stores its pair."""
        table = YamlCodec().parse("- name: John\n  age: 30\n- name: Jane\n  age: 25\n")
        assert table.rows == [{"name": "John", "age": "30"}, {"name": "Jane", "age": "25"}]

    def test_value_split_on_first_colon(self):
        table = YamlCodec().parse("- time: 10:30\n")
        assert table.rows == [{"time": "10:30"}]

    def test_comments_and_markers_skipped(self):
        text = "---\n# people\n- name: Ann\n\n  # inline note\n  age: 41\n...\n"
        assert YamlCodec().parse(text).rows == [{"name": "Ann", "age": "41"}]

    def test_empty_document(self):
        assert YamlCodec().parse("").is_empty

    def test_awkward_keys_are_quoted(self):
        """Keys with ':' or '#', or a leading '-', are written double-quoted."""
        table = Table(headers=["a:b", "#tag", "-x", "c"], rows=[{"a:b": "1", "#tag": "2", "-x": "3", "c": "4"}])
        text = YamlCodec().serialize(table)
        assert '    "a:b": "1"' in text
        assert '    "#tag": "2"' in text
        assert '    "-x": "3"' in text
        assert '    c: "4"' in text

    def test_awkward_keys_round_trip(self):
        """Quoted keys parse back to the original headers and cells."""
        table = Table(headers=["a:b", "#tag", "-x", "c"], rows=[{"a:b": "1", "#tag": "2", "-x": "3", "c": "4"}])
        parsed = YamlCodec().parse(YamlCodec().serialize(table))
        assert parsed.headers == table.headers
        assert parsed.rows == table.rows

    def test_single_quoted_key_with_colon(self):
        table = YamlCodec().parse("- 'it''s: here': yes\n")
        assert table.rows == [{"it's: here": "yes"}]


# ===========================================================================
# TOML
# ===========================================================================


class TestToml:
    """[[records]] arrays of tables."""

    def test_serialize_shape(self, sample_csv):
        toml_text = TomlCodec().from_csv(sample_csv)
        assert toml_text.startswith("[[records]]\n")
        assert 'name = "John Doe"' in toml_text
        assert 'age = "30"' in toml_text
        assert toml_text.count("[[records]]") == 3

    def test_non_bare_keys_are_quoted(self):
        table = Table(headers=["first name"], rows=[{"first name": "Ann"}])
        assert '"first name" = "Ann"' in TomlCodec().serialize(table)

    def test_escapes_survive_round_trip(self):
        codec = TomlCodec()
        table = Table(headers=["note"], rows=[{"note": 'say "hi"\n\tC:\\dir'}])
        assert codec.parse(codec.serialize(table)).rows == table.rows

    def test_other_tables_and_non_strings_ignored(self):
        text = (
            'title = "x"\n'
            "[[records]]\n"
            'name = "A"\n'
            "count = 3\n"
            "[meta]\n"
            'name = "ignored"\n'
            "[[records]]\n"
            "name = 'B'  # literal string\n"
        )
        table = TomlCodec().parse(text)
        assert table.rows == [{"name": "A"}, {"name": "B"}]

    def test_unicode_escape(self):
        table = TomlCodec().parse('[[records]]\nsym = "\\u00e9"\n')
        assert table.rows == [{"sym": "é"}]

    def test_no_records_is_empty_result(self):
        with pytest.raises(EmptyResultError):
            TomlCodec().parse('title = "nothing here"\n')
