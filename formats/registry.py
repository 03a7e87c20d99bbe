"""
Format identifier lookup.

Identifiers are matched case-insensitively and aliases are folded onto
their canonical codec before dispatch:

    table          -> html
    ndjson, lines  -> jsonl
"""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from errors import UnsupportedFormatError
from formats.base import Codec
from formats.csv_codec import CsvCodec
from formats.delimited import ExcelCodec, TsvCodec, TxtCodec
from formats.html_codec import HtmlCodec
from formats.ics_codec import IcsCodec
from formats.json_codec import JsonCodec, JsonLinesCodec
from formats.kml_codec import KmlCodec
from formats.markdown_codec import MarkdownCodec
from formats.sql_codec import SqlCodec
from formats.toml_codec import TomlCodec
from formats.xml_codec import XmlCodec
from formats.yaml_codec import YamlCodec

_CODECS: Dict[str, Type[Codec]] = {
    "csv": CsvCodec,
    "json": JsonCodec,
    "xml": XmlCodec,
    "yaml": YamlCodec,
    "html": HtmlCodec,
    "tsv": TsvCodec,
    "kml": KmlCodec,
    "txt": TxtCodec,
    "markdown": MarkdownCodec,
    "jsonl": JsonLinesCodec,
    "ics": IcsCodec,
    "toml": TomlCodec,
    "excel": ExcelCodec,
    "sql": SqlCodec,
}

ALIASES: Dict[str, str] = {
    "table": "html",
    "ndjson": "jsonl",
    "lines": "jsonl",
}

# Every identifier a caller may pass, aliases included.
SUPPORTED_FORMATS: List[str] = [
    "csv", "json", "xml", "yaml", "html", "table", "tsv", "kml", "txt",
    "markdown", "jsonl", "ndjson", "lines", "ics", "toml", "excel", "sql",
]


def canonical_format(format_id: str, direction: str = "") -> str:
    """Lower-case *format_id* and resolve aliases, or raise UnsupportedFormatError."""
    key = (format_id or "").strip().lower()
    key = ALIASES.get(key, key)
    if key not in _CODECS:
        raise UnsupportedFormatError(format_id, direction)
    return key


def get_codec(format_id: str, direction: str = "", sql_table_name: Optional[str] = None) -> Codec:
    """Instantiate the codec for an identifier or alias."""
    key = canonical_format(format_id, direction)
    if key == "sql":
        return SqlCodec(table_name=sql_table_name)
    return _CODECS[key]()
