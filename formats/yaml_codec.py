"""
Codec for a flat list-of-maps subset of YAML.

Serialized shape::

    - record_1:
        name: "John Doe"
        age: "30"

Parsing is line based, not a general YAML parser: a ``- `` line starts a
new row, ``key: value`` lines add cells to the current row, comments,
blank lines and document markers are skipped.  A ``- key:`` line with no
value is a row label (``record_1:`` above) and is not stored; ``- key:
value`` stores its pair.  Keys that would not survive this scan (a
``:`` or ``#`` inside, a leading ``-`` or quote) are written
double-quoted.  Anchors, multi-line scalars and nested maps are not
understood.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from dto.table import Table
from formats.base import Codec

_DOUBLE_QUOTED_ESCAPE = re.compile(r'\\(["\\nt])')
_ESCAPE_CHARS = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}
_DOCUMENT_MARKERS = ("---", "...")
_KEY_NEEDS_QUOTES = re.compile(r"""[:#\n\t]|^[-\s"']|\s$""")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _DOUBLE_QUOTED_ESCAPE.sub(lambda m: _ESCAPE_CHARS[m.group(1)], value[1:-1])
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    return value.strip("\"'")


def _closing_quote(text: str) -> Optional[int]:
    """Index of the quote closing the scalar that opens *text*, if any."""
    quote = text[0]
    i = 1
    while i < len(text):
        char = text[i]
        if quote == '"' and char == "\\":
            i += 2
            continue
        if char == quote:
            if quote == "'" and text[i + 1 : i + 2] == "'":
                i += 2
                continue
            return i
        i += 1
    return None


def _split_pair(text: str) -> Optional[Tuple[str, str]]:
    # A quoted key may itself contain ':'.
    if text[:1] in ('"', "'"):
        end = _closing_quote(text)
        if end is not None:
            rest = text[end + 1 :].lstrip()
            if rest.startswith(":"):
                return _unquote(text[: end + 1]), _unquote(rest[1:].strip())
    if ":" not in text:
        return None
    key, _, value = text.partition(":")
    return _unquote(key.strip()), _unquote(value.strip())


def _quote(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _key(name: str) -> str:
    if not name or _KEY_NEEDS_QUOTES.search(name):
        return _quote(name)
    return name


class YamlCodec(Codec):

    format_id = "yaml"

    def parse(self, text: str) -> Table:
        rows: List[Dict[str, str]] = []
        current: Dict[str, str] = {}

        for line in text.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or stripped in _DOCUMENT_MARKERS:
                continue

            if stripped == "-" or stripped.startswith("- "):
                if current:
                    rows.append(current)
                current = {}
                pair = _split_pair(stripped[1:].strip())
                if pair and pair[1]:
                    current[pair[0]] = pair[1]
                continue

            pair = _split_pair(stripped)
            if pair:
                current[pair[0]] = pair[1]

        if current:
            rows.append(current)
        return Table.from_records(rows, source="yaml")

    def serialize(self, table: Table) -> str:
        lines: List[str] = []
        for index, record in enumerate(table.records(), start=1):
            lines.append(f"- record_{index}:")
            for key, value in record.items():
                lines.append(f"    {_key(key)}: {_quote(value)}")
        return "\n".join(lines) + "\n" if lines else ""
