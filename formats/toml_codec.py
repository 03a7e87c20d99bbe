"""
Codec for TOML arrays of tables.

    [[records]]
    name = "John Doe"
    age = "30"

Only string pairs inside ``[[records]]`` blocks are read; any other table
header ends the current record.  Every value is written as a basic string.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from dto.table import Table
from errors import EmptyResultError
from formats.base import Codec

logger = logging.getLogger(__name__)

RECORD_HEADER = "[[records]]"

_TABLE_HEADER = re.compile(r"^\[\[?\s*([^\]]*?)\s*\]\]?\s*(?:#.*)?$")
_PAIR = re.compile(
    r"""^("(?:[^"\\]|\\.)*"|'[^']*'|[A-Za-z0-9_\-]+)\s*=\s*"""
    r"""(?:"((?:[^"\\]|\\.)*)"|'([^']*)')\s*(?:\#.*)?$"""
)
_BARE_KEY = re.compile(r"^[A-Za-z0-9_\-]+$")
_ESCAPE = re.compile(r"\\(u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|.)")

_SIMPLE_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}


def _decode_basic(text: str) -> str:
    def _replace(match: re.Match) -> str:
        code = match.group(1)
        if code[0] in "uU" and len(code) > 1:
            return chr(int(code[1:], 16))
        return _SIMPLE_ESCAPES.get(code, code)

    return _ESCAPE.sub(_replace, text)


def _encode_basic(text: str) -> str:
    out: List[str] = []
    for ch in text:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return "".join(out)


def _decode_key(raw: str) -> str:
    if raw.startswith('"'):
        return _decode_basic(raw[1:-1])
    if raw.startswith("'"):
        return raw[1:-1]
    return raw


def _encode_key(key: str) -> str:
    return key if _BARE_KEY.match(key) else f'"{_encode_basic(key)}"'


class TomlCodec(Codec):

    format_id = "toml"

    def parse(self, text: str) -> Table:
        records: List[Dict[str, str]] = []
        current: Optional[Dict[str, str]] = None
        ignored = 0

        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            header = _TABLE_HEADER.match(line)
            if header:
                if line.startswith("[[") and header.group(1) == "records":
                    current = {}
                    records.append(current)
                else:
                    current = None
                continue

            if current is None:
                continue
            pair = _PAIR.match(line)
            if not pair:
                ignored += 1
                continue
            key = _decode_key(pair.group(1))
            if pair.group(2) is not None:
                current[key] = _decode_basic(pair.group(2))
            else:
                current[key] = pair.group(3)

        if ignored:
            logger.debug("toml: ignored %d non-string line(s) inside records", ignored)
        if not records:
            raise EmptyResultError("No [[records]] tables found in TOML data")
        return Table.from_records(records, source="toml")

    def serialize(self, table: Table) -> str:
        blocks: List[str] = []
        for row in table.rows:
            lines = [RECORD_HEADER]
            for header in table.headers:
                lines.append(f'{_encode_key(header)} = "{_encode_basic(table.cell(row, header))}"')
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks) + ("\n" if blocks else "")
