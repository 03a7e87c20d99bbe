"""
Codec for SQL ``CREATE TABLE`` / ``INSERT`` scripts.

Serializing writes one ``VARCHAR(255)`` column per header and one INSERT
per row.  Parsing is a small hand-written reader, not a SQL engine:

  * column names come from ``CREATE TABLE name (...)`` when present
    (constraint lines such as ``PRIMARY KEY (...)`` are skipped, and a
    quoted name may contain spaces), else from the column list of each
    ``INSERT INTO name (cols)``;
  * ``VALUES (...), (...)`` tuples are split with a quote-aware scanner
    that understands ``''`` doubling and backslash escapes;
  * ``NULL`` becomes an empty cell.

A script with no INSERT ... VALUES at all is either empty
(``EmptyResultError``) or made of statements this reader does not
evaluate, such as ``INSERT ... SELECT`` (``NotImplementedConversionError``).
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

import config
from dto.table import Table
from errors import EmptyResultError, MalformedInputError, NotImplementedConversionError
from formats.base import Codec
from utils.escaping import escape_sql_literal, sanitize_sql_identifier

logger = logging.getLogger(__name__)

_IDENT = r"""[`"\[]?[\w.$]+[`"\]]?"""
_CREATE_TABLE = re.compile(
    rf"CREATE\s+(?:TEMPORARY\s+)?TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?({_IDENT})\s*\(",
    re.IGNORECASE,
)
_INSERT_VALUES = re.compile(
    rf"INSERT\s+(?:IGNORE\s+)?INTO\s+({_IDENT})\s*(?:\(([^)]*)\))?\s*VALUES\s*",
    re.IGNORECASE,
)
_OTHER_STATEMENT = re.compile(
    r"\b(SELECT|UPDATE|DELETE|WITH|MERGE|REPLACE|INSERT)\b", re.IGNORECASE
)
_LINE_COMMENT = re.compile(r"^\s*--.*$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")

_CONSTRAINT_KEYWORDS = {"PRIMARY", "FOREIGN", "UNIQUE", "KEY", "INDEX", "CONSTRAINT", "CHECK"}
_LEADING_IDENT = re.compile(r"""\s*(`[^`]*`|"[^"]*"|\[[^\]]*\]|\S+)""")

_BACKSLASH_ESCAPES = {
    "0": "\x00",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "Z": "\x1a",
    "b": "\b",
}


# ---------------------------------------------------------------------------
# Scanning helpers
# ---------------------------------------------------------------------------


def _strip_identifier(name: str) -> str:
    return name.strip().strip('`"[]')


def _matching_paren(text: str, start: int) -> int:
    """Index of the ``)`` closing the ``(`` at *start*, skipping quoted text."""
    depth = 0
    quote: Optional[str] = None
    i = start
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise MalformedInputError(f"Unbalanced parentheses in SQL near offset {start}")


def split_top_level(text: str) -> List[str]:
    """Split on commas that are outside quotes and nested parentheses."""
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    quote: Optional[str] = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            current.append(ch)
            if ch == "\\" and i + 1 < len(text):
                current.append(text[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
            current.append(ch)
        elif ch == "(":
            depth += 1
            current.append(ch)
        elif ch == ")":
            depth -= 1
            current.append(ch)
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1
    if quote:
        raise MalformedInputError("Unterminated string literal in SQL VALUES")
    tail = "".join(current).strip()
    if tail or parts:
        parts.append(tail)
    return parts


def _decode_value(token: str) -> str:
    """Turn one VALUES token into a cell string."""
    if not token or token.upper() == "NULL":
        return ""
    quote = token[0]
    if quote not in ("'", '"') or len(token) < 2 or token[-1] != quote:
        return token

    body = token[1:-1]
    out: List[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(_BACKSLASH_ESCAPES.get(nxt, nxt))
            i += 2
        elif ch == quote and i + 1 < len(body) and body[i + 1] == quote:
            out.append(quote)
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _create_table_columns(sql: str) -> List[str]:
    match = _CREATE_TABLE.search(sql)
    if not match:
        return []
    open_paren = match.end() - 1
    body = sql[open_paren + 1 : _matching_paren(sql, open_paren)]

    columns: List[str] = []
    for definition in split_top_level(body):
        if not definition:
            continue
        first = _LEADING_IDENT.match(definition).group(1)
        if first.upper() in _CONSTRAINT_KEYWORDS:
            continue
        columns.append(_strip_identifier(first))
    return columns


def _value_tuples(sql: str, start: int) -> Tuple[List[List[str]], int]:
    """Read ``(...), (...)`` from *start*; return the tuples and end offset."""
    tuples: List[List[str]] = []
    i = start
    while True:
        while i < len(sql) and sql[i].isspace():
            i += 1
        if i >= len(sql) or sql[i] != "(":
            break
        close = _matching_paren(sql, i)
        tuples.append([_decode_value(token) for token in split_top_level(sql[i + 1 : close])])
        i = close + 1
        while i < len(sql) and sql[i].isspace():
            i += 1
        if i < len(sql) and sql[i] == ",":
            i += 1
            continue
        break
    return tuples, i


def _unique_identifiers(headers: List[str]) -> List[str]:
    seen: Dict[str, int] = {}
    out: List[str] = []
    for header in headers:
        ident = sanitize_sql_identifier(header)
        if ident in seen:
            seen[ident] += 1
            ident = f"{ident}_{seen[ident]}"
        seen.setdefault(ident, 1)
        out.append(ident)
    return out


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


class SqlCodec(Codec):

    format_id = "sql"

    def __init__(self, table_name: Optional[str] = None) -> None:
        self.table_name = table_name or config.SQL_TABLE_NAME

    def parse(self, text: str) -> Table:
        sql = _BLOCK_COMMENT.sub("", _LINE_COMMENT.sub("", text))
        headers = _create_table_columns(sql)
        rows: List[Dict[str, str]] = []

        for insert in _INSERT_VALUES.finditer(sql):
            if insert.group(2) is not None:
                columns = [_strip_identifier(c) for c in split_top_level(insert.group(2))]
            else:
                columns = list(headers)
            for name in columns:
                if name not in headers:
                    headers.append(name)

            tuples, _ = _value_tuples(sql, insert.end())
            for values in tuples:
                row: Dict[str, str] = {}
                for index, value in enumerate(values):
                    if index < len(columns):
                        name = columns[index]
                    else:
                        name = f"column_{index}"
                        if name not in headers:
                            headers.append(name)
                    row[name] = value
                rows.append(row)

        if not rows:
            if _OTHER_STATEMENT.search(sql):
                raise NotImplementedConversionError(
                    "Only INSERT ... VALUES statements can be converted from SQL"
                )
            raise EmptyResultError("No INSERT statements found in SQL data")

        logger.debug("sql: %d row(s) across %d column(s)", len(rows), len(headers))
        return Table(headers=headers, rows=rows)

    def serialize(self, table: Table) -> str:
        if not table.headers:
            return ""
        name = sanitize_sql_identifier(self.table_name)
        columns = _unique_identifiers(table.headers)

        lines = [f"CREATE TABLE {name} ("]
        lines.append(",\n".join(f"  {col} VARCHAR(255)" for col in columns))
        lines.append(");")
        lines.append("")

        column_list = ", ".join(columns)
        for row in table.rows:
            values = ", ".join(
                f"'{escape_sql_literal(table.cell(row, h))}'" for h in table.headers
            )
            lines.append(f"INSERT INTO {name} ({column_list}) VALUES ({values});")
        return "\n".join(lines)
