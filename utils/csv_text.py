"""
Low-level CSV reading and writing shared by the CSV hub codec, the codec
base class and the extraction/transform utilities.

Parsing uses the stdlib ``csv`` reader in strict mode so an unterminated
quote (or stray text after a closing quote) is reported instead of being
silently absorbed.  The reader's per-field limit is raised to the accepted
input size so one large cell in an otherwise valid file still parses.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import List, Mapping, Optional, Sequence

import config
from dto.table import Table
from errors import MalformedInputError

logger = logging.getLogger(__name__)

csv.field_size_limit(max(config.MAX_INPUT_BYTES, 131072))


def read_rows(text: str, delimiter: str = ",") -> List[List[str]]:
    """
    Split delimited text into lists of fields.

    Blank lines and lines whose fields are all empty are skipped.
    """
    reader = csv.reader(io.StringIO(text), delimiter=delimiter, strict=True)
    out: List[List[str]] = []
    try:
        for fields in reader:
            if not any(field != "" for field in fields):
                continue
            out.append(fields)
    except csv.Error as exc:
        raise MalformedInputError(
            f"CSV parse error on line {reader.line_num}: {exc}"
        ) from exc
    return out


def rows_to_table(rows: Sequence[Sequence[str]], source: str = "csv") -> Table:
    """Turn header + data field lists into a Table (first list is headers)."""
    if not rows:
        return Table()

    headers = list(rows[0])
    records = []
    for line_no, fields in enumerate(rows[1:], start=2):
        if len(fields) > len(headers):
            logger.warning(
                "%s row %d has %d field(s) for %d header(s); extra fields dropped",
                source,
                line_no,
                len(fields),
                len(headers),
            )
        records.append(
            {header: fields[i] for i, header in enumerate(headers) if i < len(fields)}
        )
    return Table(headers=headers, rows=records)


def parse_csv(text: str) -> Table:
    """Parse CSV text with a header line into a Table; "" gives an empty Table."""
    return rows_to_table(read_rows(text), source="csv")


def write_rows(
    headers: Sequence[str],
    rows: Sequence[Mapping[str, str]],
    delimiter: str = ",",
    lineterminator: str = "\n",
) -> str:
    """Write a header line plus one line per row; no trailing newline."""
    buf = io.StringIO()
    writer = csv.writer(
        buf,
        delimiter=delimiter,
        lineterminator=lineterminator,
        quoting=csv.QUOTE_MINIMAL,
    )
    writer.writerow(headers)
    for row in rows:
        writer.writerow([row.get(header, "") for header in headers])
    return buf.getvalue()[: -len(lineterminator)]


def generate_csv(table: Table, headers: Optional[Sequence[str]] = None) -> str:
    """
    Serialize a Table to CSV.

    Returns "" when the table has no rows, even if it has headers.
    """
    if table.is_empty:
        return ""
    return write_rows(headers if headers is not None else table.headers, table.rows)
