"""
Row and header transforms on CSV text: clean-up, merge, split, sample,
paginate and search.  Cells stay strings throughout.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Dict, List, Optional, Sequence

from dto.reports import Page, TransformOptions
from dto.table import Table
from errors import ColumnNotFoundError
from utils.csv_text import generate_csv, parse_csv

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_NON_IDENT = re.compile(r"[^a-z0-9_]")


def normalize_headers(headers: Sequence[str]) -> List[str]:
    """``"  First Name! "`` -> ``"first_name"``."""
    return [
        _NON_IDENT.sub("", _WHITESPACE.sub("_", header.strip().lower()))
        for header in headers
    ]


def transform_csv_data(csv_data: str, options: Optional[TransformOptions] = None) -> str:
    options = options or TransformOptions()
    table = parse_csv(csv_data)
    rows = table.records()

    if options.trim_whitespace:
        rows = [{key: value.strip() for key, value in row.items()} for row in rows]

    if options.remove_empty_rows:
        rows = [row for row in rows if any(row.values())]

    if options.remove_duplicates:
        seen = set()
        unique: List[Dict[str, str]] = []
        for row in rows:
            key = tuple(row[h] for h in table.headers)
            if key in seen:
                continue
            seen.add(key)
            unique.append(row)
        if len(unique) != len(rows):
            logger.debug("transform: removed %d duplicate row(s)", len(rows) - len(unique))
        rows = unique

    headers = list(table.headers)
    if options.normalize_headers:
        renamed = normalize_headers(headers)
        rows = [{new: row[old] for old, new in zip(headers, renamed)} for row in rows]
        headers = renamed

    return generate_csv(Table(headers=headers, rows=rows))


def merge_csv_data(csv_list: Sequence[str]) -> str:
    """
    Concatenate the rows of several CSV documents.

    The header list is the union of all headers in first-seen order; rows
    lacking a column get an empty cell.
    """
    if not csv_list:
        return ""
    if len(csv_list) == 1:
        return csv_list[0]

    headers: List[str] = []
    rows: List[Dict[str, str]] = []
    for csv_data in csv_list:
        table = parse_csv(csv_data)
        headers.extend(h for h in table.headers if h not in headers)
        rows.extend(table.rows)
    return generate_csv(Table(headers=headers, rows=rows))


def split_csv_by_column(csv_data: str, column: str) -> Dict[str, str]:
    """Group rows by the value of *column*; returns ``{value: csv}``."""
    table = parse_csv(csv_data)
    if column not in table.headers:
        raise ColumnNotFoundError([column])

    groups: Dict[str, List[Dict[str, str]]] = {}
    for row in table.rows:
        groups.setdefault(table.cell(row, column), []).append(row)
    return {
        value: generate_csv(Table(headers=table.headers, rows=group_rows))
        for value, group_rows in groups.items()
    }


def sample_csv_data(csv_data: str, size: int = 100) -> str:
    """The first *size* rows."""
    table = parse_csv(csv_data)
    return generate_csv(Table(headers=table.headers, rows=table.rows[:size]))


def paginate_csv_data(csv_data: str, page: int = 1, page_size: int = 50) -> Page:
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    table = parse_csv(csv_data)
    start = (page - 1) * page_size
    rows = table.rows[start : start + page_size] if start >= 0 else []
    return Page(
        data=generate_csv(Table(headers=table.headers, rows=rows)),
        total_pages=math.ceil(len(table.rows) / page_size),
        current_page=page,
    )


def search_csv_data(
    csv_data: str, term: str, columns: Optional[Sequence[str]] = None
) -> List[Dict[str, str]]:
    """Rows where any searched column contains *term*, case-insensitively."""
    table = parse_csv(csv_data)
    search_in = list(columns) if columns else table.headers
    needle = term.lower()
    return [
        {h: table.cell(row, h) for h in table.headers}
        for row in table.rows
        if any(needle in table.cell(row, col).lower() for col in search_in)
    ]
