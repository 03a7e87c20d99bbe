"""
Column extraction with optional row filters, operating on CSV text.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from dto.filters import FilterSpec
from errors import ColumnNotFoundError
from utils.csv_text import parse_csv, write_rows

logger = logging.getLogger(__name__)

FilterLike = Union[FilterSpec, Mapping[str, Any]]


def _to_filter(raw: FilterLike) -> FilterSpec:
    if isinstance(raw, FilterSpec):
        return raw
    return FilterSpec.model_validate(dict(raw))


def matches_filter(row: Mapping[str, str], rule: FilterSpec) -> bool:
    """Plain string comparison; a missing cell compares as ""."""
    value = row.get(rule.column, "")
    if rule.operator == "contains":
        return rule.value in value
    if rule.operator == "startsWith":
        return value.startswith(rule.value)
    if rule.operator == "endsWith":
        return value.endswith(rule.value)
    return value == rule.value


def extract_columns(
    csv_data: str,
    columns: Sequence[str],
    filters: Optional[Iterable[FilterLike]] = None,
) -> str:
    """
    Keep only *columns* (in the requested order) of the rows that pass
    every filter, and return them as CSV.

    Every requested column must exist; otherwise ``ColumnNotFoundError``
    lists all missing names at once.  The header line is written even when
    no row survives the filters.  The input is always parsed, so malformed
    CSV raises even when an empty *columns* list would otherwise yield "".
    """
    table = parse_csv(csv_data)
    if not columns:
        return ""

    known = set(table.headers)
    missing = [name for name in columns if name not in known]
    if missing:
        raise ColumnNotFoundError(missing)

    rules: List[FilterSpec] = [_to_filter(f) for f in (filters or [])]
    rows = [row for row in table.rows if all(matches_filter(row, r) for r in rules)]
    logger.debug(
        "extract: %d of %d row(s) kept by %d filter(s)", len(rows), len(table.rows), len(rules)
    )

    projected: List[Dict[str, str]] = [
        {name: table.cell(row, name) for name in columns} for row in rows
    ]
    return write_rows(list(columns), projected)
