"""
Profiling helpers for CSV text: column type inference, schema, per-column
statistics and a structural consistency check.

Everything here reads the data and reports on it; nothing rewrites cells.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Dict, Iterable, List

from dto.reports import ColumnStatistics, ColumnType, ConsistencyReport, DataStatistics
from utils.csv_text import parse_csv

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*$")
_BOOLEAN_VALUES = {"true", "false", "1", "0"}
_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %b %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
)
_DELIMITERS = (",", ";", "\t", "|")


def _is_number(value: str) -> bool:
    return bool(_NUMBER.match(value))


def _is_date(value: str) -> bool:
    text = value.strip()
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
        return True
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            continue
    return False


def detect_column_type(values: Iterable[str]) -> ColumnType:
    """
    Infer a column type from its cells, ignoring empty ones.

    The checks run in order ``number``, ``boolean``, ``date``, so a column
    of only ``0``/``1`` is a number.  No non-empty cells means ``string``.
    """
    present = [v for v in values if v]
    if not present:
        return "string"
    if all(_is_number(v) for v in present):
        return "number"
    if all(v in _BOOLEAN_VALUES for v in present):
        return "boolean"
    if all(_is_date(v) for v in present):
        return "date"
    return "string"


def generate_schema(csv_data: str) -> Dict[str, ColumnType]:
    table = parse_csv(csv_data)
    return {header: detect_column_type(table.column(header)) for header in table.headers}


def get_data_statistics(csv_data: str) -> DataStatistics:
    table = parse_csv(csv_data)
    row_count = len(table.rows)
    columns: Dict[str, ColumnStatistics] = {}

    for header in table.headers:
        values = table.column(header)
        non_empty = sum(1 for v in values if v)
        column_type = detect_column_type(values)
        stats = ColumnStatistics(
            type=column_type,
            non_empty=non_empty,
            empty=row_count - non_empty,
            fill_rate=round(non_empty / row_count * 100) if row_count else 0,
            unique=len(set(values)),
        )
        if column_type == "number":
            numbers = [float(v) for v in values if v]
            stats.min = min(numbers)
            stats.max = max(numbers)
            stats.avg = round(sum(numbers) / len(numbers), 2)
        columns[header] = stats

    return DataStatistics(row_count=row_count, column_count=len(table.headers), columns=columns)


def validate_data_consistency(csv_data: str) -> ConsistencyReport:
    table = parse_csv(csv_data)
    errors: List[str] = []

    if not table.rows:
        errors.append("No data rows found")
    if not table.headers:
        errors.append("No headers found")

    for index, row in enumerate(table.rows, start=1):
        if len(row) != len(table.headers):
            errors.append(f"Row {index} has inconsistent column count")

    if table.rows:
        for header in table.headers:
            if not any(table.column(header)):
                errors.append(f'Column "{header}" is completely empty')

    if errors:
        logger.debug("consistency check found %d problem(s)", len(errors))
    return ConsistencyReport(valid=not errors, errors=errors)


def detect_delimiter(text: str) -> str:
    """Pick the delimiter that splits the first line into the most fields."""
    first_line = text.split("\n", 1)[0]
    best, best_count = ",", 0
    for delimiter in _DELIMITERS:
        count = len(first_line.split(delimiter))
        if count > best_count:
            best, best_count = delimiter, count
    return best
