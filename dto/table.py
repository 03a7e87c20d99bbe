"""
Table: the canonical intermediate representation every format converts
through.

A Table is an ordered header list plus a list of rows, where each row maps
a header to a string cell.  Rows may be partial (HTML, TXT and the XML
fallbacks cannot always fill every column); a missing cell reads as "".
Nothing here coerces types, "30" stays "30".
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Sequence

from pydantic import BaseModel

import config

logger = logging.getLogger(__name__)


def stringify_value(value: Any) -> str:
    """Render a decoded JSON-ish value as a cell string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class Table(BaseModel):
    """Ordered headers and string-valued rows."""

    headers: List[str] = []
    rows: List[Dict[str, str]] = []

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_records(
        cls, records: Sequence[Mapping[str, Any]], source: str = "records"
    ) -> "Table":
        """
        Build a Table from record-shaped input (JSON objects, YAML maps...).

        The header list is the **first** record's keys.  Keys that only
        appear in later records stay on their rows but are not part of the
        header list, so serializers drop them; a warning names them.
        """
        if not records:
            return cls()

        headers = [str(key) for key in records[0].keys()]
        rows = [
            {str(key): stringify_value(val) for key, val in record.items()}
            for record in records
        ]
        table = cls(headers=headers, rows=rows)

        extra = table.extra_keys()
        if extra and config.WARN_HETEROGENEOUS:
            logger.warning(
                "%s: %d key(s) not present in the first record will be dropped: %s",
                source,
                len(extra),
                ", ".join(extra),
            )
        return table

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @staticmethod
    def cell(row: Mapping[str, str], header: str) -> str:
        return row.get(header, "")

    def column(self, header: str) -> List[str]:
        """Return every cell of one column, "" for rows that lack it."""
        return [self.cell(row, header) for row in self.rows]

    def records(self) -> List[Dict[str, str]]:
        """Return full rows in header order (missing cells filled with "")."""
        return [{h: self.cell(row, h) for h in self.headers} for row in self.rows]

    def extra_keys(self) -> List[str]:
        """Keys found on rows that are not in ``headers``, first-seen order."""
        known = set(self.headers)
        extra: List[str] = []
        for row in self.rows:
            for key in row:
                if key not in known:
                    known.add(key)
                    extra.append(key)
        return extra
