"""
Codecs for JSON (an array of flat objects) and JSON Lines / NDJSON (one
object per line).

Both build their Table with ``Table.from_records``: the header list is the
first object's keys, and keys that only appear later are dropped with a
warning.  Non-string scalars are rendered as JSON text ("30", "true", "").
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from dto.table import Table
from errors import EmptyResultError, MalformedInputError
from formats.base import Codec

logger = logging.getLogger(__name__)


class JsonCodec(Codec):

    format_id = "json"

    def parse(self, text: str) -> Table:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(f"Invalid JSON: {exc}") from exc

        items = data if isinstance(data, list) else [data]
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise MalformedInputError(
                    f"JSON item {index} is a {type(item).__name__}, expected an object"
                )
        return Table.from_records(items, source="json")

    def serialize(self, table: Table) -> str:
        return json.dumps(table.records(), indent=2, ensure_ascii=False)


class JsonLinesCodec(Codec):
    """JSONL / NDJSON / "lines": invalid or non-object lines are skipped."""

    format_id = "jsonl"

    def parse(self, text: str) -> Table:
        records: List[Dict[str, Any]] = []
        skipped = 0
        for line_no, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                skipped += 1
                logger.debug("jsonl: skipping invalid JSON on line %d", line_no)
                continue
            if not isinstance(obj, dict):
                skipped += 1
                logger.debug("jsonl: skipping non-object on line %d", line_no)
                continue
            records.append(obj)

        if skipped:
            logger.warning("jsonl: skipped %d line(s) that were not JSON objects", skipped)
        if not records:
            raise EmptyResultError("No valid JSON objects found in JSONL input")
        return Table.from_records(records, source="jsonl")

    def serialize(self, table: Table) -> str:
        return "\n".join(
            json.dumps(record, ensure_ascii=False, separators=(",", ":"))
            for record in table.records()
        )
