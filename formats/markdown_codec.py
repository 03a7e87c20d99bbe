"""
Codec for GitHub-flavoured Markdown pipe tables.

    | name | age |
    | --- | --- |
    | John Doe | 30 |

Pipes inside a value are written as ``\\|`` and line breaks as ``<br>``.
``&`` and ``<`` are written as character references, so a literal ``<br>``
in a value is not mistaken for a line break.  All of these are decoded
again on parsing, along with any other HTML entity in the table.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List

from dto.table import Table
from errors import MalformedInputError
from formats.base import Codec
from utils.escaping import unescape_markup

logger = logging.getLogger(__name__)

_CELL_SPLIT = re.compile(r"(?<!\\)\|")
_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)


def _split_cells(line: str) -> List[str]:
    line = line.strip()
    if line.startswith("|"):
        line = line[1:]
    if line.endswith("|") and not line.endswith("\\|"):
        line = line[:-1]
    return [
        unescape_markup(_LINE_BREAK.sub("\n", cell.strip().replace("\\|", "|")))
        for cell in _CELL_SPLIT.split(line)
    ]


def _escape_cell(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace("|", "\\|")
        .replace("\r\n", "<br>")
        .replace("\n", "<br>")
    )


class MarkdownCodec(Codec):

    format_id = "markdown"

    def parse(self, text: str) -> Table:
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if len(lines) < 3:
            raise MalformedInputError(
                "Markdown table needs at least 3 lines: header, separator and data rows"
            )

        headers = _split_cells(lines[0])
        rows: List[Dict[str, str]] = []
        dropped = 0
        for line in lines[2:]:
            cells = _split_cells(line)
            if len(cells) != len(headers):
                dropped += 1
                continue
            rows.append(dict(zip(headers, cells)))

        if dropped:
            logger.warning(
                "markdown: dropped %d row(s) whose cell count differs from the %d header(s)",
                dropped,
                len(headers),
            )
        return Table(headers=headers, rows=rows)

    def serialize(self, table: Table) -> str:
        if not table.headers:
            return ""
        lines = [
            "| " + " | ".join(_escape_cell(h) for h in table.headers) + " |",
            "| " + " | ".join("---" for _ in table.headers) + " |",
        ]
        for row in table.rows:
            cells = (_escape_cell(table.cell(row, h)) for h in table.headers)
            lines.append("| " + " | ".join(cells) + " |")
        return "\n".join(lines)
