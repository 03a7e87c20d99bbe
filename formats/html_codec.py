"""
Codec for HTML tables (format ids ``html`` and ``table``).

Parsing is regex based and best-effort: ``<tr>`` blocks are scanned in
order, the first one with any cells is the header row (its ``<th>`` cells
if it has any, else its ``<td>`` cells), and every later row maps its
cells to headers by position.  Positions beyond the header row get a
synthetic ``column_N`` header.  Markup inside a cell is stripped and
entities decoded.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List

from dto.table import Table
from formats.base import Codec
from utils.escaping import unescape_markup
from utils.html import render_table_html

logger = logging.getLogger(__name__)

_ROW = re.compile(r"<tr(?:\s[^>]*)?>([\s\S]*?)</tr\s*>", re.IGNORECASE)
_HEADER_CELL = re.compile(r"<th(?:\s[^>]*)?>([\s\S]*?)</th\s*>", re.IGNORECASE)
_DATA_CELL = re.compile(r"<td(?:\s[^>]*)?>([\s\S]*?)</td\s*>", re.IGNORECASE)
_ANY_CELL = re.compile(r"<t([hd])(?:\s[^>]*)?>([\s\S]*?)</t\1\s*>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")


def _cell_text(raw: str) -> str:
    text = _TAG.sub("", raw)
    return unescape_markup(text).strip()


class HtmlCodec(Codec):

    format_id = "html"

    def parse(self, text: str) -> Table:
        headers: List[str] = []
        rows: List[Dict[str, str]] = []

        for tr in _ROW.finditer(text):
            body = tr.group(1)

            if not headers:
                cells = [_cell_text(c) for c in _HEADER_CELL.findall(body)]
                if not cells:
                    cells = [_cell_text(c) for c in _DATA_CELL.findall(body)]
                headers = cells
                continue

            values = [_cell_text(m.group(2)) for m in _ANY_CELL.finditer(body)]
            if not values:
                continue

            row: Dict[str, str] = {}
            for index, value in enumerate(values):
                if index >= len(headers):
                    headers.append(f"column_{index}")
                row[headers[index]] = value
            rows.append(row)

        logger.debug("html: %d header(s), %d data row(s)", len(headers), len(rows))
        return Table(headers=headers, rows=rows)

    def serialize(self, table: Table) -> str:
        body = [[table.cell(row, h) for h in table.headers] for row in table.rows]
        return render_table_html(table.headers, body)
