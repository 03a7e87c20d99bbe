"""
Codecs for the delimiter-separated text formats other than CSV.

  TsvCodec    -- tab separated, **no quoting**: a tab inside a value is
                 indistinguishable from a delimiter, and the serializer does
                 not escape embedded tabs.  A weaker guarantee than CSV.
  ExcelCodec  -- tab separated with Excel-style quoting (``"a""b"``), the
                 text Excel puts on the clipboard.  Not a workbook container.
  TxtCodec    -- human-readable ``a | b`` table with a dashed divider line.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List

from dto.table import Table
from errors import EmptyResultError, NotImplementedConversionError
from formats.base import Codec
from utils.csv_text import read_rows, rows_to_table, write_rows

logger = logging.getLogger(__name__)

# Leading bytes of .xlsx (zip) and legacy .xls (OLE2) files.
_BINARY_SIGNATURES = ("PK\x03\x04", "\xd0\xcf\x11\xe0")
_DIVIDER = re.compile(r"[\s\-=+|:]+")


def _non_empty_lines(text: str) -> List[str]:
    return [line.rstrip("\r") for line in text.split("\n") if line.strip()]


def _positional_row(headers: List[str], values: List[str]) -> Dict[str, str]:
    return {h: values[i] if i < len(values) else "" for i, h in enumerate(headers)}


# ---------------------------------------------------------------------------
# TSV
# ---------------------------------------------------------------------------


class TsvCodec(Codec):

    format_id = "tsv"

    def parse(self, text: str) -> Table:
        lines = _non_empty_lines(text)
        if len(lines) < 2:
            return Table()

        headers = lines[0].split("\t")
        rows = [_positional_row(headers, line.split("\t")) for line in lines[1:]]
        return Table(headers=headers, rows=rows)

    def serialize(self, table: Table) -> str:
        if not table.headers:
            return ""
        lines = ["\t".join(table.headers)]
        for row in table.rows:
            lines.append("\t".join(table.cell(row, h) for h in table.headers))
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Excel-compatible TSV
# ---------------------------------------------------------------------------


class ExcelCodec(Codec):

    format_id = "excel"

    def parse(self, text: str) -> Table:
        if text.startswith(_BINARY_SIGNATURES) or "\x00" in text:
            raise NotImplementedConversionError(
                "Binary Excel workbooks are not supported; "
                "paste the sheet as tab-separated text instead"
            )

        rows = read_rows(text, delimiter="\t")
        if len(rows) < 2:
            raise EmptyResultError(
                "Excel data needs a header row and at least one data row"
            )
        return rows_to_table(rows, source="excel")

    def serialize(self, table: Table) -> str:
        if not table.headers:
            return ""
        return write_rows(table.headers, table.rows, delimiter="\t", lineterminator="\r\n")


# ---------------------------------------------------------------------------
# Plain text table
# ---------------------------------------------------------------------------


class TxtCodec(Codec):

    format_id = "txt"

    @staticmethod
    def _sniff_delimiter(line: str) -> str:
        if "\t" in line:
            return "\t"
        if "," in line:
            return ","
        return "|"

    @staticmethod
    def _split(line: str, delimiter: str) -> List[str]:
        if delimiter == "|":
            line = line.strip()
            if line.startswith("|"):
                line = line[1:]
            if line.endswith("|"):
                line = line[:-1]
        return [value.strip() for value in line.split(delimiter)]

    def parse(self, text: str) -> Table:
        lines = _non_empty_lines(text)
        if len(lines) < 2:
            return Table()

        delimiter = self._sniff_delimiter(lines[0])
        headers = self._split(lines[0], delimiter)

        # The second line is always the divider and is skipped.
        if not _DIVIDER.fullmatch(lines[1]):
            logger.warning("txt: second line does not look like a divider, skipping it anyway: %r", lines[1][:80])

        rows = [_positional_row(headers, self._split(line, delimiter)) for line in lines[2:]]
        return Table(headers=headers, rows=rows)

    def serialize(self, table: Table) -> str:
        if not table.headers:
            return ""
        header_line = " | ".join(table.headers)
        lines = [header_line, "-" * len(header_line)]
        for row in table.rows:
            lines.append(" | ".join(table.cell(row, h) for h in table.headers))
        return "\n".join(lines) + "\n"
