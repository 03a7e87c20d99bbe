"""
Codec for CSV, the hub format.

CSV text is already the intermediate representation, so ``to_csv`` and
``from_csv`` pass text through untouched; the target codec does the
parsing when CSV is the source.
"""

from __future__ import annotations

from dto.table import Table
from formats.base import Codec
from utils.csv_text import generate_csv, parse_csv


class CsvCodec(Codec):

    format_id = "csv"

    def parse(self, text: str) -> Table:
        return parse_csv(text)

    def serialize(self, table: Table) -> str:
        return generate_csv(table)

    def to_csv(self, text: str) -> str:
        return text

    def from_csv(self, csv_data: str) -> str:
        return csv_data
