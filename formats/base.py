"""
Base class for all format codecs.

Each codec answers two questions for its format:
  1. **parse** -- turn text of this format into a canonical ``Table``.
  2. **serialize** -- turn a ``Table`` back into text of this format.

The router never pairs two codecs directly.  Every conversion passes
through intermediate CSV text (``to_csv`` / ``from_csv``), which also
applies the CSV hub's own rules, e.g. a table with no rows becomes "".
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from dto.table import Table
from utils.csv_text import generate_csv, parse_csv

logger = logging.getLogger(__name__)


class Codec(ABC):
    """Interface that every format codec must implement."""

    # Canonical identifier, e.g. "xml"; aliases are resolved by the registry.
    format_id: str = ""

    @abstractmethod
    def parse(self, text: str) -> Table:
        """
        Parse text of this format.

        Raises a ``ConversionError`` subclass if the text does not have the
        expected shape.
        """
        ...

    @abstractmethod
    def serialize(self, table: Table) -> str:
        """Render a Table as text of this format."""
        ...

    def to_csv(self, text: str) -> str:
        """Parse *text* and return it as intermediate CSV."""
        table = self.parse(text)
        logger.debug(
            "%s: parsed %d row(s) x %d column(s)",
            self.format_id,
            len(table.rows),
            len(table.headers),
        )
        return generate_csv(table)

    def from_csv(self, csv_data: str) -> str:
        """Render intermediate CSV as text of this format."""
        return self.serialize(parse_csv(csv_data))
