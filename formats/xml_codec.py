"""
Codec for flat record-oriented XML.

Serialized shape::

    <?xml version="1.0" encoding="UTF-8"?>
    <root>
      <record>
        <name>John Doe</name>
      </record>
    </root>

Parsing runs the strategy chain from ``formats.xml_strategies``.
"""

from __future__ import annotations

import logging
from typing import List

from dto.table import Table
from formats.base import Codec
from formats.xml_strategies import (
    GenericLeafStrategy,
    ItemBasedStrategy,
    RecordBasedStrategy,
    SentinelStrategy,
    XmlStrategy,
    strip_comments,
)
from utils.escaping import escape_xml, sanitize_xml_tag

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


class XmlCodec(Codec):

    format_id = "xml"

    # The canonical strategy chain -- evaluated in this order.
    # The first strategy that returns any rows wins.
    _STRATEGIES: List[XmlStrategy] = [
        RecordBasedStrategy(),
        ItemBasedStrategy(),
        GenericLeafStrategy(),
        SentinelStrategy(),
    ]

    def parse(self, text: str) -> Table:
        document = strip_comments(text)
        for strategy in self._STRATEGIES:
            rows = strategy.extract(document)
            if rows:
                logger.debug("xml: %d row(s) via %s strategy", len(rows), strategy.name)
                return Table.from_records(rows, source="xml")
        return Table()

    def serialize(self, table: Table) -> str:
        parts: List[str] = [XML_DECLARATION, "<root>"]
        for record in table.records():
            parts.append("  <record>")
            for key, value in record.items():
                tag = sanitize_xml_tag(key)
                parts.append(f"    <{tag}>{escape_xml(value)}</{tag}>")
            parts.append("  </record>")
        parts.append("</root>")
        return "\n".join(parts)
