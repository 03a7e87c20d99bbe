"""
Record-extraction strategies for XML input.

Each strategy looks at the whole document and returns a list of rows, or
an empty list if the document does not match its shape.  ``XmlCodec``
evaluates them in this canonical order and the first non-empty result
wins:

  1. RecordBasedStrategy  -- repeated ``<record>...</record>`` blocks
  2. ItemBasedStrategy    -- repeated ``<item>...</item>`` blocks
  3. GenericLeafStrategy  -- every leaf ``<tag>text</tag>`` collapsed into
                             one row (``root`` / ``xml`` wrappers skipped)
  4. SentinelStrategy     -- a single ``{"value": "N/A"}`` row (always hits)

All patterns are compiled once at module level; ``re`` pattern objects
carry no scan position, so concurrent parses cannot interfere.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Dict, List

from utils.escaping import unescape_markup

Row = Dict[str, str]

# A child element: <tag>, <tag attr="...">, or self-closing <tag/>.
_CHILD_ELEMENT = re.compile(
    r"<(?P<tag>[A-Za-z_][\w.:\-]*)(?:\s[^<>]*?)?(?:/>|>(?P<body>[\s\S]*?)</(?P=tag)\s*>)"
)
# A leaf element: text content with no nested markup.
_LEAF_ELEMENT = re.compile(
    r"<(?P<tag>[A-Za-z_][\w.:\-]*)(?:\s[^<>]*?)?>(?P<body>[^<]*)</(?P=tag)\s*>"
)
_CDATA = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>")
_COMMENT = re.compile(r"<!--[\s\S]*?-->")
_WRAPPER_TAGS = frozenset({"root", "xml"})


def _clean_text(raw: str) -> str:
    """Trim, unwrap CDATA sections and decode entities."""
    text = raw.strip()
    match = _CDATA.fullmatch(text)
    if match:
        return match.group(1)
    return unescape_markup(text)


def strip_comments(document: str) -> str:
    return _COMMENT.sub("", document)


class XmlStrategy(ABC):
    """Interface that every XML extraction strategy must implement."""

    name: str = ""

    @abstractmethod
    def extract(self, document: str) -> List[Row]:
        """Return the rows found in *document*, or [] if this shape does not apply."""
        ...


class BlockStrategy(XmlStrategy):
    """Rows are repeated ``<tag>...</tag>`` blocks; their children are cells."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        self.name = f"{tag}-blocks"
        self._block = re.compile(
            rf"<{re.escape(tag)}(?:\s[^<>]*)?>([\s\S]*?)</{re.escape(tag)}\s*>",
            re.IGNORECASE,
        )

    def extract(self, document: str) -> List[Row]:
        rows: List[Row] = []
        for block in self._block.finditer(document):
            row: Row = {}
            for element in _CHILD_ELEMENT.finditer(block.group(1)):
                row[element.group("tag")] = _clean_text(element.group("body") or "")
            if row:
                rows.append(row)
        return rows


class RecordBasedStrategy(BlockStrategy):
    def __init__(self) -> None:
        super().__init__("record")


class ItemBasedStrategy(BlockStrategy):
    def __init__(self) -> None:
        super().__init__("item")


class GenericLeafStrategy(XmlStrategy):
    """Collapse every leaf element in the document into a single row."""

    name = "generic-leaf"

    def extract(self, document: str) -> List[Row]:
        row: Row = {}
        for element in _LEAF_ELEMENT.finditer(document):
            tag = element.group("tag")
            if tag.lower() in _WRAPPER_TAGS:
                continue
            row[tag] = _clean_text(element.group("body"))
        return [row] if row else []


class SentinelStrategy(XmlStrategy):
    """Last resort: nothing parsed, emit a placeholder row instead of failing."""

    name = "sentinel"

    def extract(self, document: str) -> List[Row]:
        return [{"value": "N/A"}]
