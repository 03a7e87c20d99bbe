"""
Format codecs.

Each codec implements the ``Codec`` base class: ``parse`` turns text of
its format into a ``Table`` and ``serialize`` turns a ``Table`` back into
text.  Conversions never pair two codecs directly; they always pass
through intermediate CSV (see ``Codec.to_csv`` / ``Codec.from_csv``).

  CsvCodec        -- the hub format, passed through unchanged
  JsonCodec       -- array of flat objects
  JsonLinesCodec  -- one object per line (jsonl, ndjson, lines)
  XmlCodec        -- record/item blocks with ordered fallbacks
  YamlCodec       -- flat list-of-maps subset
  HtmlCodec       -- <table> markup (html, table)
  TsvCodec, ExcelCodec, TxtCodec
  KmlCodec        -- point placemarks
  MarkdownCodec   -- pipe tables
  IcsCodec        -- calendar events
  TomlCodec       -- [[records]] arrays of tables
  SqlCodec        -- CREATE TABLE / INSERT scripts
"""

from formats.base import Codec
from formats.registry import SUPPORTED_FORMATS, canonical_format, get_codec

__all__ = [
    "Codec",
    "SUPPORTED_FORMATS",
    "canonical_format",
    "get_codec",
]
