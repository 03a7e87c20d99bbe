"""
Escaping and identifier helpers shared by the markup, calendar and SQL
codecs.
"""

from __future__ import annotations

import html
import re

_XML_TAG_INVALID = re.compile(r"[^A-Za-z0-9_\-]")
_SQL_IDENT_INVALID = re.compile(r"[^A-Za-z0-9_]")
_ICAL_ESCAPE = re.compile(r"\\([\\;,nN])")

_SQL_LITERAL_ESCAPES = {
    "\\": "\\\\",
    "'": "''",
    "\x00": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\x1a": "\\Z",
}


# -------------------------------------------------------------------
# XML / HTML
# -------------------------------------------------------------------


def escape_xml(text: str, apostrophe: str = "&apos;") -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", apostrophe)
    )


def escape_html(text: str) -> str:
    """Like ``escape_xml`` but writes apostrophes as ``&#39;``."""
    return escape_xml(text, apostrophe="&#39;")


def unescape_markup(text: str) -> str:
    """Decode XML/HTML character references (``&amp;``, ``&#39;``, ...)."""
    return html.unescape(text)


def sanitize_xml_tag(name: str) -> str:
    """Make a header usable as an element name: ``[A-Za-z0-9_-]`` only."""
    tag = _XML_TAG_INVALID.sub("_", name)
    if not tag or not (tag[0].isalpha() or tag[0] == "_"):
        tag = "_" + tag
    return tag


# -------------------------------------------------------------------
# iCalendar
# -------------------------------------------------------------------


def escape_ical(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def unescape_ical(text: str) -> str:
    def _replace(match: re.Match) -> str:
        char = match.group(1)
        return "\n" if char in "nN" else char

    return _ICAL_ESCAPE.sub(_replace, text)


# -------------------------------------------------------------------
# SQL
# -------------------------------------------------------------------


def sanitize_sql_identifier(name: str) -> str:
    """Non-alphanumerics become ``_``; a leading digit gets a ``_`` prefix."""
    ident = _SQL_IDENT_INVALID.sub("_", name.strip())
    if not ident:
        return "_"
    if ident[0].isdigit():
        ident = "_" + ident
    return ident


def escape_sql_literal(value: str) -> str:
    """Escape a value for use inside a single-quoted SQL string literal."""
    return "".join(_SQL_LITERAL_ESCAPES.get(ch, ch) for ch in value)
