"""
Codec for iCalendar (RFC 5545) event lists.

Each row becomes one VEVENT.  Columns are looked up by common names:

    SUMMARY      <- title | summary | name | event | subject
    DTSTART      <- start_date | start | dtstart | date | start_time
    DTEND        <- end_date | end | dtend | end_time
    DESCRIPTION  <- description | details | notes

ISO dates (``2025-11-05``) are written as ``DTSTART;VALUE=DATE:20251105``
and ISO date-times as ``20251105T090000``; parsing turns both back into
ISO form.  Parsed rows have the columns ``title, start_date, end_date,
description``.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Mapping, Optional, Tuple

from dto.table import Table
from errors import EmptyResultError
from formats.base import Codec
from utils.escaping import escape_ical, unescape_ical

logger = logging.getLogger(__name__)

_SUMMARY_KEYS = ("title", "summary", "name", "event", "subject")
_START_KEYS = ("start_date", "start", "dtstart", "date", "start_time")
_END_KEYS = ("end_date", "end", "dtend", "end_time")
_DESCRIPTION_KEYS = ("description", "details", "notes")
DEFAULT_SUMMARY = "Event"

# Property name -> output column, in output order.
_PROPERTIES = {
    "SUMMARY": "title",
    "DTSTART": "start_date",
    "DTEND": "end_date",
    "DESCRIPTION": "description",
}
_TEXT_PROPERTIES = ("SUMMARY", "DESCRIPTION")

_FOLDED_LINE = re.compile(r"\r?\n[ \t]")
_EVENT = re.compile(r"BEGIN:VEVENT\s*?\r?\n([\s\S]*?)END:VEVENT", re.IGNORECASE)
_CONTENT_LINE = re.compile(r"^([A-Za-z\-]+)((?:;[^:]*)?):(.*)$")

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_ISO_DATETIME = re.compile(r"^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})(?::(\d{2}))?(Z?)$")
_ICAL_DATE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_ICAL_DATETIME = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})(Z?)$")


def _lookup(row: Mapping[str, str], keys: Tuple[str, ...]) -> Optional[str]:
    lowered = {key.lower(): value for key, value in row.items()}
    for key in keys:
        value = lowered.get(key)
        if value:
            return value
    return None


def _encode_date(value: str) -> Tuple[str, str]:
    """Return ``(parameters, value)`` for a DTSTART/DTEND property."""
    value = value.strip()
    match = _ISO_DATE.match(value)
    if match:
        return ";VALUE=DATE", "".join(match.groups())
    match = _ISO_DATETIME.match(value)
    if match:
        year, month, day, hour, minute, second, utc = match.groups()
        return "", f"{year}{month}{day}T{hour}{minute}{second or '00'}{utc}"
    return "", escape_ical(value)


def _decode_date(value: str) -> str:
    match = _ICAL_DATE.match(value)
    if match:
        return "-".join(match.groups())
    match = _ICAL_DATETIME.match(value)
    if match:
        year, month, day, hour, minute, second, utc = match.groups()
        return f"{year}-{month}-{day}T{hour}:{minute}:{second}{utc}"
    return unescape_ical(value)


class IcsCodec(Codec):

    format_id = "ics"

    def parse(self, text: str) -> Table:
        unfolded = _FOLDED_LINE.sub("", text)
        rows: List[Dict[str, str]] = []

        for event in _EVENT.finditer(unfolded):
            found: Dict[str, str] = {}
            for line in event.group(1).splitlines():
                match = _CONTENT_LINE.match(line.strip())
                if not match:
                    continue
                name = match.group(1).upper()
                if name not in _PROPERTIES or name in found:
                    continue
                raw = match.group(3)
                found[name] = unescape_ical(raw) if name in _TEXT_PROPERTIES else _decode_date(raw)
            rows.append({column: found.get(name, "") for name, column in _PROPERTIES.items()})

        if not rows:
            raise EmptyResultError("No events found in ICS data")
        return Table(headers=list(_PROPERTIES.values()), rows=rows)

    def serialize(self, table: Table) -> str:
        lines: List[str] = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//format-bridge//EN",
            "CALSCALE:GREGORIAN",
        ]
        for index, row in enumerate(table.rows, start=1):
            lines.append("BEGIN:VEVENT")
            lines.append(f"UID:event-{index}@format-bridge")
            summary = _lookup(row, _SUMMARY_KEYS) or DEFAULT_SUMMARY
            lines.append(f"SUMMARY:{escape_ical(summary)}")

            start = _lookup(row, _START_KEYS)
            if start:
                params, value = _encode_date(start)
                lines.append(f"DTSTART{params}:{value}")
            end = _lookup(row, _END_KEYS)
            if end:
                params, value = _encode_date(end)
                lines.append(f"DTEND{params}:{value}")

            description = _lookup(row, _DESCRIPTION_KEYS)
            if description:
                lines.append(f"DESCRIPTION:{escape_ical(description)}")
            lines.append("END:VEVENT")
        lines.append("END:VCALENDAR")
        return "\r\n".join(lines) + "\r\n"
