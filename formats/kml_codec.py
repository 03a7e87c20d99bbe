"""
Codec for KML point placemarks.

Rows are expected to carry a latitude (``latitude`` or ``lat``) and a
longitude (``longitude``, ``lng`` or ``lon``) column plus an optional
``name``.  Parsed rows always have the columns ``name, latitude,
longitude``.

A document with no placemark carrying coordinates raises
``EmptyResultError`` rather than yielding an empty CSV.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Mapping, Optional

from dto.table import Table
from errors import EmptyResultError
from formats.base import Codec
from utils.escaping import escape_xml, unescape_markup

logger = logging.getLogger(__name__)

_PLACEMARK = re.compile(r"<Placemark(?:\s[^>]*)?>([\s\S]*?)</Placemark\s*>", re.IGNORECASE)
_NAME = re.compile(r"<name>([\s\S]*?)</name>", re.IGNORECASE)
_COORDINATES = re.compile(r"<coordinates>([\s\S]*?)</coordinates>", re.IGNORECASE)

_LATITUDE_KEYS = ("latitude", "lat")
_LONGITUDE_KEYS = ("longitude", "lng", "lon")
DEFAULT_NAME = "Location"

KML_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<kml xmlns="http://www.opengis.net/kml/2.2">\n'
    "  <Document>"
)
KML_FOOTER = "  </Document>\n</kml>"


def _first_present(row: Mapping[str, str], keys) -> Optional[str]:
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return None


class KmlCodec(Codec):

    format_id = "kml"

    def parse(self, text: str) -> Table:
        rows: List[Dict[str, str]] = []
        skipped = 0
        for placemark in _PLACEMARK.finditer(text):
            body = placemark.group(1)
            coords = _COORDINATES.search(body)
            if not coords or not coords.group(1).strip():
                skipped += 1
                continue

            # A LineString/Polygon lists several tuples; the first one is used.
            first_tuple = coords.group(1).split()[0]
            parts = [p.strip() for p in first_tuple.split(",")]
            lng = parts[0]
            lat = parts[1] if len(parts) > 1 else ""

            name = _NAME.search(body)
            rows.append(
                {
                    "name": unescape_markup(name.group(1).strip()) if name else DEFAULT_NAME,
                    "latitude": lat,
                    "longitude": lng,
                }
            )

        if skipped:
            logger.warning("kml: skipped %d placemark(s) without coordinates", skipped)
        if not rows:
            raise EmptyResultError("No placemarks with coordinates found in KML")
        return Table(headers=["name", "latitude", "longitude"], rows=rows)

    def serialize(self, table: Table) -> str:
        parts: List[str] = [KML_HEADER]
        skipped = 0
        for row in table.rows:
            lat = _first_present(row, _LATITUDE_KEYS)
            lng = _first_present(row, _LONGITUDE_KEYS)
            if not (lat and lng):
                skipped += 1
                continue
            name = row.get("name") or DEFAULT_NAME
            parts.append(
                "    <Placemark>\n"
                f"      <name>{escape_xml(name)}</name>\n"
                "      <Point>\n"
                f"        <coordinates>{lng},{lat}</coordinates>\n"
                "      </Point>\n"
                "    </Placemark>"
            )
        if skipped:
            logger.warning("kml: %d row(s) without latitude/longitude were not exported", skipped)
        parts.append(KML_FOOTER)
        return "\n".join(parts)
