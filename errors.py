"""
Error kinds raised by the conversion engine.

Every class derives from ``ConversionError`` (itself a ``ValueError``) and
carries a ``kind`` tag so a calling layer can map failures to its own
status codes without importing each class:

    MalformedInput     -- text does not have the shape of its declared format
    EmptyResult        -- parsed fine, but yielded no usable rows
    UnsupportedFormat  -- unknown format identifier
    NotImplemented     -- known format, unsupported in this direction
    ColumnNotFound     -- requested columns missing from the headers
"""

from __future__ import annotations

from typing import Iterable, List


class ConversionError(ValueError):
    """Base class for every error the engine raises on purpose."""

    kind = "ConversionError"


class MalformedInputError(ConversionError):
    kind = "MalformedInput"


class EmptyResultError(ConversionError):
    kind = "EmptyResult"


class UnsupportedFormatError(ConversionError):
    kind = "UnsupportedFormat"

    def __init__(self, format_id: str, direction: str = "") -> None:
        self.format_id = format_id
        label = f"{direction} format" if direction else "format"
        super().__init__(f"Unknown {label}: {format_id!r}")


class NotImplementedConversionError(ConversionError):
    kind = "NotImplemented"


class ColumnNotFoundError(ConversionError):
    kind = "ColumnNotFound"

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing: List[str] = list(missing)
        names = ", ".join(f'"{name}"' for name in self.missing)
        super().__init__(f"Column(s) not found: {names}")
