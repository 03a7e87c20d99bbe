"""
Format conversion router and command line entry point.

Usage:
    format-bridge convert <input> --from json --to xml [-o out.xml]
    format-bridge extract <input> --columns name,email [--filter age:equals:30]
    format-bridge stats <input>
    format-bridge formats

``<input>`` may be ``-`` for stdin.  Every conversion passes through
intermediate CSV: the source codec parses into CSV, the target codec
serializes from it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

import config
from analysis import get_data_statistics, validate_data_consistency
from dto.filters import FilterSpec
from errors import ConversionError
from extraction import extract_columns
from formats.registry import SUPPORTED_FORMATS, get_codec

logger = logging.getLogger(__name__)


def convert(
    data: str,
    source_format: str,
    target_format: str,
    *,
    sql_table_name: Optional[str] = None,
) -> str:
    """
    Convert *data* from one format to another.

    Identical identifiers (compared case-insensitively, before alias
    resolution) return *data* untouched without validating it.  Unknown
    identifiers raise ``UnsupportedFormatError``; parser and serializer
    errors propagate unchanged.
    """
    if (source_format or "").strip().lower() == (target_format or "").strip().lower():
        logger.debug("convert: %s -> %s is the identity, returning input", source_format, target_format)
        return data

    source = get_codec(source_format, direction="source")
    target = get_codec(target_format, direction="target", sql_table_name=sql_table_name)
    logger.debug("convert: %s -> csv -> %s", source.format_id, target.format_id)

    try:
        csv_data = source.to_csv(data)
        return target.from_csv(csv_data)
    except ConversionError as exc:
        logger.error("Conversion %s -> %s failed: %s", source_format, target_format, exc)
        raise


# -------------------------------------------------------------------
# CLI
# -------------------------------------------------------------------


def _read_input(path: str) -> str:
    if path == "-":
        data = sys.stdin.read()
    else:
        with open(path, "r", encoding="utf-8", newline="") as f:
            data = f.read()

    size = len(data.encode("utf-8"))
    if size > config.MAX_INPUT_BYTES:
        raise ConversionError(
            f"Input is {size} bytes; the limit is {config.MAX_INPUT_BYTES} bytes "
            "(FORMAT_BRIDGE_MAX_INPUT_BYTES)"
        )
    return data


def _write_output(text: str, path: Optional[str]) -> None:
    if path:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info("Output written to %s", path)
    else:
        sys.stdout.write(text)
        if text and not text.endswith("\n"):
            sys.stdout.write("\n")


def _parse_filter(raw: str) -> FilterSpec:
    """``column:value`` or ``column:operator:value``."""
    parts = raw.split(":", 2)
    if len(parts) == 2:
        column, value = parts
        return FilterSpec(column=column, value=value)
    if len(parts) == 3:
        column, operator, value = parts
        return FilterSpec(column=column, operator=operator, value=value)
    raise argparse.ArgumentTypeError(f"expected column:value or column:operator:value, got {raw!r}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="format-bridge",
        description="Convert tabular text between CSV, JSON, XML, YAML, SQL and other formats.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_convert = sub.add_parser("convert", help="Convert a file from one format to another")
    p_convert.add_argument("input", help="Input file path, or - for stdin")
    p_convert.add_argument("--from", dest="source", required=True, help="Source format")
    p_convert.add_argument("--to", dest="target", required=True, help="Target format")
    p_convert.add_argument("-o", "--output", default=None, help="Output path (default: stdout)")
    p_convert.add_argument(
        "--table-name",
        default=None,
        help=f"Table name for SQL output (default: {config.SQL_TABLE_NAME})",
    )

    p_extract = sub.add_parser("extract", help="Keep selected columns of a CSV file")
    p_extract.add_argument("input", help="Input CSV path, or - for stdin")
    p_extract.add_argument(
        "-c", "--columns", required=True, help="Comma-separated column names, in output order"
    )
    p_extract.add_argument(
        "-f",
        "--filter",
        dest="filters",
        action="append",
        default=[],
        help="Row filter column:value or column:operator:value "
        "(operators: equals, contains, startsWith, endsWith); repeatable",
    )
    p_extract.add_argument("-o", "--output", default=None, help="Output path (default: stdout)")

    p_stats = sub.add_parser("stats", help="Print column statistics for a CSV file as JSON")
    p_stats.add_argument("input", help="Input CSV path, or - for stdin")

    sub.add_parser("formats", help="List supported format identifiers")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    if args.command == "formats":
        sys.stdout.write("\n".join(SUPPORTED_FORMATS) + "\n")
        return

    try:
        data = _read_input(args.input)

        if args.command == "convert":
            result = convert(data, args.source, args.target, sql_table_name=args.table_name)
            _write_output(result, args.output)

        elif args.command == "extract":
            try:
                filters = [_parse_filter(raw) for raw in args.filters]
            except (argparse.ArgumentTypeError, ValidationError) as exc:
                parser.error(f"invalid --filter: {exc}")
            columns = [c.strip() for c in args.columns.split(",") if c.strip()]
            _write_output(extract_columns(data, columns, filters), args.output)

        elif args.command == "stats":
            stats = get_data_statistics(data)
            report = validate_data_consistency(data)
            for problem in report.errors:
                logger.warning("%s", problem)
            _write_output(stats.model_dump_json(indent=2, exclude_none=True), None)

    except FileNotFoundError:
        logger.error("File not found: %s", args.input)
        sys.exit(1)
    except ConversionError as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
