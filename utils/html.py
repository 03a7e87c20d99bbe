"""
Utility to render a Table's headers and rows into an HTML <table> string.
"""

from __future__ import annotations

from typing import List, Sequence

from utils.escaping import escape_html


def render_table_html(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
) -> str:
    """
    Render a header row and positional data rows into an HTML ``<table>``
    string with ``<thead>`` and ``<tbody>`` sections.
    """
    parts: List[str] = ['<table border="1" style="border-collapse:collapse;">']

    # <thead>
    parts.append("  <thead>")
    parts.append("    <tr>")
    for header in headers:
        parts.append(f"      <th>{escape_html(header)}</th>")
    parts.append("    </tr>")
    parts.append("  </thead>")

    # <tbody>
    parts.append("  <tbody>")
    for row in rows:
        parts.append("    <tr>")
        for value in row:
            parts.append(f"      <td>{escape_html(value)}</td>")
        parts.append("    </tr>")
    parts.append("  </tbody>")

    parts.append("</table>")
    return "\n".join(parts)
