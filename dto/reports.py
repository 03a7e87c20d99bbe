"""
Result DTOs for the optional analysis and transform utilities.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

ColumnType = Literal["number", "boolean", "date", "string"]


class ColumnStatistics(BaseModel):
    type: ColumnType
    non_empty: int
    empty: int
    fill_rate: int  # percent, rounded
    unique: int
    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None


class DataStatistics(BaseModel):
    row_count: int
    column_count: int
    columns: Dict[str, ColumnStatistics] = {}


class ConsistencyReport(BaseModel):
    valid: bool
    errors: List[str] = []


class Page(BaseModel):
    """One page of CSV rows."""
    data: str
    total_pages: int
    current_page: int


class TransformOptions(BaseModel):
    trim_whitespace: bool = False
    remove_empty_rows: bool = False
    normalize_headers: bool = False
    remove_duplicates: bool = False
