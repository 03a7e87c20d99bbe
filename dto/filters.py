from typing import Literal

from pydantic import BaseModel

FilterOperator = Literal["equals", "contains", "startsWith", "endsWith"]


class FilterSpec(BaseModel):
    """One row predicate for column extraction; comparisons are on strings."""
    column: str
    value: str
    operator: FilterOperator = "equals"
