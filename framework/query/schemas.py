"""
Dynamic query request/response shapes.

Wire format of a query body:
    {"filters": [{"field", "operator", "value"}], "sorters": [{"field", "descending"}], "page": 1, "size": 10}
"""

from enum import Enum
from typing import Any, Generic, List, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class FilterOperator(str, Enum):
    """Comparison operators accepted in a dynamic filter."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUAL = "gte"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUAL = "lte"
    RANGE = "range"
    IN = "in"


# Operators that only make sense on text columns
STRING_OPERATORS = frozenset({
    FilterOperator.CONTAINS,
    FilterOperator.STARTS_WITH,
    FilterOperator.ENDS_WITH,
})

# Operators that need an orderable column
ORDERING_OPERATORS = frozenset({
    FilterOperator.GREATER_THAN,
    FilterOperator.GREATER_THAN_OR_EQUAL,
    FilterOperator.LESS_THAN,
    FilterOperator.LESS_THAN_OR_EQUAL,
    FilterOperator.RANGE,
})


class DynamicFilter(BaseModel):
    """A single `field OP value` condition."""
    field: str
    operator: FilterOperator = FilterOperator.EQUALS
    value: Any = None


class DynamicSorter(BaseModel):
    """A single sort key; list position decides priority."""
    field: str
    descending: bool = False


class DynamicQueryDto(BaseModel):
    """Runtime filter/sort/page request. Page is 1-based."""
    filters: List[DynamicFilter] = Field(default_factory=list)
    sorters: List[DynamicSorter] = Field(default_factory=list)
    page: int = 1
    size: int = 10


class PagedData(BaseModel, Generic[T]):
    """One page of items plus the total count of matching rows."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: List[T] = Field(default_factory=list)
    count: int = 0
