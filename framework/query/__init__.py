"""
Dynamic query: runtime filters/sorters translated to SQL, with cached field lookups and pagination.
"""

from .builder import build_predicate, order_by_dynamic, where_dynamic
from .errors import (
    DynamicQueryError,
    InvalidFilterValueError,
    UnknownFieldError,
    UnsupportedOperatorError,
)
from .pagination import normalize_pagination, paginate
from .reflection import (
    FieldAccessor,
    ReflectionCacheProvider,
    get_reflection_cache_provider,
    reflection_cache_provider,
)
from .schemas import DynamicFilter, DynamicQueryDto, DynamicSorter, FilterOperator, PagedData

__all__ = [
    "build_predicate",
    "order_by_dynamic",
    "where_dynamic",
    "DynamicQueryError",
    "InvalidFilterValueError",
    "UnknownFieldError",
    "UnsupportedOperatorError",
    "normalize_pagination",
    "paginate",
    "FieldAccessor",
    "ReflectionCacheProvider",
    "get_reflection_cache_provider",
    "reflection_cache_provider",
    "DynamicFilter",
    "DynamicQueryDto",
    "DynamicSorter",
    "FilterOperator",
    "PagedData",
]
