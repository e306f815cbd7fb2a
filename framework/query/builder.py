"""
Translate dynamic filter/sorter descriptors into SQLAlchemy expressions.
"""

from typing import Any, Sequence, Type
from pydantic import ValidationError
from sqlalchemy import and_
from .errors import InvalidFilterValueError, UnsupportedOperatorError
from .reflection import FieldAccessor, ReflectionCacheProvider
from .schemas import (
    DynamicFilter,
    DynamicSorter,
    FilterOperator,
    ORDERING_OPERATORS,
    STRING_OPERATORS,
)


def _is_orderable(python_type: type) -> bool:
    if python_type is object or python_type is bool:
        return False
    return not issubclass(python_type, (dict, list))


def _coerce(accessor: FieldAccessor, value: Any) -> Any:
    try:
        return accessor.coerce(value)
    except ValidationError as e:
        raise InvalidFilterValueError(accessor.field_name, value, e.errors()[0]["msg"]) from e


def _check_operator(accessor: FieldAccessor, operator: FilterOperator) -> None:
    python_type = accessor.python_type
    if operator in STRING_OPERATORS and not issubclass(python_type, str):
        raise UnsupportedOperatorError(accessor.field_name, operator.value, python_type)
    if operator in ORDERING_OPERATORS and not _is_orderable(python_type):
        raise UnsupportedOperatorError(accessor.field_name, operator.value, python_type)


def build_predicate(accessor: FieldAccessor, dynamic_filter: DynamicFilter):
    """Build `column OP value` for one filter descriptor."""
    operator = dynamic_filter.operator
    value = dynamic_filter.value
    column = accessor.column
    _check_operator(accessor, operator)

    if operator is FilterOperator.EQUALS:
        return column.is_(None) if value is None else column == _coerce(accessor, value)
    if operator is FilterOperator.NOT_EQUALS:
        return column.is_not(None) if value is None else column != _coerce(accessor, value)

    if operator is FilterOperator.IN:
        if not isinstance(value, (list, tuple, set)):
            raise InvalidFilterValueError(accessor.field_name, value, "expected a list of values")
        return column.in_([_coerce(accessor, item) for item in value])

    if operator is FilterOperator.RANGE:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise InvalidFilterValueError(accessor.field_name, value, "expected [low, high]")
        low, high = value
        if low is None and high is None:
            raise InvalidFilterValueError(accessor.field_name, value, "at least one bound is required")
        bounds = []
        if low is not None:
            bounds.append(column >= _coerce(accessor, low))
        if high is not None:
            bounds.append(column <= _coerce(accessor, high))
        return and_(*bounds)

    if value is None:
        raise InvalidFilterValueError(accessor.field_name, value, f"operator '{operator.value}' needs a value")
    value = _coerce(accessor, value)

    if operator is FilterOperator.CONTAINS:
        return column.contains(value, autoescape=True)
    if operator is FilterOperator.STARTS_WITH:
        return column.startswith(value, autoescape=True)
    if operator is FilterOperator.ENDS_WITH:
        return column.endswith(value, autoescape=True)
    if operator is FilterOperator.GREATER_THAN:
        return column > value
    if operator is FilterOperator.GREATER_THAN_OR_EQUAL:
        return column >= value
    if operator is FilterOperator.LESS_THAN:
        return column < value
    if operator is FilterOperator.LESS_THAN_OR_EQUAL:
        return column <= value

    raise UnsupportedOperatorError(accessor.field_name, operator.value, accessor.python_type)


def where_dynamic(
    statement,
    model: Type[Any],
    filters: Sequence[DynamicFilter],
    reflection_cache_provider: ReflectionCacheProvider,
):
    """AND every filter onto the statement; no filters leaves it unchanged."""
    if not filters:
        return statement
    predicates = [
        build_predicate(reflection_cache_provider.get_field(model, f.field), f)
        for f in filters
    ]
    return statement.where(and_(*predicates))


def order_by_dynamic(
    statement,
    model: Type[Any],
    sorters: Sequence[DynamicSorter],
    reflection_cache_provider: ReflectionCacheProvider,
):
    """Append sort keys in list order: first is primary, the rest break ties."""
    keys = []
    for sorter in sorters:
        column = reflection_cache_provider.get_field(model, sorter.field).column
        keys.append(column.desc() if sorter.descending else column.asc())
    return statement.order_by(*keys)
