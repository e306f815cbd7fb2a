"""Errors raised while translating a dynamic query into SQL."""

from typing import Any
from framework.exceptions.handler import BusinessException


class DynamicQueryError(BusinessException):
    """Caller supplied a filter or sorter that cannot be applied."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message, status_code=400, code=400, detail=detail)


class UnknownFieldError(DynamicQueryError):
    def __init__(self, field: str, entity: str):
        self.field = field
        self.entity = entity
        super().__init__(
            f"Field '{field}' does not exist on {entity}",
            detail={"field": field, "entity": entity},
        )


class UnsupportedOperatorError(DynamicQueryError):
    def __init__(self, field: str, operator: str, python_type: type):
        self.field = field
        self.operator = operator
        super().__init__(
            f"Operator '{operator}' is not supported for field '{field}' of type {python_type.__name__}",
            detail={"field": field, "operator": operator, "type": python_type.__name__},
        )


class InvalidFilterValueError(DynamicQueryError):
    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        super().__init__(
            f"Invalid value {value!r} for field '{field}': {reason}",
            detail={"field": field, "reason": reason},
        )
