"""
Field accessor cache for dynamic queries.

Maps (entity model, field name) to the mapped column attribute used to build
filter and sort expressions. Entries are resolved lazily on first lookup and
kept for the process lifetime; the set of models and columns is fixed at
import time so nothing is ever evicted.
"""

import re
import threading
from dataclasses import dataclass, field
from types import UnionType
from typing import Any, Dict, Optional, Tuple, Type, Union, get_args, get_origin
from pydantic import TypeAdapter
from sqlalchemy import String, inspect as sa_inspect
from framework.logging.logger import get_logger
from .errors import UnknownFieldError

logger = get_logger("reflection_cache")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_snake_case(name: str) -> str:
    """FullName / fullName -> full_name."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True)
class FieldAccessor:
    """Resolved column metadata for one (model, field name) pair."""
    model: type
    field_name: str
    attribute_name: str
    column: Any = field(repr=False)
    python_type: type = object
    adapter: Optional[TypeAdapter] = field(default=None, repr=False, compare=False)

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def coerce(self, value: Any) -> Any:
        """Convert a raw wire value to the column's Python type (pydantic lax mode)."""
        if value is None or self.adapter is None:
            return value
        return self.adapter.validate_python(value)


class ReflectionCacheProvider:
    """Process-wide, thread-safe cache of FieldAccessor entries."""

    def __init__(self):
        self._cache: Dict[Tuple[type, str], FieldAccessor] = {}
        self._lock = threading.Lock()
        self.resolution_count = 0

    def get_field(self, model: Type[Any], field_name: str) -> FieldAccessor:
        """Return the cached accessor, resolving it on first use."""
        key = (model, field_name)
        accessor = self._cache.get(key)
        if accessor is not None:
            return accessor

        with self._lock:
            # Another thread may have populated the key while we waited
            accessor = self._cache.get(key)
            if accessor is None:
                accessor = self._resolve(model, field_name)
                self.resolution_count += 1
                self._cache[key] = accessor
        return accessor

    def _resolve(self, model: Type[Any], field_name: str) -> FieldAccessor:
        mapper = sa_inspect(model)
        columns = {prop.key: prop for prop in mapper.column_attrs}

        prop = columns.get(field_name) or columns.get(to_snake_case(field_name))
        if prop is None:
            wanted = field_name.replace("_", "").lower()
            for key, candidate in columns.items():
                if key.replace("_", "").lower() == wanted:
                    prop = candidate
                    break

        if prop is None:
            logger.warning(f"Unresolvable field '{field_name}' on {model.__name__}")
            raise UnknownFieldError(field_name, model.__name__)

        python_type = _column_python_type(model, prop)
        logger.debug(f"Resolved {model.__name__}.{field_name} -> {prop.key} ({python_type.__name__})")
        return FieldAccessor(
            model=model,
            field_name=field_name,
            attribute_name=prop.key,
            column=getattr(model, prop.key),
            python_type=python_type,
            adapter=TypeAdapter(python_type) if python_type is not object else None,
        )

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        """Drop all entries (tests only)."""
        with self._lock:
            self._cache.clear()
            self.resolution_count = 0


def _column_python_type(model: Type[Any], prop) -> type:
    column_type = prop.columns[0].type
    # TypeDecorator (e.g. SQLModel AutoString) may only know its type via impl
    for candidate in (column_type, getattr(column_type, "impl_instance", None)):
        if candidate is None:
            continue
        if isinstance(candidate, String):
            return str
        try:
            python_type = candidate.python_type
        except NotImplementedError:
            continue
        # Newer SQLAlchemy reports object instead of raising
        if python_type is not object:
            return python_type
    return _annotation_type(model, prop.key)


def _annotation_type(model: Type[Any], key: str) -> type:
    """Declared field type, with Optional[...] unwrapped."""
    model_field = getattr(model, "model_fields", {}).get(key)
    if model_field is None:
        return object
    annotation = model_field.annotation
    if get_origin(annotation) in (Union, UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        annotation = args[0] if len(args) == 1 else object
    return annotation if isinstance(annotation, type) else object


# Shared across all repositories
reflection_cache_provider = ReflectionCacheProvider()


def get_reflection_cache_provider() -> ReflectionCacheProvider:
    """FastAPI dependency returning the process-wide cache."""
    return reflection_cache_provider
