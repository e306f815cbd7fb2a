"""
Repository abstract base class and generic implementation.

Repositories only stage changes on the session; the commit boundary belongs to
UnitOfWork. Reads are untracked by default: they return detached copies that
never enter the session's identity map.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, Tuple, Type, TypeVar, Union
from sqlalchemy import exists as sa_exists, func, inspect as sa_inspect
from sqlalchemy.orm import make_transient, make_transient_to_detached
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.logging.logger import get_logger
from framework.query import (
    DynamicQueryDto,
    PagedData,
    ReflectionCacheProvider,
    order_by_dynamic,
    paginate,
    where_dynamic,
)

T = TypeVar("T", bound=SQLModel)

# (column, descending)
DefaultSorter = Tuple[Any, bool]

logger = get_logger("repository")


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Stage entity for insertion."""

    @abstractmethod
    async def remove(self, entity: T) -> None:
        """Stage entity for deletion."""

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Stage a full-row update."""

    @abstractmethod
    async def get_one(self, condition, tracking: bool = False) -> Optional[T]:
        """First entity matching condition, or None."""

    @abstractmethod
    async def get_all(
        self,
        page: int,
        limit: int,
        updateable: bool,
        order_by,
        ascending: bool = True,
        condition=None,
    ) -> List[T]:
        """One ordered page of entities."""

    @abstractmethod
    async def get_count(self, condition=None) -> int:
        """Count entities matching condition."""

    @abstractmethod
    async def get_paged_data_for_dynamic_query(
        self,
        dto: DynamicQueryDto,
        default_sorter: DefaultSorter,
        reflection_cache_provider: ReflectionCacheProvider,
    ) -> PagedData[T]:
        """Filter, sort, count and page entities from a runtime query."""


class BaseRepository(IRepository[T]):
    """Generic SQLModel repository; compose it into entity-specific repositories."""

    def __init__(self, session: AsyncSession, model: Type[T]):
        """Initialize repository with session and model."""
        self.session = session
        self.model = model

    # --- writes ---

    async def create(self, entity: T) -> T:
        self.session.add(entity)
        return entity

    async def create_many(self, entities: Iterable[T]) -> List[T]:
        entities = list(entities)
        self.session.add_all(entities)
        return entities

    async def remove(self, entity: T) -> None:
        """Mark entity deleted; attaches it first when the session does not know it."""
        state = sa_inspect(entity)
        if state.deleted or entity in self.session.deleted:
            return

        if state.pending:
            # Staged but never flushed: cancel the insert
            self.session.expunge(entity)
            return

        if state.transient or state.detached:
            entity = await self.session.merge(entity)
            if sa_inspect(entity).pending:
                # No stored row behind it, nothing to delete
                self.session.expunge(entity)
                return

        await self.session.delete(entity)

    async def update(self, entity: T) -> T:
        """Attach entity and flag every loaded column so the whole row is written."""
        self._attach(entity)
        state = sa_inspect(entity)
        for attr in state.mapper.column_attrs:
            if attr.key not in state.dict:
                continue
            if any(column.primary_key for column in attr.columns):
                continue
            flag_modified(entity, attr.key)
        return entity

    async def track_entity(self, entity: Any) -> Any:
        """Attach an externally built entity (any mapped type) as unmodified."""
        self._attach(entity)
        return entity

    async def modify_entity_state_to_added(self, entity: Any) -> None:
        """Force entity to pending so it is INSERTed on flush."""
        if entity is None:
            return
        state = sa_inspect(entity)
        if state.pending:
            return
        if state.persistent:
            self.session.expunge(entity)
        if not state.transient:
            make_transient(entity)
        self.session.add(entity)

    # --- reads ---

    async def get_by_id(self, id: int, tracking: bool = False) -> Optional[T]:
        """Get entity by ID."""
        return await self.get_one(self.model.id == id, tracking=tracking)

    async def get_one(self, condition, tracking: bool = False) -> Optional[T]:
        statement = self._select(tracking).where(condition).limit(1)
        result = await self.session.exec(statement)
        row = result.first()
        if row is None or tracking:
            return row
        return self._detach_row(row)

    async def exists(self, condition) -> bool:
        statement = select(sa_exists().where(condition))
        result = await self.session.exec(statement)
        return bool(result.one())

    async def get_all(
        self,
        page: int,
        limit: int,
        updateable: bool,
        order_by: Union[str, Any],
        ascending: bool = True,
        condition=None,
    ) -> List[T]:
        if isinstance(order_by, str):
            order_by = getattr(self.model, order_by)

        statement = self._select(updateable)
        if condition is not None:
            statement = statement.where(condition)
        statement = statement.order_by(order_by.asc() if ascending else order_by.desc())
        statement = paginate(statement, page, limit)
        return await self._fetch_all(statement, updateable)

    async def get_count(self, condition=None) -> int:
        statement = select(func.count()).select_from(self.model)
        if condition is not None:
            statement = statement.where(condition)
        result = await self.session.exec(statement)
        return result.one()

    async def get_paged_data_for_dynamic_query(
        self,
        dto: DynamicQueryDto,
        default_sorter: DefaultSorter,
        reflection_cache_provider: ReflectionCacheProvider,
        tracking: bool = True,
    ) -> PagedData[T]:
        """
        Run a runtime query against this entity set.

        Filters are ANDed. Explicit sorters replace the default sorter; the first
        sorter is the primary key and the rest break ties in order. The total
        count is always computed over the filtered set before windowing.
        """
        statement = where_dynamic(
            self._select(tracking), self.model, dto.filters, reflection_cache_provider
        )

        if not dto.sorters:
            order_by, descending = default_sorter
            statement = statement.order_by(order_by.desc() if descending else order_by.asc())
        else:
            statement = order_by_dynamic(statement, self.model, dto.sorters, reflection_cache_provider)

        count = await self._count_statement(statement)
        items = await self._fetch_all(paginate(statement, dto.page, dto.size), tracking)

        logger.debug(
            f"Dynamic query on {self.model.__name__} | filters={len(dto.filters)} "
            f"sorters={len(dto.sorters)} page={dto.page} size={dto.size} | count={count} returned={len(items)}"
        )
        return PagedData(items=items, count=count)

    # --- helpers ---

    def _select(self, tracking: bool):
        """Entity select when tracking, plain column select otherwise."""
        if tracking:
            return select(self.model)
        return select(*self.model.__table__.columns)

    def _detach_row(self, row) -> T:
        entity = self.model(**row._mapping)
        make_transient_to_detached(entity)
        return entity

    async def _fetch_all(self, statement, tracking: bool) -> List[T]:
        result = await self.session.exec(statement)
        rows = result.all()
        if tracking:
            return list(rows)
        return [self._detach_row(row) for row in rows]

    async def _count_statement(self, statement) -> int:
        count_statement = select(func.count()).select_from(statement.order_by(None).subquery())
        result = await self.session.exec(count_statement)
        return result.one()

    def _attach(self, entity: Any) -> None:
        state = sa_inspect(entity)
        if state.transient:
            make_transient_to_detached(entity)
        if state.detached:
            self.session.add(entity)
