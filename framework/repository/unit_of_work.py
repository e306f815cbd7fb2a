"""
Unit of Work: owns the session handle and the transaction boundary for one request.
"""

from typing import Dict, Optional, Type
from sqlmodel.ext.asyncio.session import AsyncSession
from .base import BaseRepository, T


class UnitOfWork:
    """Hands out repositories sharing one session; commit/rollback happen here only."""

    def __init__(self, session: Optional[AsyncSession] = None):
        """Initialize UnitOfWork; session must be provided (e.g. UnitOfWork.from_session())."""
        if session is None:
            raise ValueError("Session must be provided. Use UnitOfWork.from_session() or pass session explicitly.")

        self.session = session
        self._repositories: Dict[str, object] = {}

    @classmethod
    async def from_session(cls, session: AsyncSession) -> "UnitOfWork":
        """Create UnitOfWork from an existing session."""
        return cls(session=session)

    def get_repository(self, repo_class):
        """Get or create an entity-specific repository instance (cached)."""
        cache_key = repo_class.__name__
        if cache_key not in self._repositories:
            self._repositories[cache_key] = repo_class(self.session)
        return self._repositories[cache_key]

    def entities(self, model: Type[T]) -> BaseRepository[T]:
        """Get or create the generic repository for a model (cached)."""
        cache_key = f"{BaseRepository.__name__}_{model.__name__}"
        if cache_key not in self._repositories:
            self._repositories[cache_key] = BaseRepository(self.session, model)
        return self._repositories[cache_key]

    async def commit(self) -> None:
        """Commit all changes."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback all changes."""
        await self.session.rollback()

    async def flush(self) -> None:
        """Flush session (e.g. to get auto-increment IDs)."""
        await self.session.flush()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()
