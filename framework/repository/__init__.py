"""
Repository pattern: generic data access over a SQLModel session, with dynamic paged queries.
"""

from .base import BaseRepository, DefaultSorter, IRepository
from .unit_of_work import UnitOfWork

__all__ = ["BaseRepository", "DefaultSorter", "IRepository", "UnitOfWork"]
