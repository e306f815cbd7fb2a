"""Security module repository."""

from typing import Optional
from framework.query import DynamicQueryDto, PagedData, ReflectionCacheProvider
from framework.repository.base import BaseRepository
from .models import User
from .schemas import UserResponse


class UserRepository:
    """User data access; generic operations live on `entities`."""

    def __init__(self, session):
        self.entities: BaseRepository[User] = BaseRepository(session, User)

    async def get_by_user_name(self, user_name: str, tracking: bool = False) -> Optional[User]:
        """Find user by user name."""
        return await self.entities.get_one(User.user_name == user_name, tracking=tracking)

    async def user_name_exists(self, user_name: str) -> bool:
        return await self.entities.exists(User.user_name == user_name)

    async def get_paged_data_for_dynamic_query(
        self,
        dto: DynamicQueryDto,
        reflection_cache_provider: ReflectionCacheProvider,
    ) -> PagedData[UserResponse]:
        """Dynamic query projected to UserResponse; defaults to newest users first."""
        page = await self.entities.get_paged_data_for_dynamic_query(
            dto,
            default_sorter=(User.id, True),
            reflection_cache_provider=reflection_cache_provider,
            tracking=False,
        )
        return PagedData[UserResponse](
            items=[UserResponse.model_validate(user) for user in page.items],
            count=page.count,
        )
