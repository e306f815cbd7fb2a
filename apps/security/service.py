from datetime import timedelta
from loguru import logger
from sqlalchemy.exc import IntegrityError
from framework.config import settings
from framework.exceptions.handler import BusinessException
from framework.query import DynamicQueryDto, PagedData, ReflectionCacheProvider
from framework.repository.unit_of_work import UnitOfWork
from framework.security import JwtProvider, get_password_hash, verify_password
from .models import User
from .repository import UserRepository
from .schemas import RegisterSchema, UserProfile, UserResponse

class UserService:
    def __init__(self, uow: UnitOfWork, jwt_provider: JwtProvider, reflection_cache_provider: ReflectionCacheProvider):
        """Initialize User Service with UnitOfWork and its collaborators."""
        self.uow = uow
        self.jwt_provider = jwt_provider
        self.reflection_cache_provider = reflection_cache_provider

    @property
    def users(self) -> UserRepository:
        return self.uow.get_repository(UserRepository)

    async def register(self, data: RegisterSchema) -> UserResponse:
        """Create a user with a hashed password."""
        if await self.users.user_name_exists(data.user_name):
            raise BusinessException("User name already exists", code=4001)

        user = User(
            hashed_password=get_password_hash(data.password),
            **data.model_dump(exclude={"password"}),
        )
        try:
            await self.users.entities.create(user)
            await self.uow.commit()
        except IntegrityError as e:
            await self.uow.rollback()
            logger.warning(f"Registration conflict for {data.user_name}: {e.orig}")
            raise BusinessException("Registration failed: data conflict", code=400)

        logger.info(f"User {user.user_name} registered with id {user.id}")
        return UserResponse.model_validate(user)

    async def authenticate(self, user_name: str, password: str) -> dict:
        """Verify credentials and issue an access token."""
        user = await self.users.get_by_user_name(user_name)
        if not user or not verify_password(password, user.hashed_password):
            raise BusinessException("Invalid user name or password", code=401)

        token_duration = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        token, expires_at = self.jwt_provider.generate_jwt(
            {"sub": user.user_name, "user_id": user.id},
            token_duration,
            settings.SECRET_KEY,
        )
        logger.info(f"User {user_name} authenticated successfully")
        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_at": expires_at,
            "user": UserResponse.model_validate(user),
        }

    async def get_user(self, user_id: int) -> UserResponse:
        user = await self.users.entities.get_by_id(user_id)
        if user is None:
            raise BusinessException("User not found", code=404)
        return UserResponse.model_validate(user)

    async def update_user(self, user_id: int, data: UserProfile) -> UserResponse:
        """Replace all profile fields of a user."""
        user = await self.users.entities.get_by_id(user_id, tracking=True)
        if user is None:
            raise BusinessException("User not found", code=404)

        for key, value in data.model_dump().items():
            setattr(user, key, value)
        await self.users.entities.update(user)
        await self.uow.commit()
        logger.info(f"User {user_id} updated")
        return UserResponse.model_validate(user)

    async def delete_user(self, user_id: int) -> None:
        user = await self.users.entities.get_by_id(user_id)
        if user is None:
            raise BusinessException("User not found", code=404)

        await self.users.entities.remove(user)
        await self.uow.commit()
        logger.info(f"User {user_id} deleted")

    async def query_users(self, dto: DynamicQueryDto) -> PagedData[UserResponse]:
        return await self.users.get_paged_data_for_dynamic_query(dto, self.reflection_cache_provider)
