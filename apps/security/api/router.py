from fastapi import APIRouter, Depends, Response
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.config import settings
from framework.database.manager import get_db
from framework.query import ReflectionCacheProvider, get_reflection_cache_provider
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, JwtProvider, get_current_user, get_jwt_provider
from ..schemas import LoginSchema, RegisterSchema, UserProfile, UserQuerySchema
from ..service import UserService

router = APIRouter()

def get_uow(
    db: AsyncSession = Depends(get_db)
) -> UnitOfWork:
    """Dependency: create UnitOfWork."""
    return UnitOfWork(session=db)

def get_user_service(
    uow: UnitOfWork = Depends(get_uow),
    jwt_provider: JwtProvider = Depends(get_jwt_provider),
    reflection_cache_provider: ReflectionCacheProvider = Depends(get_reflection_cache_provider),
) -> UserService:
    """Dependency: create UserService."""
    return UserService(uow, jwt_provider, reflection_cache_provider)

@router.post("/register")
async def register(
    data: RegisterSchema,
    service: UserService = Depends(get_user_service)
):
    """Register a new user."""
    user = await service.register(data)
    return ResponseModel.success(data=user.model_dump(mode="json"))

@router.post("/login")
async def login(
    data: LoginSchema,
    response: Response,
    service: UserService = Depends(get_user_service)
):
    """Login: return JWT and set cookie."""
    result = await service.authenticate(data.user_name, data.password)

    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=result["access_token"],
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )

    return ResponseModel.success(
        data={
            "access_token": result["access_token"],
            "token_type": result["token_type"],
            "expires_at": result["expires_at"].isoformat(),
            "user": result["user"].model_dump(mode="json"),
        }
    )

@router.post("/logout")
async def logout(response: Response):
    """Logout: clear token cookie."""
    response.delete_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )
    return ResponseModel.success(data={"message": "Logged out successfully"})

@router.post("/users/query")
async def query_users(
    dto: UserQuerySchema,
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Filter, sort and page users."""
    page = await service.query_users(dto)
    return ResponseModel.paged(page.items, page.count)

@router.get("/users/{user_id}")
async def get_user(
    user_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    found = await service.get_user(user_id)
    return ResponseModel.success(data=found.model_dump(mode="json"))

@router.put("/users/{user_id}")
async def update_user(
    user_id: int,
    data: UserProfile,
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Replace a user's profile."""
    updated = await service.update_user(user_id, data)
    return ResponseModel.success(data=updated.model_dump(mode="json"))

@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    await service.delete_user(user_id)
    return ResponseModel.success(data={"id": user_id})
