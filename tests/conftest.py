"""Test config and shared fixtures."""
import pytest
from datetime import date
from typing import AsyncGenerator, Callable, List
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from main import app
from framework.security import CurrentUser
from apps.security.models import User


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FULL_NAMES = [
    "Ana Souza",
    "Bruno Costa",
    "Ana Beatriz Lima",
    "Carlos Mendes",
    "Diego Rocha",
    "Maria Ana Ferreira",
    "Eduardo Pires",
    "Felipe Gomes",
    "Gustavo Reis",
    "Heitor Nunes",
]


@pytest.fixture
def test_user() -> CurrentUser:
    """Create the authenticated caller."""
    return CurrentUser(id=1, user_name="test_user")


@pytest.fixture(scope="function")
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session over a fresh schema."""
    # Register all table models in metadata
    import apps.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async_session_maker = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def user_factory() -> Callable[..., User]:
    """Build (unsaved) users with unique user names."""
    counter = {"n": 0}

    def _make(full_name: str = "Test User", **overrides) -> User:
        counter["n"] += 1
        values = {
            "user_name": f"user{counter['n']:03d}",
            "full_name": full_name,
            "email": f"user{counter['n']:03d}@example.com",
            "date_of_birth": date(1990, 1, 1),
            "hashed_password": "hashed_password",
        }
        values.update(overrides)
        return User(**values)

    return _make


@pytest.fixture
async def seed_users(async_session: AsyncSession, user_factory) -> Callable:
    """Insert users, commit, and detach everything so the session starts clean."""
    async def _seed(users: List[User]) -> List[User]:
        async_session.add_all(users)
        await async_session.commit()
        async_session.expunge_all()
        return users

    return _seed


@pytest.fixture
async def ten_users(seed_users, user_factory) -> List[User]:
    """Three users whose full name contains 'Ana', seven that do not."""
    return await seed_users([user_factory(full_name=name) for name in FULL_NAMES])


@pytest.fixture
async def twenty_five_users(seed_users, user_factory) -> List[User]:
    return await seed_users([user_factory(full_name=f"Person {i:02d}") for i in range(25)])


@pytest.fixture
async def client(
    async_session: AsyncSession,
    test_user: CurrentUser
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with DB and auth dependencies overridden."""
    from framework.database.manager import get_db
    from framework.security import get_current_user

    async def _get_db():
        yield async_session

    def _get_current_user():
        return test_user

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user] = _get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
