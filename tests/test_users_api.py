"""Security module API test cases."""
import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.config import settings
from framework.security import jwt_provider
from apps.security.models import User

PREFIX = settings.API_V1_SECURITY_PREFIX

REGISTER_PAYLOAD = {
    "user_name": "ana.souza",
    "password": "test123456",
    "full_name": "Ana Souza",
    "email": "ana@example.com",
    "date_of_birth": "1991-04-12",
}


class TestRegisterAndLogin:
    """Register and login."""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient):
        response = await client.post(f"{PREFIX}/register", json=REGISTER_PAYLOAD)

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == 200
        assert data["data"]["user_name"] == "ana.souza"
        assert data["data"]["date_of_birth"] == "1991-04-12"
        assert "hashed_password" not in data["data"]
        assert "password" not in data["data"]

    @pytest.mark.asyncio
    async def test_register_duplicate_user_name(self, client: AsyncClient):
        await client.post(f"{PREFIX}/register", json=REGISTER_PAYLOAD)
        response = await client.post(f"{PREFIX}/register", json=REGISTER_PAYLOAD)

        assert response.json()["code"] == 4001

    @pytest.mark.asyncio
    async def test_login_issues_token(self, client: AsyncClient):
        await client.post(f"{PREFIX}/register", json=REGISTER_PAYLOAD)
        response = await client.post(
            f"{PREFIX}/login", json={"user_name": "ana.souza", "password": "test123456"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        payload = jwt_provider.decode(data["access_token"], settings.SECRET_KEY)
        assert payload["sub"] == "ana.souza"
        assert payload["user_id"] == data["user"]["id"]
        assert settings.ACCESS_TOKEN_COOKIE_NAME in response.cookies

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient):
        await client.post(f"{PREFIX}/register", json=REGISTER_PAYLOAD)
        response = await client.post(
            f"{PREFIX}/login", json={"user_name": "ana.souza", "password": "nope"}
        )

        assert response.json()["code"] == 401


class TestUserQuery:
    """Dynamic query endpoint."""

    @pytest.mark.asyncio
    async def test_query_with_filter(self, client: AsyncClient, ten_users):
        body = {
            "filters": [{"field": "FullName", "operator": "contains", "value": "Ana"}],
            "sorters": [{"field": "FullName", "descending": False}],
            "page": 1,
            "size": 2,
        }
        response = await client.post(f"{PREFIX}/users/query", json=body)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["count"] == 3
        assert [item["full_name"] for item in data["items"]] == ["Ana Beatriz Lima", "Ana Souza"]

    @pytest.mark.asyncio
    async def test_query_unknown_field(self, client: AsyncClient, ten_users):
        body = {"filters": [{"field": "Nonexistent", "operator": "equals", "value": 1}]}
        response = await client.post(f"{PREFIX}/users/query", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == 400
        assert "Nonexistent" in data["message"]
        assert data["data"]["field"] == "Nonexistent"

    @pytest.mark.asyncio
    async def test_query_unknown_operator(self, client: AsyncClient, ten_users):
        body = {"filters": [{"field": "FullName", "operator": "regex", "value": "A.*"}]}
        response = await client.post(f"{PREFIX}/users/query", json=body)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_query_size_above_cap(self, client: AsyncClient):
        response = await client.post(f"{PREFIX}/users/query", json={"size": settings.MAX_PAGE_SIZE + 1})

        assert response.status_code == 422
        assert response.json()["code"] == 422

    @pytest.mark.asyncio
    async def test_query_page_above_cap(self, client: AsyncClient):
        response = await client.post(f"{PREFIX}/users/query", json={"page": 10**19})

        assert response.status_code == 422
        assert response.json()["code"] == 422

    @pytest.mark.asyncio
    async def test_query_requires_auth(self, client: AsyncClient):
        from main import app
        from framework.security import get_current_user

        app.dependency_overrides.pop(get_current_user)
        response = await client.post(f"{PREFIX}/users/query", json={})

        assert response.status_code == 401


class TestUserCrud:
    """Get, update and delete."""

    @pytest.mark.asyncio
    async def test_get_user(self, client: AsyncClient, ten_users):
        response = await client.get(f"{PREFIX}/users/{ten_users[3].id}")

        data = response.json()
        assert data["code"] == 200
        assert data["data"]["full_name"] == "Carlos Mendes"

    @pytest.mark.asyncio
    async def test_get_missing_user(self, client: AsyncClient):
        response = await client.get(f"{PREFIX}/users/9999")

        assert response.json()["code"] == 404

    @pytest.mark.asyncio
    async def test_update_user_replaces_profile(self, client: AsyncClient, async_session: AsyncSession, ten_users):
        user_id = ten_users[1].id
        body = {"full_name": "Bruno C. Costa", "date_of_birth": "1988-08-08", "address": "Rua 2"}
        response = await client.put(f"{PREFIX}/users/{user_id}", json=body)

        data = response.json()["data"]
        assert data["full_name"] == "Bruno C. Costa"
        assert data["address"] == "Rua 2"
        assert data["email"] is None

        async_session.expunge_all()
        stored = await async_session.get(User, user_id)
        assert stored.full_name == "Bruno C. Costa"
        assert stored.email is None

    @pytest.mark.asyncio
    async def test_delete_user(self, client: AsyncClient, async_session: AsyncSession, ten_users):
        user_id = ten_users[0].id
        response = await client.delete(f"{PREFIX}/users/{user_id}")
        assert response.json()["code"] == 200

        async_session.expunge_all()
        assert await async_session.get(User, user_id) is None

        response = await client.get(f"{PREFIX}/users/{user_id}")
        assert response.json()["code"] == 404
