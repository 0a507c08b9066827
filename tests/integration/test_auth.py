"""Integration tests: authentication endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from app.core import security
from app.core.security import decode_token
from app.models.enums import UserRole
from tests.conftest import make_user

USERS = "app.api.v1.endpoints.auth.UserService"


@pytest.mark.asyncio
async def test_login_returns_token_pair(async_client: AsyncClient, api_base: str, override_db):
    user = make_user(UserRole.MANAGER)

    with patch(f"{USERS}.authenticate_user", new_callable=AsyncMock) as mock_auth:
        mock_auth.return_value = user
        resp = await async_client.post(
            f"{api_base}/auth/login", json={"email": user.email, "password": "secret1!pw"}
        )

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["role"] == "manager"
    assert data["user_id"] == str(user.id)
    assert decode_token(data["access_token"])["type"] == "access"
    assert decode_token(data["refresh_token"])["type"] == "refresh"


@pytest.mark.asyncio
async def test_login_wrong_password(async_client: AsyncClient, api_base: str, override_db):
    with patch(f"{USERS}.authenticate_user", new_callable=AsyncMock) as mock_auth:
        mock_auth.return_value = None
        resp = await async_client.post(
            f"{api_base}/auth/login", json={"email": "nobody@inkwang.co.kr", "password": "wrong"}
        )

    assert resp.status_code == 401
    assert resp.json()["detail"] == "이메일 또는 비밀번호가 올바르지 않습니다"


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(async_client: AsyncClient, api_base: str, override_db):
    user = make_user()
    access = security.create_access_token({"sub": str(user.id), "role": user.role.value})

    resp = await async_client.post(f"{api_base}/auth/refresh", json={"refresh_token": access})

    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_refresh_issues_new_tokens(async_client: AsyncClient, api_base: str, override_db):
    user = make_user(UserRole.USER)
    refresh = security.create_refresh_token({"sub": str(user.id), "role": user.role.value})

    with patch(f"{USERS}.get_user_by_id", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = user
        resp = await async_client.post(f"{api_base}/auth/refresh", json={"refresh_token": refresh})

    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["user_id"] == str(user.id)


@pytest.mark.asyncio
async def test_refresh_for_deactivated_user(async_client: AsyncClient, api_base: str, override_db):
    user = make_user(UserRole.USER, is_active=False)
    refresh = security.create_refresh_token({"sub": str(user.id), "role": user.role.value})

    with patch(f"{USERS}.get_user_by_id", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = user
        resp = await async_client.post(f"{api_base}/auth/refresh", json={"refresh_token": refresh})

    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_profile(async_client: AsyncClient, api_base: str, login_as):
    user = login_as(UserRole.USER, modules=frozenset())

    resp = await async_client.get(f"{api_base}/auth/me")

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["email"] == user.email
    assert data["name"] == "홍길동"
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_invalid_bearer_token(async_client: AsyncClient, api_base: str, override_db):
    resp = await async_client.get(
        f"{api_base}/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401
