"""Tests for authentication endpoints and bearer-token checks."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.security import create_refresh_token
from src.integrations.google import GoogleUserInfo
from src.models.user import User


@pytest.mark.asyncio
async def test_me_returns_current_user(authed_client: AsyncClient, user: User) -> None:
    response = await authed_client.get("/api/auth/me")
    assert response.status_code == 200
    payload = response.json()
    assert payload["id"] == user.id
    assert payload["full_name"] == "Jane Smith"


@pytest.mark.asyncio
async def test_missing_token_returns_401(api_client: AsyncClient) -> None:
    response = await api_client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_garbage_token_returns_401(api_client: AsyncClient) -> None:
    response = await api_client.get(
        "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_refresh_token_cannot_authenticate_requests(
    api_client: AsyncClient, user: User
) -> None:
    response = await api_client.get(
        "/api/auth/me",
        headers={"Authorization": f"Bearer {create_refresh_token(user.id)}"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_issues_new_pair(api_client: AsyncClient, user: User) -> None:
    response = await api_client.post(
        "/api/auth/refresh", json={"refresh_token": create_refresh_token(user.id)}
    )
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["token_type"] == "bearer"

    me = await api_client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
    )
    assert me.json()["id"] == user.id


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(
    api_client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    access = auth_headers["Authorization"].removeprefix("Bearer ")
    response = await api_client.post("/api/auth/refresh", json={"refresh_token": access})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_google_login_unconfigured_returns_503(
    api_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(settings, "google_client_id", None)
    response = await api_client.post("/api/auth/google", json={"credential": "abc"})
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_google_login_provisions_user(
    api_client: AsyncClient,
    db_session: AsyncSession,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """First sign-in creates the user; the access token then works."""
    monkeypatch.setattr(settings, "google_client_id", "client-id.apps.googleusercontent.com")
    info = GoogleUserInfo(
        sub="google-123",
        email="sam@example.com",
        name="Sam Lee",
        picture="https://example.com/sam.png",
    )
    with patch(
        "src.api.auth.verify_google_credential_async",
        AsyncMock(return_value=info),
    ):
        response = await api_client.post("/api/auth/google", json={"credential": "token"})

    assert response.status_code == 200
    access = response.json()["access_token"]

    result = await db_session.execute(select(User).where(User.google_sub == "google-123"))
    provisioned = result.scalar_one()
    assert provisioned.username == "sam"
    assert provisioned.full_name == "Sam Lee"

    me = await api_client.get("/api/auth/me", headers={"Authorization": f"Bearer {access}"})
    assert me.json()["email"] == "sam@example.com"


@pytest.mark.asyncio
async def test_google_login_invalid_credential_returns_401(
    api_client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings, "google_client_id", "client-id.apps.googleusercontent.com")
    with patch(
        "src.api.auth.verify_google_credential_async",
        AsyncMock(side_effect=ValueError("Token expired")),
    ):
        response = await api_client.post("/api/auth/google", json={"credential": "token"})
    assert response.status_code == 401
