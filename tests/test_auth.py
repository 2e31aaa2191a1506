"""Tests for authentication: token handling and the auth service proxy."""

from collections.abc import Callable
from datetime import timedelta

import httpx
import pytest
from httpx import AsyncClient

from app.config import settings
from app.core.security import create_access_token
from app.dependencies import get_auth_http_client
from app.main import app


@pytest.fixture
def auth_upstream():
    """Route the auth proxy to an in-process fake auth service."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/auth/sign-in/email":
            return httpx.Response(
                200,
                json={"user": {"email": "amina@precta.test"}},
                headers={"set-cookie": f"{settings.session_cookie_name}=abc; Path=/; HttpOnly"},
            )
        return httpx.Response(404, json={"message": "Not found"})

    async def override():
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://auth.test"
        ) as http_client:
            yield http_client

    app.dependency_overrides[get_auth_http_client] = override
    yield seen
    app.dependency_overrides.pop(get_auth_http_client, None)


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Authentication required"}
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_invalid_token(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Could not validate credentials"


@pytest.mark.asyncio
async def test_expired_token(client: AsyncClient, patient: dict) -> None:
    token = create_access_token(
        data={"sub": patient["id"]}, expires_delta=timedelta(minutes=-5)
    )
    response = await client.get(
        "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_for_unknown_user(client: AsyncClient) -> None:
    token = create_access_token(data={"sub": "ghost"}, expires_delta=timedelta(minutes=5))
    response = await client.get(
        "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "User not found"


@pytest.mark.asyncio
async def test_session_cookie_is_accepted(
    client: AsyncClient, patient: dict, headers_for: Callable
) -> None:
    token = headers_for(patient)["Authorization"].removeprefix("Bearer ")
    response = await client.get(
        "/api/v1/users/me", headers={"Cookie": f"{settings.session_cookie_name}={token}"}
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == patient["id"]


@pytest.mark.asyncio
async def test_proxy_forwards_to_auth_service(client: AsyncClient, auth_upstream) -> None:
    response = await client.post(
        "/api/v1/auth/sign-in/email?redirect=home",
        json={"email": "amina@precta.test", "password": "secret"},
    )
    assert response.status_code == 200
    assert response.json() == {"user": {"email": "amina@precta.test"}}
    assert response.headers["set-cookie"].startswith(f"{settings.session_cookie_name}=abc")

    forwarded = auth_upstream[0]
    assert forwarded.method == "POST"
    assert forwarded.url.path == "/auth/sign-in/email"
    assert forwarded.url.params["redirect"] == "home"
    assert b"amina@precta.test" in forwarded.content


@pytest.mark.asyncio
async def test_proxy_relays_upstream_errors(client: AsyncClient, auth_upstream) -> None:
    response = await client.get("/api/v1/auth/unknown")
    assert response.status_code == 404
    assert response.json() == {"message": "Not found"}


@pytest.mark.asyncio
async def test_proxy_upstream_unreachable(client: AsyncClient) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def override():
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://auth.test"
        ) as http_client:
            yield http_client

    app.dependency_overrides[get_auth_http_client] = override
    try:
        response = await client.post("/api/v1/auth/sign-out")
    finally:
        app.dependency_overrides.pop(get_auth_http_client, None)

    assert response.status_code == 502
    assert response.json() == {"success": False, "error": "Authentication service unavailable"}
