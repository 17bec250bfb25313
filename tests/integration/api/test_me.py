import pytest
from httpx import AsyncClient

from tests.utils.auth_flow import fetch_csrf, login
from tests.utils.json_compare import exclude_keys


@pytest.mark.asyncio
async def test_me_returns_principal(client: AsyncClient, seed_user):
    user, password = await seed_user("branch_admin")
    session_id = (await login(client, user.username, password)).json()["session_id"]

    response = await client.get("/auth/me")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(user.id)
    assert data["session_id"] == session_id
    assert exclude_keys(data, {"id", "session_id"}) == {
        "username": "downtown-chef",
        "role": "BRANCH_ADMIN",
        "branch_id": "branch-downtown",
    }


@pytest.mark.asyncio
async def test_me_accepts_bearer_token(client: AsyncClient, seed_user):
    user, password = await seed_user("super_admin")
    await login(client, user.username, password)
    token = client.cookies.get("access-token")
    client.cookies.clear()

    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["role"] == "SUPER_ADMIN"


@pytest.mark.asyncio
async def test_me_without_token(client: AsyncClient):
    response = await client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "LOGIN_REQUIRED"


@pytest.mark.asyncio
async def test_logout_invalidates_session(client: AsyncClient, seed_user):
    user, password = await seed_user("branch_admin")
    await login(client, user.username, password)
    access_token = client.cookies.get("access-token")

    headers = await fetch_csrf(client)
    response = await client.post("/auth/logout", headers=headers)

    assert response.status_code == 200
    assert client.cookies.get("access-token") is None

    # The access token is still correctly signed but its session is gone
    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {access_token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_without_session_still_succeeds(client: AsyncClient):
    headers = await fetch_csrf(client)

    response = await client.post("/auth/logout", headers=headers)

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_security_headers(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "X-Request-ID" in response.headers
