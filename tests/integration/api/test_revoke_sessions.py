import pytest
from httpx import ASGITransport, AsyncClient

from tests.utils.auth_flow import fetch_csrf, login


@pytest.mark.asyncio
async def test_revoke_own_sessions(client: AsyncClient, seed_user):
    user, password = await seed_user("branch_admin")
    await login(client, user.username, password)
    headers = await fetch_csrf(client)

    response = await client.post("/sessions/revoke-all", json={}, headers=headers)

    assert response.status_code == 200
    assert response.json()["revoked_count"] == 1
    assert (await client.get("/auth/me")).status_code == 401


@pytest.mark.asyncio
async def test_branch_admin_cannot_revoke_others(client: AsyncClient, seed_user):
    other, _ = await seed_user("other_branch_admin")
    user, password = await seed_user("branch_admin")
    await login(client, user.username, password)
    headers = await fetch_csrf(client)

    response = await client.post(
        "/sessions/revoke-all", json={"user_id": str(other.id)}, headers=headers
    )

    assert response.status_code == 403
    assert response.json()["error"] == {"code": "FORBIDDEN", "message": "Request denied"}


@pytest.mark.asyncio
async def test_super_admin_revokes_anyone(client: AsyncClient, app, seed_user):
    target, target_password = await seed_user("branch_admin")
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as victim:
        await login(victim, target.username, target_password)

        admin, admin_password = await seed_user("super_admin")
        await login(client, admin.username, admin_password)
        headers = await fetch_csrf(client)

        response = await client.post(
            "/sessions/revoke-all", json={"user_id": str(target.id)}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["revoked_count"] == 1
        assert (await victim.get("/auth/me")).status_code == 401
