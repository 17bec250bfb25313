from typing import Dict

from httpx import AsyncClient, Response


async def fetch_csrf(client: AsyncClient) -> Dict[str, str]:
    """Set the csrf cookie on the client and return the matching header"""
    response = await client.get("/auth/csrf")
    assert response.status_code == 200
    return {"X-CSRF-Token": response.json()["csrf_token"]}


async def login(
    client: AsyncClient, username: str, password: str, address: str = "203.0.113.10"
) -> Response:
    headers = await fetch_csrf(client)
    headers["X-Forwarded-For"] = address
    return await client.post(
        "/auth/login", json={"username": username, "password": password}, headers=headers
    )


def present_refresh_token(client: AsyncClient, refresh_token: str, csrf_token: str) -> None:
    """Replace the client's cookies with a specific refresh token"""
    client.cookies.clear()
    client.cookies.set("refresh-token", refresh_token)
    client.cookies.set("csrf-token", csrf_token)
