from typing import Optional

import pytest
from fastapi import APIRouter, Depends, status
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from kitchen_iam.api.utils.csrf import require_csrf
from kitchen_iam.api.utils.permissions import ensure_authorized
from kitchen_iam.api.utils.rate_limit import rate_limit
from kitchen_iam.app.use_cases.auth import AuthenticatedPrincipal
from kitchen_iam.depends import get_current_principal
from kitchen_iam.domain.entities import Action, Resource
from kitchen_iam.domain.permissions import ResourceData
from tests.utils.auth_flow import fetch_csrf, login, present_refresh_token

inventory_router = APIRouter()


class InventoryItem(BaseModel):
    branch_id: str
    name: str
    quantity: int


class InventoryCreated(BaseModel):
    branch_id: str
    name: str
    created_by: str
    quantity: Optional[int] = None


@inventory_router.post(
    "/inventory",
    status_code=status.HTTP_201_CREATED,
    response_model=InventoryCreated,
    dependencies=[Depends(rate_limit("api_write")), Depends(require_csrf)],
)
async def create_inventory_item(
    item: InventoryItem,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
):
    ensure_authorized(
        principal, Resource.inventory, Action.create, ResourceData(branch_id=item.branch_id)
    )
    return InventoryCreated(
        branch_id=item.branch_id,
        name=item.name,
        quantity=item.quantity,
        created_by=str(principal.id),
    )


@pytest.fixture
def guarded_app(app):
    app.include_router(inventory_router)
    return app


@pytest.mark.asyncio
async def test_login_write_refresh_replay(guarded_app, seed_user, test_data):
    """
    Branch admin logs in, writes to their own branch, is refused on another
    branch, refreshes, and a replay of the old refresh token ends the session
    """
    user, password = await seed_user("branch_admin")
    own_item = test_data.get_copy("inventory_items")["own_branch"]
    other_item = test_data.get_copy("inventory_items")["other_branch"]

    transport = ASGITransport(app=guarded_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        assert (await login(client, user.username, password)).status_code == 200
        headers = await fetch_csrf(client)

        response = await client.post("/inventory", json=own_item, headers=headers)
        assert response.status_code == 201
        assert response.json()["created_by"] == str(user.id)

        response = await client.post("/inventory", json=other_item, headers=headers)
        assert response.status_code == 403
        assert response.json() == {"error": {"code": "FORBIDDEN", "message": "Request denied"}}

        response = await client.post("/inventory", json=own_item)
        assert response.status_code == 403

        original_refresh = client.cookies.get("refresh-token")
        assert (await client.post("/auth/refresh", headers=headers)).status_code == 200

        # New access token still authorizes writes
        response = await client.post("/inventory", json=own_item, headers=headers)
        assert response.status_code == 201

        present_refresh_token(client, original_refresh, headers["X-CSRF-Token"])
        response = await client.post("/auth/refresh", headers=headers)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "LOGIN_REQUIRED"


@pytest.mark.asyncio
async def test_super_admin_writes_any_branch(guarded_app, seed_user, test_data):
    user, password = await seed_user("super_admin")
    other_item = test_data.get_copy("inventory_items")["other_branch"]

    transport = ASGITransport(app=guarded_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await login(client, user.username, password)
        headers = await fetch_csrf(client)

        response = await client.post("/inventory", json=other_item, headers=headers)

        assert response.status_code == 201


@pytest.mark.asyncio
async def test_write_requires_login(guarded_app, test_data):
    transport = ASGITransport(app=guarded_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        headers = await fetch_csrf(client)

        response = await client.post(
            "/inventory", json=test_data.get_copy("inventory_items")["own_branch"], headers=headers
        )

        assert response.status_code == 401
