"""
Admin API tests - account listing, details and activation.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from inventory_api.db.models import Activity


@pytest.mark.asyncio
async def test_admin_routes_require_admin(client: AsyncClient, auth_headers: dict, other_user):
    response = await client.get("/api/v1/admin/users", headers=auth_headers)
    assert response.status_code == 403
    response = await client.put(
        f"/api/v1/admin/users/{other_user.id}/status", headers=auth_headers, json={"status": "deactivated"}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_users_with_search(client: AsyncClient, admin_headers: dict, test_user, other_user):
    response = await client.get("/api/v1/admin/users", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["pagination"]["total"] == 3

    response = await client.get("/api/v1/admin/users?search=other", headers=admin_headers)
    assert [u["email"] for u in response.json()["data"]["users"]] == ["other@example.com"]


@pytest.mark.asyncio
async def test_user_details(client: AsyncClient, admin_headers: dict, auth_headers: dict, test_user):
    await client.post("/api/v1/items", headers=auth_headers, json={"name": "Drill", "quantity": 3})
    response = await client.get(f"/api/v1/admin/users/{test_user.id}", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == "test@example.com"
    assert data["item_count"] == 1
    assert [a["action"] for a in data["recent_activities"]] == ["create"]


@pytest.mark.asyncio
async def test_unknown_user_is_not_found(client: AsyncClient, admin_headers: dict):
    response = await client.get(f"/api/v1/admin/users/{'f' * 24}", headers=admin_headers)
    assert response.status_code == 404
    response = await client.put("/api/v1/admin/users/nope/status", headers=admin_headers, json={"status": "active"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_deactivate_and_reactivate_account(
    client: AsyncClient, session_factory, admin_user, admin_headers: dict, other_user, other_headers: dict
):
    url = f"/api/v1/admin/users/{other_user.id}/status"
    response = await client.put(url, headers=admin_headers, json={"status": "deactivated"})
    assert response.status_code == 200
    assert response.json()["data"]["user"]["status"] == "deactivated"

    # Existing tokens and fresh logins are both refused
    assert (await client.get("/api/v1/auth/me", headers=other_headers)).status_code == 401
    credentials = {"email": "other@example.com", "password": "password123"}
    response = await client.post("/api/v1/auth/login", json=credentials)
    assert response.status_code == 401

    async with session_factory() as s:
        result = await s.execute(select(Activity).where(Activity.action == "status_change"))
        [activity] = result.scalars().all()
    assert activity.user_id == admin_user.id
    assert activity.resource_type == "user"
    assert activity.resource_id == other_user.id
    assert activity.details["from"] == "active"
    assert activity.details["to"] == "deactivated"

    response = await client.put(url, headers=admin_headers, json={"status": "active"})
    assert response.status_code == 200
    response = await client.post("/api/v1/auth/login", json=credentials)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_status_update_validation(client: AsyncClient, admin_user, admin_headers: dict, other_user):
    response = await client.put(
        f"/api/v1/admin/users/{admin_user.id}/status", headers=admin_headers, json={"status": "deactivated"}
    )
    assert response.status_code == 400
    response = await client.put(
        f"/api/v1/admin/users/{other_user.id}/status", headers=admin_headers, json={"status": "banned"}
    )
    assert response.status_code == 422
