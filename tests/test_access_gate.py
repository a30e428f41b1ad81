"""
Ownership and access gate tests - a resource is visible to its owner only,
and a foreign resource is indistinguishable from a missing one.
"""

import pytest
from httpx import AsyncClient

from inventory_api.db.models import Folder, Item
from inventory_api.db.models.enums import ResourceType
from inventory_api.services.ownership import OwnershipResolver


@pytest.fixture
def missing_id() -> str:
    return "0" * 24


@pytest.mark.asyncio
async def test_resolver_owner_and_stranger(session, test_user, other_user):
    item = Item(name="Drill", user_id=test_user.id)
    folder = Folder(name="Garage", user_id=test_user.id)
    session.add_all([item, folder])
    await session.commit()

    resolver = OwnershipResolver(session)
    assert await resolver.resolve(test_user.id, ResourceType.ITEM, item.id) is True
    assert await resolver.resolve(test_user.id, "folder", folder.id) is True
    assert await resolver.resolve(other_user.id, ResourceType.ITEM, item.id) is False
    assert await resolver.resolve(other_user.id, ResourceType.FOLDER, folder.id) is False


@pytest.mark.asyncio
async def test_resolver_fails_closed(session, test_user, missing_id):
    resolver = OwnershipResolver(session)
    assert await resolver.resolve(test_user.id, ResourceType.ITEM, missing_id) is False
    assert await resolver.resolve(test_user.id, ResourceType.ITEM, "not-an-id") is False
    assert await resolver.resolve(test_user.id, ResourceType.ITEM, "A" * 24) is False
    assert await resolver.resolve(None, ResourceType.ITEM, missing_id) is False
    assert await resolver.resolve(test_user.id, ResourceType.USER, test_user.id) is False
    assert await resolver.resolve(test_user.id, "widget", missing_id) is False


@pytest.mark.asyncio
async def test_gate_foreign_item_looks_missing(
    client: AsyncClient, auth_headers: dict, other_headers: dict, missing_id: str
):
    response = await client.post("/api/v1/items", headers=other_headers, json={"name": "Secret"})
    theirs = response.json()["data"]["item"]["id"]

    foreign = await client.get(f"/api/v1/items/{theirs}", headers=auth_headers)
    missing = await client.get(f"/api/v1/items/{missing_id}", headers=auth_headers)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()
    assert foreign.json()["message"] == "Item not found"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, suffix, body",
    [
        ("put", "", {"name": "Mine now"}),
        ("delete", "", None),
        ("patch", "/quantity", {"change": 5}),
        ("post", "/images", {"url": "https://x"}),
        ("put", "/barcode", {"barcode": "999"}),
    ],
)
async def test_gate_blocks_foreign_mutations(
    client: AsyncClient, auth_headers: dict, other_headers: dict, method, suffix, body
):
    response = await client.post("/api/v1/items", headers=other_headers, json={"name": "Secret", "quantity": 1})
    theirs = response.json()["data"]["item"]

    kwargs = {"headers": auth_headers}
    if body is not None:
        kwargs["json"] = body
    response = await client.request(method.upper(), f"/api/v1/items/{theirs['id']}{suffix}", **kwargs)
    assert response.status_code == 404

    response = await client.get(f"/api/v1/items/{theirs['id']}", headers=other_headers)
    after = response.json()["data"]["item"]
    for field in ("name", "quantity", "images", "barcode"):
        assert after[field] == theirs[field]


@pytest.mark.asyncio
async def test_gate_requires_credentials_first(client: AsyncClient, missing_id: str):
    response = await client.get(f"/api/v1/items/{missing_id}")
    assert response.status_code == 401
    response = await client.get(f"/api/v1/folders/{missing_id}", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_gate_foreign_folder(client: AsyncClient, auth_headers: dict, other_headers: dict):
    response = await client.post("/api/v1/folders", headers=other_headers, json={"name": "Private"})
    theirs = response.json()["data"]["folder"]["id"]
    for url in (f"/api/v1/folders/{theirs}", f"/api/v1/folders/{theirs}/items", f"/api/v1/activities/folders/{theirs}"):
        response = await client.get(url, headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Folder not found"
