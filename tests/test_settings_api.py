"""
Settings tests - stored overrides deep-merged over the defaults.
"""

import pytest
from httpx import AsyncClient

from inventory_api.services import settings_service
from inventory_api.services.settings_service import DEFAULT_SETTINGS, SettingsService, deep_merge


def test_deep_merge_nested_and_replace():
    base = {"a": {"x": 1, "y": {"z": 2}}, "tags": [1, 2]}
    merged = deep_merge(base, {"a": {"y": {"w": 3}}, "tags": [9]})
    assert merged == {"a": {"x": 1, "y": {"z": 2, "w": 3}}, "tags": [9]}
    # inputs untouched
    assert base == {"a": {"x": 1, "y": {"z": 2}}, "tags": [1, 2]}


@pytest.mark.asyncio
async def test_defaults_for_new_user(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/settings", headers=auth_headers)
    assert response.json()["data"]["settings"] == DEFAULT_SETTINGS


@pytest.mark.asyncio
async def test_partial_update_keeps_siblings(client: AsyncClient, auth_headers: dict):
    response = await client.put(
        "/api/v1/settings",
        headers=auth_headers,
        json={"notifications": {"email": {"marketing": True}}, "preferences": {"theme": "dark"}},
    )
    settings = response.json()["data"]["settings"]
    assert settings["notifications"]["email"]["marketing"] is True
    assert settings["notifications"]["email"]["lowStock"] is True
    assert settings["preferences"]["theme"] == "dark"
    assert settings["preferences"]["itemsPerPage"] == 20

    response = await client.get("/api/v1/settings/preferences", headers=auth_headers)
    assert response.json()["data"]["preferences"]["theme"] == "dark"


@pytest.mark.asyncio
async def test_section_update_and_reset(client: AsyncClient, auth_headers: dict):
    response = await client.put("/api/v1/settings/security", headers=auth_headers, json={"sessionTimeout": 8})
    assert response.json()["data"]["security"]["sessionTimeout"] == 8
    assert response.json()["data"]["security"]["loginNotifications"] is True

    response = await client.post("/api/v1/settings/reset", headers=auth_headers)
    assert response.json()["data"]["settings"] == DEFAULT_SETTINGS
    response = await client.get("/api/v1/settings/security", headers=auth_headers)
    assert response.json()["data"]["security"]["sessionTimeout"] == 24


@pytest.mark.asyncio
async def test_unknown_section_rejected(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/settings/billing", headers=auth_headers)
    assert response.status_code == 400
    response = await client.put("/api/v1/settings", headers=auth_headers, json={"billing": {"plan": "pro"}})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_settings_are_per_user(client: AsyncClient, auth_headers: dict, other_headers: dict):
    await client.put("/api/v1/settings/preferences", headers=auth_headers, json={"theme": "dark"})
    response = await client.get("/api/v1/settings/preferences", headers=other_headers)
    assert response.json()["data"]["preferences"]["theme"] == "light"


@pytest.mark.asyncio
@pytest.mark.parametrize("write", ["update", "reset"])
async def test_cache_invalidated_only_after_commit(session, test_user, monkeypatch, write):
    seen = []

    async def record_delete(key):
        seen.append((key, session.in_transaction()))

    monkeypatch.setattr(settings_service, "cache_delete", record_delete)
    service = SettingsService(session)
    await service.update(test_user.id, {"preferences": {"theme": "dark"}})
    if write == "reset":
        seen.clear()
        await service.reset(test_user.id)

    assert seen == [(f"settings:{test_user.id}", False)]
