"""
Activity recorder tests - one audit row per event, credentials never stored.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from inventory_api.db.models import Activity
from inventory_api.events.payloads import ItemState, SystemAlertRaised, UserActivity
from inventory_api.services.activity_recorder import ActivityRecorder, redact


def test_redact_nested():
    details = {
        "email": "a@b.c",
        "password": "hunter2",
        "nested": {"token": "t", "keep": 1, "deeper": [{"newPassword": "x", "ok": True}]},
        "access_token": "abc",
        "refreshToken": "r",
    }
    assert redact(details) == {"email": "a@b.c", "nested": {"keep": 1, "deeper": [{"ok": True}]}}


@pytest.mark.asyncio
async def test_record_strips_sensitive_fields(session_factory, session, test_user):
    recorder = ActivityRecorder(session_factory)
    activity = await recorder.record(
        test_user.id, "user", test_user.id, "update_password",
        {"current_password": "old", "new_password": "new", "reason": "rotation"},
    )
    assert activity is not None
    row = (await session.execute(select(Activity))).scalar_one()
    assert row.details == {"reason": "rotation"}


@pytest.mark.asyncio
async def test_record_failure_returns_none(test_user):
    def broken_factory():
        raise RuntimeError("database down")

    recorder = ActivityRecorder(broken_factory)
    assert await recorder.record(test_user.id, "item", "0" * 24, "create") is None


@pytest.mark.asyncio
async def test_system_alert_is_not_recorded(session_factory, session):
    recorder = ActivityRecorder(session_factory)
    await recorder.handle(SystemAlertRaised(title="Maintenance", message="Tonight"))
    assert (await session.execute(select(Activity))).scalars().all() == []


@pytest.mark.asyncio
async def test_user_activity_carries_client_info(session_factory, session, test_user):
    recorder = ActivityRecorder(session_factory)
    await recorder.handle(
        UserActivity(user_id=test_user.id, action="login", ip_address="10.0.0.1", user_agent="pytest")
    )
    row = (await session.execute(select(Activity))).scalar_one()
    assert (row.resource_type, row.resource_id, row.action) == ("user", test_user.id, "login")
    assert row.ip_address == "10.0.0.1"
    assert row.user_agent == "pytest"


@pytest.mark.asyncio
async def test_item_lifecycle_is_audited(client: AsyncClient, auth_headers: dict, test_user):
    item = (await client.post("/api/v1/items", headers=auth_headers, json={"name": "Saw", "quantity": 4})).json()
    item_id = item["data"]["item"]["id"]
    await client.patch(f"/api/v1/items/{item_id}/quantity", headers=auth_headers, json={"change": -1})
    await client.put(f"/api/v1/items/{item_id}", headers=auth_headers, json={"name": "Hand saw"})
    await client.delete(f"/api/v1/items/{item_id}", headers=auth_headers)

    response = await client.get(f"/api/v1/activities?resource_id={item_id}", headers=auth_headers)
    activities = response.json()["data"]["activities"]
    assert [a["action"] for a in activities] == ["delete", "update", "quantity_change", "create"]
    assert all(a["user_id"] == test_user.id for a in activities)
    by_action = {a["action"]: a for a in activities}
    assert by_action["quantity_change"]["details"]["previous_quantity"] == 4
    assert by_action["quantity_change"]["details"]["new_quantity"] == 3
    assert by_action["update"]["details"]["changes"] == {"name": {"from": "Saw", "to": "Hand saw"}}


@pytest.mark.asyncio
async def test_no_activity_for_noop_update(client: AsyncClient, auth_headers: dict):
    item = (await client.post("/api/v1/items", headers=auth_headers, json={"name": "Saw"})).json()
    item_id = item["data"]["item"]["id"]
    await client.put(f"/api/v1/items/{item_id}", headers=auth_headers, json={"name": "Saw"})
    response = await client.get(f"/api/v1/activities/items/{item_id}", headers=auth_headers)
    assert [a["action"] for a in response.json()["data"]["activities"]] == ["create"]


@pytest.mark.asyncio
async def test_bulk_delete_is_one_activity(client: AsyncClient, auth_headers: dict, test_user):
    ids = []
    for name in ("A", "B", "C"):
        r = await client.post("/api/v1/items", headers=auth_headers, json={"name": name})
        ids.append(r.json()["data"]["item"]["id"])
    await client.post("/api/v1/items/bulk-delete", headers=auth_headers, json={"ids": ids})

    response = await client.get("/api/v1/activities?action=bulk_delete", headers=auth_headers)
    activities = response.json()["data"]["activities"]
    assert len(activities) == 1
    assert activities[0]["resource_type"] == "user"
    assert activities[0]["resource_id"] == test_user.id
    assert sorted(activities[0]["details"]["item_ids"]) == sorted(ids)
    assert activities[0]["details"]["count"] == 3


@pytest.mark.asyncio
async def test_activity_stats_and_recent(client: AsyncClient, auth_headers: dict):
    for name in ("A", "B"):
        await client.post("/api/v1/items", headers=auth_headers, json={"name": name})
    await client.post("/api/v1/folders", headers=auth_headers, json={"name": "F"})

    stats = (await client.get("/api/v1/activities/stats", headers=auth_headers)).json()["data"]["stats"]
    assert stats["total"] == 3
    assert stats["by_action"] == {"create": 3}
    assert stats["by_resource_type"] == {"item": 2, "folder": 1}

    recent = (await client.get("/api/v1/activities/recent?limit=2", headers=auth_headers)).json()["data"]
    assert len(recent["activities"]) == 2
