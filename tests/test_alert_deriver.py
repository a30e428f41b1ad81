"""
Alert deriver tests - the low-stock decision table, one open alert per item,
resolution on recovery and deletion, informational alerts and cleanup.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from inventory_api.config import get_settings
from inventory_api.db.base import utcnow
from inventory_api.db.models import Alert
from inventory_api.db.models.enums import AlertKind, AlertStatus
from inventory_api.events.payloads import ItemState, ItemUpdated
from inventory_api.services.alert_deriver import AlertDeriver


@pytest.fixture
def deriver(session_factory) -> AlertDeriver:
    return AlertDeriver(session_factory, get_settings())


def _state(user_id: str, quantity: int, min_level: int = 5, item_id: str = "1" * 24) -> ItemState:
    return ItemState(id=item_id, user_id=user_id, name="Bolts", quantity=quantity, min_level=min_level)


async def _low_alerts(session_factory, item_id: str = "1" * 24) -> list[Alert]:
    async with session_factory() as s:
        result = await s.execute(
            select(Alert).where(Alert.item_id == item_id, Alert.kind == AlertKind.LOW_QUANTITY.value)
        )
        return list(result.scalars().all())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "previous, new, expect_open",
    [
        (10, 5, True),   # crosses into low stock at the threshold
        (10, 2, True),   # crosses well below
        (6, 0, True),    # straight to empty
        (10, 6, False),  # stays above
        (3, 2, False),   # already low, no new alert without a crossing
    ],
)
async def test_quantity_decision_table(deriver, session_factory, test_user, previous, new, expect_open):
    await deriver.on_quantity_changed(_state(test_user.id, new), previous, new)
    alerts = await _low_alerts(session_factory)
    assert (len(alerts) == 1) is expect_open


@pytest.mark.asyncio
async def test_out_of_stock_when_already_low(deriver, session_factory, test_user):
    """previous > 0 and new == 0 raises an alert even when already below threshold."""
    await deriver.on_quantity_changed(_state(test_user.id, 0), 3, 0)
    [alert] = await _low_alerts(session_factory)
    assert alert.title == "Out of Stock Alert"
    assert alert.priority == "critical"


@pytest.mark.asyncio
async def test_ensure_is_idempotent(deriver, session_factory, test_user):
    await deriver.ensure_low_quantity_alert(_state(test_user.id, 4))
    await deriver.ensure_low_quantity_alert(_state(test_user.id, 2))
    [alert] = await _low_alerts(session_factory)
    assert alert.status == AlertStatus.ACTIVE.value
    assert alert.current_value == 2
    assert alert.threshold == 5


@pytest.mark.asyncio
async def test_ensure_reactivates_read_alert(deriver, session_factory, test_user):
    alert = await deriver.ensure_low_quantity_alert(_state(test_user.id, 4))
    async with session_factory() as s:
        row = await s.get(Alert, alert.id)
        row.status = AlertStatus.READ.value
        await s.commit()

    await deriver.ensure_low_quantity_alert(_state(test_user.id, 1))
    [alert] = await _low_alerts(session_factory)
    assert alert.status == AlertStatus.ACTIVE.value
    assert alert.read_at is None


@pytest.mark.asyncio
async def test_only_one_open_low_quantity_alert_per_item(session, test_user):
    for _ in range(2):
        session.add(
            Alert(
                user_id=test_user.id,
                item_id="1" * 24,
                kind=AlertKind.LOW_QUANTITY.value,
                title="Low Stock Alert",
                message="low",
            )
        )
    with pytest.raises(IntegrityError):
        await session.commit()


@pytest.mark.asyncio
async def test_recovery_resolves_open_alert(deriver, session_factory, test_user):
    await deriver.on_quantity_changed(_state(test_user.id, 2), 10, 2)
    await deriver.on_quantity_changed(_state(test_user.id, 8), 2, 8)
    [alert] = await _low_alerts(session_factory)
    assert alert.status == AlertStatus.RESOLVED.value
    assert alert.resolved_at is not None

    # A fresh crossing opens a new alert next to the resolved one
    await deriver.on_quantity_changed(_state(test_user.id, 1), 8, 1)
    statuses = sorted(a.status for a in await _low_alerts(session_factory))
    assert statuses == ["active", "resolved"]


@pytest.mark.asyncio
async def test_low_stock_lifecycle_over_http(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/items", headers=auth_headers, json={"name": "Bolts", "quantity": 10, "min_level": 5}
    )
    item_id = response.json()["data"]["item"]["id"]
    quantity_url = f"/api/v1/items/{item_id}/quantity"

    await client.patch(quantity_url, headers=auth_headers, json={"change": -6})
    await client.patch(quantity_url, headers=auth_headers, json={"change": -1})
    response = await client.get(f"/api/v1/alerts?kind=low_quantity&item_id={item_id}", headers=auth_headers)
    alerts = response.json()["data"]["alerts"]
    assert len(alerts) == 1
    assert alerts[0]["status"] == "active"

    await client.patch(quantity_url, headers=auth_headers, json={"change": 20})
    response = await client.get("/api/v1/alerts?kind=low_quantity&status=active", headers=auth_headers)
    assert response.json()["data"]["alerts"] == []


@pytest.mark.asyncio
async def test_raising_threshold_opens_alert(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/items", headers=auth_headers, json={"name": "Nails", "quantity": 10, "min_level": 2}
    )
    item_id = response.json()["data"]["item"]["id"]
    await client.put(f"/api/v1/items/{item_id}", headers=auth_headers, json={"min_level": 12})
    response = await client.get(f"/api/v1/alerts?kind=low_quantity&item_id={item_id}", headers=auth_headers)
    assert [a["status"] for a in response.json()["data"]["alerts"]] == ["active"]

    await client.put(f"/api/v1/items/{item_id}", headers=auth_headers, json={"min_level": 1})
    response = await client.get(f"/api/v1/alerts?kind=low_quantity&item_id={item_id}", headers=auth_headers)
    assert [a["status"] for a in response.json()["data"]["alerts"]] == ["resolved"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "created, edit, expected",
    [
        ({"quantity": 5, "min_level": 10}, {"quantity": 6, "min_level": 3}, ["resolved"]),
        ({"quantity": 5, "min_level": 3}, {"quantity": 4, "min_level": 10}, ["active"]),
    ],
)
async def test_editing_quantity_and_threshold_together(
    client: AsyncClient, auth_headers: dict, created, edit, expected
):
    response = await client.post("/api/v1/items", headers=auth_headers, json={"name": "Rivets", **created})
    item_id = response.json()["data"]["item"]["id"]
    await client.put(f"/api/v1/items/{item_id}", headers=auth_headers, json=edit)
    response = await client.get(f"/api/v1/alerts?kind=low_quantity&item_id={item_id}", headers=auth_headers)
    assert [a["status"] for a in response.json()["data"]["alerts"]] == expected


@pytest.mark.asyncio
async def test_emptying_while_lowering_threshold_flags_out_of_stock(deriver, session_factory, test_user):
    before = _state(test_user.id, 3, min_level=5)
    after = _state(test_user.id, 0, min_level=2)
    await deriver.handle(ItemUpdated(item=after, previous=before, actor_id=test_user.id, changes={}))
    [alert] = await _low_alerts(session_factory)
    assert alert.title == "Out of Stock Alert"
    assert alert.status == AlertStatus.ACTIVE.value


@pytest.mark.asyncio
async def test_creating_low_item_opens_alert(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/items", headers=auth_headers, json={"name": "Tape", "quantity": 1, "min_level": 3}
    )
    item_id = response.json()["data"]["item"]["id"]
    response = await client.get(f"/api/v1/alerts?kind=low_quantity&item_id={item_id}", headers=auth_headers)
    assert len(response.json()["data"]["alerts"]) == 1


@pytest.mark.asyncio
async def test_deleting_item_resolves_its_alerts(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/items", headers=auth_headers, json={"name": "Glue", "quantity": 0, "min_level": 3}
    )
    item_id = response.json()["data"]["item"]["id"]
    await client.delete(f"/api/v1/items/{item_id}", headers=auth_headers)

    response = await client.get(f"/api/v1/alerts?item_id={item_id}", headers=auth_headers)
    assert {a["status"] for a in response.json()["data"]["alerts"]} == {"resolved"}

    response = await client.get("/api/v1/alerts?kind=item_activity", headers=auth_headers)
    deleted = [a for a in response.json()["data"]["alerts"] if a["details"]["action"] == "delete"]
    assert deleted[0]["item_id"] is None
    assert deleted[0]["details"]["item_name"] == "Glue"


@pytest.mark.asyncio
async def test_bulk_operation_yields_one_summary_alert(client: AsyncClient, auth_headers: dict):
    ids = []
    for name in ("A", "B", "C"):
        r = await client.post("/api/v1/items", headers=auth_headers, json={"name": name, "quantity": 10, "min_level": 1})
        ids.append(r.json()["data"]["item"]["id"])
    await client.post(
        "/api/v1/items/bulk-update", headers=auth_headers, json={"ids": ids, "updates": {"quantity": 0}}
    )

    response = await client.get("/api/v1/alerts?kind=bulk_operation", headers=auth_headers)
    [summary] = response.json()["data"]["alerts"]
    assert summary["message"] == "Bulk update completed for 3 items"

    # Per-item low-stock state is still tracked
    response = await client.get("/api/v1/alerts?kind=low_quantity", headers=auth_headers)
    assert len(response.json()["data"]["alerts"]) == 3

    response = await client.get("/api/v1/alerts?kind=item_activity", headers=auth_headers)
    assert len(response.json()["data"]["alerts"]) == 3  # the three creates only


@pytest.mark.asyncio
async def test_system_alert_fans_out_to_active_users(deriver, session_factory, test_user, other_user):
    alerts = await deriver.on_system_alert("Maintenance", "Down at 2am", "high")
    assert sorted(a.user_id for a in alerts) == sorted([test_user.id, other_user.id])
    assert all(a.expires_at is not None for a in alerts)

    [single] = await deriver.on_system_alert("Hi", "Just you", user_id=test_user.id)
    assert single.user_id == test_user.id


@pytest.mark.asyncio
async def test_cleanup_removes_expired_and_old(deriver, session_factory, test_user):
    now = utcnow()
    async with session_factory() as s:
        s.add_all([
            Alert(user_id=test_user.id, kind="system", title="expired", message="m", expires_at=now - timedelta(hours=1)),
            Alert(user_id=test_user.id, kind="system", title="fresh", message="m", expires_at=now + timedelta(hours=1)),
            Alert(user_id=test_user.id, kind="system", title="ancient", message="m", created_at=now - timedelta(days=120)),
            Alert(user_id=test_user.id, kind="system", title="kept", message="m"),
        ])
        await s.commit()

    assert await deriver.cleanup(now) == 2
    async with session_factory() as s:
        titles = sorted((await s.execute(select(Alert.title))).scalars().all())
    assert titles == ["fresh", "kept"]


@pytest.mark.asyncio
async def test_deriver_failure_does_not_fail_request(client: AsyncClient, auth_headers: dict, monkeypatch):
    async def broken(self, *args, **kwargs):
        raise RuntimeError("alert store down")

    monkeypatch.setattr(AlertDeriver, "on_resource_activity", broken)
    response = await client.post("/api/v1/items", headers=auth_headers, json={"name": "Resilient"})
    assert response.status_code == 201
    item_id = response.json()["data"]["item"]["id"]

    response = await client.get(f"/api/v1/activities/items/{item_id}", headers=auth_headers)
    assert [a["action"] for a in response.json()["data"]["activities"]] == ["create"]


@pytest.mark.asyncio
async def test_crossing_down_and_back_up(deriver, session_factory, test_user):
    await deriver.on_quantity_changed(_state(test_user.id, 5, min_level=10), 15, 5)
    [alert] = await _low_alerts(session_factory)
    assert alert.status == AlertStatus.ACTIVE.value

    await deriver.on_quantity_changed(_state(test_user.id, 15, min_level=10), 5, 15)
    [alert] = await _low_alerts(session_factory)
    assert alert.status == AlertStatus.RESOLVED.value
    assert alert.resolved_at is not None


@pytest.mark.asyncio
async def test_new_low_item_end_to_end(client: AsyncClient, auth_headers: dict, test_user):
    """Creating an item already below its minimum records one activity and opens one alert."""
    response = await client.post(
        "/api/v1/items",
        headers=auth_headers,
        json={"name": "Widget", "quantity": 5, "min_level": 10, "user_id": test_user.id},
    )
    item_id = response.json()["data"]["item"]["id"]

    response = await client.get(f"/api/v1/items/{item_id}/activities", headers=auth_headers)
    assert [a["action"] for a in response.json()["data"]["activities"]] == ["create"]

    response = await client.get(f"/api/v1/alerts?kind=low_quantity&item_id={item_id}", headers=auth_headers)
    [alert] = response.json()["data"]["alerts"]
    assert alert["status"] == "active"
    assert alert["current_value"] == 5
    assert alert["threshold"] == 10
