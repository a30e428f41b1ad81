"""
Alert deriver - turns resource state changes into alert records.

Low-stock alerts follow the quantity decision table:

    previous > min_level  and new <= min_level  -> ensure an open low_quantity alert
    previous <= min_level and new > min_level   -> resolve open low_quantity alerts
    previous > 0          and new == 0          -> ensure an open low_quantity alert
    anything else                               -> nothing

"Ensure" is idempotent: an open (active/read) low_quantity alert for the item
is refreshed in place, never duplicated. Informational alerts for item and
folder activity, bulk operations and system notices expire on their own and
are swept by cleanup().

Every public method runs in its own session and swallows its errors after
logging them, so alert bookkeeping can never fail the triggering request.
"""

import logging
from datetime import timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inventory_api.config import Settings
from inventory_api.db.base import utcnow
from inventory_api.db.models.alert import Alert
from inventory_api.db.models.enums import AlertKind, AlertPriority, AlertStatus, ResourceType
from inventory_api.db.repositories.alert_repository import AlertRepository
from inventory_api.db.repositories.user_repository import UserRepository
from inventory_api.events.payloads import (
    BulkOperation,
    Event,
    FolderCreated,
    FolderDeleted,
    FolderState,
    FolderUpdated,
    ItemCreated,
    ItemDeleted,
    ItemState,
    ItemUpdated,
    QuantityChanged,
    SystemAlertRaised,
    UserActivity,
)

logger = logging.getLogger(__name__)

_ACTIVITY_TITLES = {
    "create": "New {label} Created",
    "update": "{label} Updated",
    "delete": "{label} Deleted",
}

_ACTIVITY_MESSAGES = {
    "create": 'New {kind} "{name}" has been created',
    "update": '{label} "{name}" has been updated',
    "delete": '{label} "{name}" has been deleted',
}


def _low_stock_text(item: ItemState) -> tuple[str, str, str]:
    """title, message, priority for the item's current quantity."""
    if item.quantity == 0:
        return "Out of Stock Alert", f"{item.name} is out of stock", AlertPriority.CRITICAL.value
    return (
        "Low Stock Alert",
        f"{item.name} is running low ({item.quantity} remaining, minimum: {item.min_level})",
        AlertPriority.HIGH.value,
    )


class AlertDeriver:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], settings: Settings):
        self.session_factory = session_factory
        self.settings = settings

    # Quantity rules

    async def on_quantity_changed(self, item: ItemState, previous: int, new: int) -> None:
        threshold = item.min_level
        if previous > threshold and new <= threshold:
            await self.ensure_low_quantity_alert(item)
        elif previous <= threshold and new > threshold:
            await self.resolve_low_quantity_alerts(item)
        elif previous > 0 and new == 0:
            await self.ensure_low_quantity_alert(item)

    async def ensure_low_quantity_alert(self, item: ItemState) -> Alert | None:
        try:
            async with self.session_factory() as session:
                alert = await self._upsert_low_quantity(session, item)
                await session.commit()
                return alert
        except IntegrityError:
            # Lost a race against another writer holding the open alert; refresh theirs
            logger.info("Open low-stock alert already exists for item, refreshing")
            return await self._refresh_existing(item)
        except Exception:
            logger.exception("Failed to create low-stock alert")
            return None

    async def _refresh_existing(self, item: ItemState) -> Alert | None:
        try:
            async with self.session_factory() as session:
                alert = await self._upsert_low_quantity(session, item)
                await session.commit()
                return alert
        except Exception:
            logger.exception("Failed to refresh low-stock alert")
            return None

    async def _upsert_low_quantity(self, session: AsyncSession, item: ItemState) -> Alert:
        repo = AlertRepository(session)
        title, message, priority = _low_stock_text(item)
        alert = await repo.open_low_quantity_for_item(item.id)
        if alert is not None:
            alert.status = AlertStatus.ACTIVE.value
            alert.read_at = None
            alert.title = title
            alert.message = message
            alert.priority = priority
            alert.threshold = item.min_level
            alert.current_value = item.quantity
            alert.details = {**(alert.details or {}), "item_name": item.name, "quantity": item.quantity}
            alert.updated_at = utcnow()
            return await repo.save(alert)
        return await repo.add(
            Alert(
                user_id=item.user_id,
                item_id=item.id,
                folder_id=item.folder_id,
                kind=AlertKind.LOW_QUANTITY.value,
                priority=priority,
                title=title,
                message=message,
                threshold=item.min_level,
                current_value=item.quantity,
                details={"item_name": item.name, "quantity": item.quantity},
            )
        )

    async def resolve_low_quantity_alerts(self, item: ItemState) -> int:
        try:
            async with self.session_factory() as session:
                n = await AlertRepository(session).resolve_open(
                    item.id, utcnow(), kind=AlertKind.LOW_QUANTITY.value
                )
                await session.commit()
                return n
        except Exception:
            logger.exception("Failed to resolve low-stock alerts")
            return 0

    # Lifecycle and informational alerts

    async def on_resource_deleted(self, item: ItemState) -> int:
        """Close every open alert pointing at a deleted item."""
        try:
            async with self.session_factory() as session:
                n = await AlertRepository(session).resolve_open(item.id, utcnow())
                await session.commit()
                return n
        except Exception:
            logger.exception("Failed to resolve alerts for deleted item")
            return 0

    async def on_resource_activity(
        self,
        resource_type: str,
        resource: ItemState | FolderState,
        action: str,
        actor_id: str,
        changes: dict[str, Any] | None = None,
    ) -> Alert | None:
        resource_type = getattr(resource_type, "value", resource_type)
        is_item = resource_type == ResourceType.ITEM.value
        label = "Item" if is_item else "Folder"
        kind = AlertKind.ITEM_ACTIVITY if is_item else AlertKind.FOLDER_ACTIVITY
        fmt = {"label": label, "kind": resource_type, "name": resource.name}
        # Deleted resources are named in details only, nothing left to point at
        ref = None if action == "delete" else resource.id
        details: dict[str, Any] = {f"{resource_type}_name": resource.name, "action": action}
        if changes:
            details["changes"] = changes
        return await self._create(
            Alert(
                user_id=actor_id,
                item_id=ref if is_item else None,
                folder_id=resource.folder_id if is_item else ref,
                kind=kind.value,
                priority=AlertPriority.MEDIUM.value if action == "delete" else AlertPriority.LOW.value,
                title=_ACTIVITY_TITLES.get(action, "{label} Activity").format(**fmt),
                message=_ACTIVITY_MESSAGES.get(action, '{label} "{name}" activity').format(**fmt),
                details=details,
                expires_at=utcnow() + timedelta(hours=self.settings.item_activity_alert_ttl_hours),
            )
        )

    async def on_bulk_operation(
        self, operation: str, count: int, actor_id: str, details: dict[str, Any] | None = None
    ) -> Alert | None:
        return await self._create(
            Alert(
                user_id=actor_id,
                kind=AlertKind.BULK_OPERATION.value,
                priority=AlertPriority.MEDIUM.value,
                title="Bulk Operation Complete",
                message=f"Bulk {operation} completed for {count} items",
                details={**(details or {}), "operation": operation, "count": count},
                expires_at=utcnow() + timedelta(hours=self.settings.bulk_alert_ttl_hours),
            )
        )

    async def on_system_alert(
        self,
        title: str,
        message: str,
        priority: str = AlertPriority.MEDIUM.value,
        user_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> list[Alert]:
        """One alert for user_id, or one per active user when user_id is None."""
        try:
            async with self.session_factory() as session:
                recipients = [user_id] if user_id else await UserRepository(session).active_user_ids()
                expires_at = utcnow() + timedelta(hours=self.settings.system_alert_ttl_hours)
                repo = AlertRepository(session)
                alerts = []
                for recipient in recipients:
                    alerts.append(
                        await repo.add(
                            Alert(
                                user_id=recipient,
                                kind=AlertKind.SYSTEM.value,
                                priority=priority,
                                title=title[:100],
                                message=message[:500],
                                details=dict(details or {}),
                                expires_at=expires_at,
                            )
                        )
                    )
                await session.commit()
                return alerts
        except Exception:
            logger.exception("Failed to create system alert")
            return []

    async def _create(self, alert: Alert) -> Alert | None:
        try:
            async with self.session_factory() as session:
                alert = await AlertRepository(session).add(alert)
                await session.commit()
                return alert
        except Exception:
            logger.exception("Failed to create %s alert", alert.kind)
            return None

    # Maintenance

    async def cleanup(self, now=None) -> int:
        """Delete alerts past expiry or older than the retention horizon."""
        now = now or utcnow()
        cutoff = now - timedelta(days=self.settings.alert_retention_days)
        try:
            async with self.session_factory() as session:
                n = await AlertRepository(session).delete_stale(now, cutoff)
                await session.commit()
        except Exception:
            logger.exception("Alert cleanup failed")
            return 0
        logger.info("Cleaned up %d expired alerts", n)
        return n

    # Subscriber

    async def handle(self, event: Event) -> None:
        item, folder = ResourceType.ITEM, ResourceType.FOLDER
        match event:
            case ItemCreated(item=state, actor_id=actor):
                await self.on_resource_activity(item, state, "create", actor)
                if state.is_low_stock:
                    await self.ensure_low_quantity_alert(state)
            case ItemUpdated(item=state, previous=before, actor_id=actor, changes=changes):
                await self.on_resource_activity(item, state, "update", actor, changes)
                if before.quantity != state.quantity or before.min_level != state.min_level:
                    await self._reconcile_threshold(before, state)
            case ItemDeleted(item=state, actor_id=actor):
                await self.on_resource_activity(item, state, "delete", actor)
                await self.on_resource_deleted(state)
            case QuantityChanged(item=state, previous=previous, next=new):
                await self.on_quantity_changed(state, previous, new)
            case FolderCreated(folder=state, actor_id=actor):
                await self.on_resource_activity(folder, state, "create", actor)
            case FolderUpdated(folder=state, actor_id=actor, changes=changes):
                await self.on_resource_activity(folder, state, "update", actor, changes)
            case FolderDeleted(folder=state, actor_id=actor):
                await self.on_resource_activity(folder, state, "delete", actor)
            case BulkOperation(operation=operation, count=count, actor_id=actor, details=details):
                await self.on_bulk_operation(operation, count, actor, details)
                # Per-item bookkeeping without per-item notifications
                if operation == "delete":
                    for state in event.before:
                        await self.on_resource_deleted(state)
                else:
                    for before, after in zip(event.before, event.after):
                        await self._reconcile_threshold(before, after)
            case SystemAlertRaised(title=title, message=message, priority=priority, user_id=user_id, details=details):
                await self.on_system_alert(title, message, priority, user_id, details)
            case UserActivity():
                pass

    async def _reconcile_threshold(self, before: ItemState, after: ItemState) -> None:
        """
        An edit can move quantity, min_level or both. With the threshold fixed,
        quantity moves go through the decision table; once min_level moves, the
        low-stock state before the edit is judged against the old threshold.
        """
        if before.min_level == after.min_level:
            await self.on_quantity_changed(after, before.quantity, after.quantity)
        elif after.is_low_stock and not before.is_low_stock:
            await self.ensure_low_quantity_alert(after)
        elif before.is_low_stock and not after.is_low_stock:
            await self.resolve_low_quantity_alerts(after)
        elif before.quantity > 0 and after.quantity == 0:
            await self.ensure_low_quantity_alert(after)
