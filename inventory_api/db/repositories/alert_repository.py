"""
Alert repository - lookups used by the alert deriver and the alerts API.
"""

from datetime import datetime

from sqlalchemy import delete, func, or_, select, update

from inventory_api.db.models.alert import Alert
from inventory_api.db.models.enums import OPEN_ALERT_STATUSES, AlertKind, AlertStatus
from inventory_api.db.repositories.base_repository import BaseRepository


class AlertRepository(BaseRepository[Alert]):
    def __init__(self, session):
        super().__init__(session, Alert)

    async def open_low_quantity_for_item(self, item_id: str) -> Alert | None:
        result = await self.session.execute(
            select(Alert)
            .where(
                Alert.item_id == item_id,
                Alert.kind == AlertKind.LOW_QUANTITY.value,
                Alert.status.in_(OPEN_ALERT_STATUSES),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def resolve_open(self, item_id: str, now: datetime, kind: str | None = None) -> int:
        """Move every active/read alert for item_id to resolved. Returns rows touched."""
        conditions = [Alert.item_id == item_id, Alert.status.in_(OPEN_ALERT_STATUSES)]
        if kind:
            conditions.append(Alert.kind == kind)
        result = await self.session.execute(
            update(Alert)
            .where(*conditions)
            .values(status=AlertStatus.RESOLVED.value, resolved_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def mark_all_read(self, user_id: str, now: datetime) -> int:
        result = await self.session.execute(
            update(Alert)
            .where(Alert.user_id == user_id, Alert.status == AlertStatus.ACTIVE.value)
            .values(status=AlertStatus.READ.value, read_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def status_counts(self, user_id: str) -> dict[str, int]:
        result = await self.session.execute(
            select(Alert.status, func.count()).where(Alert.user_id == user_id).group_by(Alert.status)
        )
        return {status: int(n) for status, n in result.all()}

    async def delete_stale(self, now: datetime, retention_cutoff: datetime) -> int:
        """Remove expired alerts and anything older than the retention horizon, any status."""
        result = await self.session.execute(
            delete(Alert)
            .where(or_(Alert.expires_at < now, Alert.created_at < retention_cutoff))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
