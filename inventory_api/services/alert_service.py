"""
Alert service - user-facing status transitions on alerts.
Creation is owned by the AlertDeriver; this service only reads and moves
alerts along active -> read -> resolved | dismissed.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.errors import BadRequestError, NotFoundError
from inventory_api.db.base import is_valid_id, utcnow
from inventory_api.db.models.alert import Alert
from inventory_api.db.models.enums import AlertStatus
from inventory_api.db.repositories.alert_repository import AlertRepository

TERMINAL_STATUSES = (AlertStatus.RESOLVED.value, AlertStatus.DISMISSED.value)


class AlertService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.alert_repo = AlertRepository(session)

    async def get(self, user_id: str, alert_id: str) -> Alert:
        alert = await self.alert_repo.get_owned(alert_id, user_id) if is_valid_id(alert_id) else None
        if alert is None:
            raise NotFoundError("Alert not found")
        return alert

    async def list_alerts(
        self,
        user_id: str,
        *,
        status: str | None = None,
        kind: str | None = None,
        item_id: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Alert], int]:
        conditions = [Alert.user_id == user_id]
        if status:
            conditions.append(Alert.status == status)
        if kind:
            conditions.append(Alert.kind == kind)
        if item_id:
            conditions.append(Alert.item_id == item_id)
        rows = await self.alert_repo.find(
            *conditions, order_by=[Alert.created_at.desc()], skip=(page - 1) * limit, limit=limit
        )
        return rows, await self.alert_repo.count(*conditions)

    async def counts(self, user_id: str) -> dict[str, int]:
        result = {status.value: 0 for status in AlertStatus}
        result.update(await self.alert_repo.status_counts(user_id))
        result["total"] = sum(result[s.value] for s in AlertStatus)
        return result

    async def mark_read(self, user_id: str, alert_id: str) -> Alert:
        alert = await self.get(user_id, alert_id)
        if alert.status == AlertStatus.ACTIVE.value:
            alert.status = AlertStatus.READ.value
            alert.read_at = utcnow()
            alert = await self.alert_repo.save(alert)
        return alert

    async def resolve(self, user_id: str, alert_id: str) -> Alert:
        alert = await self.get(user_id, alert_id)
        if alert.status == AlertStatus.DISMISSED.value:
            raise BadRequestError("Dismissed alerts cannot be resolved")
        if alert.status != AlertStatus.RESOLVED.value:
            alert.status = AlertStatus.RESOLVED.value
            alert.resolved_at = utcnow()
            alert = await self.alert_repo.save(alert)
        return alert

    async def dismiss(self, user_id: str, alert_id: str) -> Alert:
        alert = await self.get(user_id, alert_id)
        if alert.status == AlertStatus.RESOLVED.value:
            raise BadRequestError("Resolved alerts cannot be dismissed")
        if alert.status != AlertStatus.DISMISSED.value:
            alert.status = AlertStatus.DISMISSED.value
            alert.dismissed_at = utcnow()
            alert = await self.alert_repo.save(alert)
        return alert

    async def mark_all_read(self, user_id: str) -> int:
        return await self.alert_repo.mark_all_read(user_id, utcnow())

    async def delete(self, user_id: str, alert_id: str) -> None:
        await self.alert_repo.delete(await self.get(user_id, alert_id))
