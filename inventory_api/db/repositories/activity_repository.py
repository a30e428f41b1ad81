"""
Activity repository - append-only writes and history/aggregate reads.
No update path: rows are never modified once written.
"""

from datetime import datetime

from sqlalchemy import func, select

from inventory_api.db.models.activity import Activity
from inventory_api.db.repositories.base_repository import BaseRepository


class ActivityRepository(BaseRepository[Activity]):
    def __init__(self, session):
        super().__init__(session, Activity)

    @staticmethod
    def filters(
        user_id: str,
        *,
        resource_type: str | None = None,
        resource_id: str | None = None,
        action: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list:
        conditions = [Activity.user_id == user_id]
        if resource_type:
            conditions.append(Activity.resource_type == resource_type)
        if resource_id:
            conditions.append(Activity.resource_id == resource_id)
        if action:
            conditions.append(Activity.action == action)
        if start:
            conditions.append(Activity.created_at >= start)
        if end:
            conditions.append(Activity.created_at <= end)
        return conditions

    async def newest_first(self, conditions: list, skip: int = 0, limit: int = 20) -> list[Activity]:
        return await self.find(*conditions, order_by=[Activity.created_at.desc()], skip=skip, limit=limit)

    async def count_by(self, column, conditions: list) -> dict[str, int]:
        result = await self.session.execute(
            select(column, func.count()).where(*conditions).group_by(column)
        )
        return {key: int(n) for key, n in result.all()}

    async def daily_counts(self, conditions: list) -> list[dict]:
        """Bucket activities per calendar day (UTC)."""
        day = func.date(Activity.created_at)
        result = await self.session.execute(
            select(day.label("day"), func.count()).where(*conditions).group_by(day).order_by(day)
        )
        return [{"date": str(d), "count": int(n)} for d, n in result.all()]
