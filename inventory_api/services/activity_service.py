"""
Activity queries - history listings and aggregate stats.
Writes go through the ActivityRecorder subscriber only.
"""

from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.db.base import utcnow
from inventory_api.db.models.activity import Activity
from inventory_api.db.repositories.activity_repository import ActivityRepository


class ActivityService:
    def __init__(self, session: AsyncSession):
        self.activity_repo = ActivityRepository(session)

    async def list_activities(
        self,
        user_id: str,
        *,
        resource_type: str | None = None,
        resource_id: str | None = None,
        action: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Activity], int]:
        conditions = ActivityRepository.filters(
            user_id, resource_type=resource_type, resource_id=resource_id, action=action, start=start, end=end
        )
        rows = await self.activity_repo.newest_first(conditions, skip=(page - 1) * limit, limit=limit)
        return rows, await self.activity_repo.count(*conditions)

    async def recent(self, user_id: str, limit: int = 10) -> list[Activity]:
        return await self.activity_repo.newest_first(ActivityRepository.filters(user_id), limit=limit)

    async def stats(self, user_id: str, days: int = 30) -> dict:
        since = utcnow() - timedelta(days=days)
        conditions = ActivityRepository.filters(user_id, start=since)
        by_action = await self.activity_repo.count_by(Activity.action, conditions)
        return {
            "days": days,
            "total": sum(by_action.values()),
            "by_action": by_action,
            "by_resource_type": await self.activity_repo.count_by(Activity.resource_type, conditions),
            "daily": await self.activity_repo.daily_counts(conditions),
        }
