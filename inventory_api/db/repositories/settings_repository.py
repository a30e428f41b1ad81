"""
Settings repository - one override document per user.
"""

from sqlalchemy import select

from inventory_api.db.models.settings import UserSettings
from inventory_api.db.repositories.base_repository import BaseRepository


class SettingsRepository(BaseRepository[UserSettings]):
    def __init__(self, session):
        super().__init__(session, UserSettings)

    async def get_for_user(self, user_id: str) -> UserSettings | None:
        result = await self.session.execute(select(UserSettings).where(UserSettings.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: str) -> UserSettings:
        row = await self.get_for_user(user_id)
        if row is None:
            row = await self.add(UserSettings(user_id=user_id, data={}))
        return row
