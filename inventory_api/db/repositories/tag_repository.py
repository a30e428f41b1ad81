"""
Tag repository - per-user labels.
"""

from sqlalchemy import select

from inventory_api.db.models.tag import Tag
from inventory_api.db.repositories.base_repository import BaseRepository


class TagRepository(BaseRepository[Tag]):
    def __init__(self, session):
        super().__init__(session, Tag)

    async def get_by_name(self, user_id: str, name: str) -> Tag | None:
        result = await self.session.execute(select(Tag).where(Tag.user_id == user_id, Tag.name == name))
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> list[Tag]:
        return await self.find(Tag.user_id == user_id, order_by=[Tag.name.asc()], limit=None)
