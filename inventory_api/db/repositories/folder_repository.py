"""
Folder repository - folder tree queries.
"""

from inventory_api.db.models.folder import Folder
from inventory_api.db.repositories.base_repository import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    def __init__(self, session):
        super().__init__(session, Folder)

    async def list_for_user(self, user_id: str, parent_id: str | None = None, root_only: bool = False) -> list[Folder]:
        conditions = [Folder.user_id == user_id]
        if root_only:
            conditions.append(Folder.parent_id.is_(None))
        elif parent_id:
            conditions.append(Folder.parent_id == parent_id)
        return await self.find(*conditions, order_by=[Folder.name.asc()], limit=None)

    async def count_children(self, folder_id: str) -> int:
        return await self.count(Folder.parent_id == folder_id)
