"""
Folder service - folder tree management.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.errors import BadRequestError, NotFoundError
from inventory_api.db.base import is_valid_id
from inventory_api.db.models.enums import ActivityAction
from inventory_api.db.models.folder import Folder
from inventory_api.db.models.item import Item
from inventory_api.db.repositories.folder_repository import FolderRepository
from inventory_api.db.repositories.item_repository import ItemRepository
from inventory_api.events.dispatcher import EventDispatcher
from inventory_api.events.payloads import FolderCreated, FolderDeleted, FolderState, FolderUpdated
from inventory_api.schemas.folder import FolderCreate, FolderNode, FolderResponse, FolderUpdate
from inventory_api.services.item_service import diff_fields


class FolderService:
    def __init__(self, session: AsyncSession, dispatcher: EventDispatcher):
        self.session = session
        self.folder_repo = FolderRepository(session)
        self.item_repo = ItemRepository(session)
        self.dispatcher = dispatcher

    async def _publish_after_commit(self, event) -> None:
        await self.session.commit()
        self.dispatcher.publish(event)

    async def get(self, user_id: str, folder_id: str) -> Folder:
        folder = await self.folder_repo.get_owned(folder_id, user_id) if is_valid_id(folder_id) else None
        if folder is None:
            raise NotFoundError("Folder not found")
        return folder

    async def create(self, user_id: str, data: FolderCreate) -> Folder:
        if data.parent_id is not None:
            await self.get(user_id, data.parent_id)
        folder = await self.folder_repo.add(Folder(**data.model_dump(), user_id=user_id))
        await self._publish_after_commit(FolderCreated(folder=FolderState.from_model(folder), actor_id=user_id))
        return folder

    async def list_folders(self, user_id: str, parent_id: str | None = None) -> list[Folder]:
        return await self.folder_repo.list_for_user(
            user_id,
            parent_id=None if parent_id == "null" else parent_id,
            root_only=parent_id == "null",
        )

    async def hierarchy(self, user_id: str) -> list[FolderNode]:
        """Nest the user's folders into a forest. Orphans surface at the top."""
        folders = await self.folder_repo.list_for_user(user_id)
        nodes = {f.id: FolderNode.model_validate(f) for f in folders}
        roots = []
        for node in nodes.values():
            parent = nodes.get(node.parent_id) if node.parent_id else None
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
        return roots

    async def detail(self, user_id: str, folder_id: str) -> dict:
        folder = await self.get(user_id, folder_id)
        data = FolderResponse.model_validate(folder).model_dump()
        data["item_count"] = await self.item_repo.count_in_folder(folder.id)
        data["subfolder_count"] = await self.folder_repo.count_children(folder.id)
        return data

    async def update(self, user_id: str, folder_id: str, data: FolderUpdate) -> Folder:
        folder = await self.get(user_id, folder_id)
        return await self._apply(user_id, folder, data.model_dump(exclude_unset=True), ActivityAction.UPDATE)

    async def _apply(self, user_id: str, folder: Folder, fields: dict, action: ActivityAction) -> Folder:
        changes = diff_fields(folder, fields)
        if not changes:
            return folder
        folder = await self.folder_repo.save(folder)
        await self._publish_after_commit(
            FolderUpdated(
                folder=FolderState.from_model(folder),
                actor_id=user_id,
                changes=changes,
                action=action.value,
            )
        )
        return folder

    async def move(self, user_id: str, folder_id: str, parent_id: str | None) -> Folder:
        folder = await self.get(user_id, folder_id)
        if parent_id is not None:
            if parent_id == folder.id:
                raise BadRequestError("A folder cannot be moved into itself")
            await self.get(user_id, parent_id)
            if await self._is_descendant(user_id, parent_id, folder.id):
                raise BadRequestError("A folder cannot be moved into one of its subfolders")
        return await self._apply(user_id, folder, {"parent_id": parent_id}, ActivityAction.MOVE)

    async def _is_descendant(self, user_id: str, candidate_id: str, ancestor_id: str) -> bool:
        parents = {f.id: f.parent_id for f in await self.folder_repo.list_for_user(user_id)}
        seen = set()
        current = parents.get(candidate_id)
        while current and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            current = parents.get(current)
        return False

    async def delete(self, user_id: str, folder_id: str) -> None:
        folder = await self.get(user_id, folder_id)
        if await self.folder_repo.count_children(folder.id):
            raise BadRequestError("Cannot delete folder with subfolders. Please move or delete subfolders first.")
        if await self.item_repo.count_in_folder(folder.id):
            raise BadRequestError("Cannot delete folder with items. Please move or delete items first.")
        state = FolderState.from_model(folder)
        await self.folder_repo.delete(folder)
        await self._publish_after_commit(FolderDeleted(folder=state, actor_id=user_id))

    async def items(self, user_id: str, folder_id: str, page: int = 1, limit: int = 20) -> tuple[list[Item], int]:
        folder = await self.get(user_id, folder_id)
        conditions = ItemRepository.filters(user_id, folder_id=folder.id)
        rows = await self.item_repo.find(
            *conditions, order_by=[Item.name.asc()], skip=(page - 1) * limit, limit=limit
        )
        return rows, await self.item_repo.count(*conditions)
