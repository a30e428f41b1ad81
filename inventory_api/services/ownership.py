"""
Ownership resolver - the single access-control relation in this service.
A resource's owner has every right on it; nobody else has any.
Fails closed: malformed ids, missing rows and lookup errors all mean "no".
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.db.base import is_valid_id
from inventory_api.db.models.enums import ResourceType
from inventory_api.db.repositories.folder_repository import FolderRepository
from inventory_api.db.repositories.item_repository import ItemRepository

logger = logging.getLogger(__name__)

_REPOSITORIES = {
    ResourceType.ITEM.value: ItemRepository,
    ResourceType.FOLDER.value: FolderRepository,
}


class OwnershipResolver:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(self, user_id, resource_type: str, resource_id) -> bool:
        repo_cls = _REPOSITORIES.get(getattr(resource_type, "value", resource_type))
        if repo_cls is None or user_id is None or not is_valid_id(resource_id):
            return False
        try:
            resource = await repo_cls(self.session).get_by_id(resource_id)
        except Exception as exc:
            logger.error("Ownership lookup failed for %s: %s", resource_type, type(exc).__name__)
            return False
        if resource is None:
            return False
        return str(resource.user_id) == str(user_id)
