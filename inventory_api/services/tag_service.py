"""
Tag service - per-user labels. Items store tag names, so renames and deletes
are pushed into the owner's items here.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.errors import ConflictError, NotFoundError
from inventory_api.db.base import is_valid_id
from inventory_api.db.models.tag import Tag
from inventory_api.db.repositories.item_repository import ItemRepository
from inventory_api.db.repositories.tag_repository import TagRepository
from inventory_api.schemas.tag import TagCreate, TagResponse, TagUpdate


class TagService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.tag_repo = TagRepository(session)
        self.item_repo = ItemRepository(session)

    async def get(self, user_id: str, tag_id: str) -> Tag:
        tag = await self.tag_repo.get_owned(tag_id, user_id) if is_valid_id(tag_id) else None
        if tag is None:
            raise NotFoundError("Tag not found")
        return tag

    async def _usage(self, user_id: str) -> dict[str, int]:
        counts: dict[str, int] = {}
        for item in await self.item_repo.list_all_for_user(user_id):
            for name in set(item.tags or []):
                counts[name] = counts.get(name, 0) + 1
        return counts

    async def list_tags(self, user_id: str) -> list[TagResponse]:
        usage = await self._usage(user_id)
        return [
            TagResponse.model_validate(tag).model_copy(update={"item_count": usage.get(tag.name, 0)})
            for tag in await self.tag_repo.list_for_user(user_id)
        ]

    async def create(self, user_id: str, data: TagCreate) -> Tag:
        name = data.name.strip()
        if await self.tag_repo.get_by_name(user_id, name):
            raise ConflictError(f'Tag "{name}" already exists')
        return await self.tag_repo.add(
            Tag(name=name, color=data.color.value, description=data.description, user_id=user_id)
        )

    async def update(self, user_id: str, tag_id: str, data: TagUpdate) -> Tag:
        tag = await self.get(user_id, tag_id)
        fields = data.model_dump(exclude_unset=True, mode="json")
        new_name = fields.pop("name", None)
        if new_name is not None:
            new_name = new_name.strip()
        if new_name and new_name != tag.name:
            if await self.tag_repo.get_by_name(user_id, new_name):
                raise ConflictError(f'Tag "{new_name}" already exists')
            await self._retag(user_id, tag.name, new_name)
            tag.name = new_name
        for key, value in fields.items():
            setattr(tag, key, value)
        return await self.tag_repo.save(tag)

    async def delete(self, user_id: str, tag_id: str) -> int:
        """Delete tag and strip it from items. Returns number of items touched."""
        tag = await self.get(user_id, tag_id)
        touched = await self._retag(user_id, tag.name, None)
        await self.tag_repo.delete(tag)
        return touched

    async def _retag(self, user_id: str, old: str, new: str | None) -> int:
        touched = 0
        for item in await self.item_repo.items_with_any_tag(user_id, [old]):
            tags = [t for t in item.tags if t != old]
            if new and new not in tags:
                tags.append(new)
            # Reassign so the JSON column is flagged dirty
            item.tags = tags
            touched += 1
        await self.session.flush()
        return touched
