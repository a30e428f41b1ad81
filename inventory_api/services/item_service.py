"""
Item service - business logic for items.
Each mutation commits first and then publishes one event, so subscribers only
ever see state that is already durable and the HTTP response never waits on
activity or alert bookkeeping.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.errors import BadRequestError, NotFoundError
from inventory_api.db.base import is_valid_id, utcnow
from inventory_api.db.models.enums import ActivityAction
from inventory_api.db.models.item import Item
from inventory_api.db.repositories.folder_repository import FolderRepository
from inventory_api.db.repositories.item_repository import ItemRepository
from inventory_api.events.dispatcher import EventDispatcher
from inventory_api.events.payloads import (
    BulkOperation,
    ItemCreated,
    ItemDeleted,
    ItemState,
    ItemUpdated,
    QuantityChanged,
)
from inventory_api.schemas.item import BarcodeUpdate, ItemCreate, ItemUpdate


def diff_fields(entity, fields: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Apply fields to entity and return {field: {from, to}} for actual changes."""
    changes = {}
    for key, value in fields.items():
        current = getattr(entity, key)
        if current != value:
            changes[key] = {"from": current, "to": value}
            setattr(entity, key, value)
    return changes


class ItemService:
    """Handles item use cases: CRUD, stock movements, images, barcodes, bulk edits."""

    def __init__(self, session: AsyncSession, dispatcher: EventDispatcher):
        self.session = session
        self.item_repo = ItemRepository(session)
        self.folder_repo = FolderRepository(session)
        self.dispatcher = dispatcher

    async def _publish_after_commit(self, event) -> None:
        await self.session.commit()
        self.dispatcher.publish(event)

    async def _check_folder(self, user_id: str, folder_id: str | None) -> None:
        if folder_id is None:
            return
        if not is_valid_id(folder_id) or await self.folder_repo.get_owned(folder_id, user_id) is None:
            raise NotFoundError("Folder not found")

    async def get(self, user_id: str, item_id: str) -> Item:
        item = await self.item_repo.get_owned(item_id, user_id) if is_valid_id(item_id) else None
        if item is None:
            raise NotFoundError("Item not found")
        return item

    async def create(self, user_id: str, data: ItemCreate) -> Item:
        await self._check_folder(user_id, data.folder_id)
        item = await self.item_repo.add(Item(**data.model_dump(mode="json"), user_id=user_id))
        await self._publish_after_commit(ItemCreated(item=ItemState.from_model(item), actor_id=user_id))
        return item

    async def list_items(
        self,
        user_id: str,
        *,
        folder_id: str | None = None,
        search: str | None = None,
        tags: list[str] | None = None,
        low_stock: bool = False,
        sort_by: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Item], int]:
        conditions = ItemRepository.filters(
            user_id,
            folder_id=None if folder_id == "null" else folder_id,
            root_only=folder_id == "null",
            search=search,
            low_stock=low_stock,
        )
        order = [ItemRepository.order(sort_by)]
        skip = (page - 1) * limit
        if tags:
            # Tag membership lives in a JSON list, so filter after the SQL pass
            wanted = set(tags)
            rows = await self.item_repo.find(*conditions, order_by=order, limit=None)
            rows = [i for i in rows if wanted.intersection(i.tags or [])]
            return rows[skip:skip + limit], len(rows)
        rows = await self.item_repo.find(*conditions, order_by=order, skip=skip, limit=limit)
        return rows, await self.item_repo.count(*conditions)

    async def update(self, user_id: str, item_id: str, data: ItemUpdate) -> Item:
        item = await self.get(user_id, item_id)
        fields = data.model_dump(exclude_unset=True, mode="json")
        if fields.get("folder_id") is not None:
            await self._check_folder(user_id, fields["folder_id"])
        return await self._apply(user_id, item, fields, ActivityAction.UPDATE)

    async def _apply(self, user_id: str, item: Item, fields: dict[str, Any], action: ActivityAction) -> Item:
        previous = ItemState.from_model(item)
        changes = diff_fields(item, fields)
        if not changes:
            return item
        item = await self.item_repo.save(item)
        await self._publish_after_commit(
            ItemUpdated(
                item=ItemState.from_model(item),
                previous=previous,
                actor_id=user_id,
                changes=changes,
                action=action.value,
            )
        )
        return item

    async def delete(self, user_id: str, item_id: str) -> None:
        item = await self.get(user_id, item_id)
        state = ItemState.from_model(item)
        await self.item_repo.delete(item)
        await self._publish_after_commit(ItemDeleted(item=state, actor_id=user_id))

    async def update_quantity(self, user_id: str, item_id: str, change: int, reason: str = "manual") -> tuple[Item, dict]:
        item = await self.get(user_id, item_id)
        new_quantity = await self.item_repo.increment_quantity(item.id, user_id, change)
        if new_quantity is None:
            raise BadRequestError("Cannot reduce quantity below zero")
        previous_quantity = new_quantity - change
        await self.session.commit()
        await self.session.refresh(item)
        self.dispatcher.publish(
            QuantityChanged(
                item=ItemState.from_model(item),
                previous=previous_quantity,
                next=new_quantity,
                actor_id=user_id,
                reason=reason,
            )
        )
        return item, {
            "item_id": item.id,
            "previous_quantity": previous_quantity,
            "new_quantity": new_quantity,
            "change": change,
            "reason": reason,
        }

    async def add_image(self, user_id: str, item_id: str, url: str) -> Item:
        item = await self.get(user_id, item_id)
        return await self._apply(user_id, item, {"images": [*(item.images or []), url]}, ActivityAction.ADD_IMAGE)

    async def remove_image(self, user_id: str, item_id: str, index: int) -> Item:
        item = await self.get(user_id, item_id)
        images = list(item.images or [])
        if index < 0 or index >= len(images):
            raise NotFoundError("Image not found")
        del images[index]
        return await self._apply(user_id, item, {"images": images}, ActivityAction.REMOVE_IMAGE)

    async def move(self, user_id: str, item_id: str, folder_id: str | None) -> Item:
        item = await self.get(user_id, item_id)
        await self._check_folder(user_id, folder_id)
        return await self._apply(user_id, item, {"folder_id": folder_id}, ActivityAction.MOVE)

    async def set_barcode(self, user_id: str, item_id: str, data: BarcodeUpdate) -> Item:
        item = await self.get(user_id, item_id)
        history = list(item.barcode_history or [])
        if item.barcode and item.barcode != data.barcode:
            history.append({
                "barcode": item.barcode,
                "format": item.barcode_format,
                "created_at": utcnow().isoformat(),
                "created_by": user_id,
            })
        fields = {
            "barcode": data.barcode,
            "barcode_format": data.barcode_format.value,
            "barcode_history": history,
        }
        return await self._apply(user_id, item, fields, ActivityAction.BARCODE_CHANGE)

    async def find_by_barcode(self, user_id: str, barcode: str) -> Item:
        item = await self.item_repo.get_by_barcode(user_id, barcode)
        if item is None:
            raise NotFoundError("Item not found")
        return item

    async def bulk_delete(self, user_id: str, ids: list[str]) -> int:
        items = await self.item_repo.list_by_ids(user_id, [i for i in ids if is_valid_id(i)])
        if not items:
            raise NotFoundError("No matching items found")
        before = tuple(ItemState.from_model(i) for i in items)
        for item in items:
            await self.item_repo.delete(item)
        await self._publish_after_commit(
            BulkOperation(operation="delete", count=len(items), actor_id=user_id, before=before)
        )
        return len(items)

    async def bulk_update(self, user_id: str, ids: list[str], data: ItemUpdate) -> int:
        fields = data.model_dump(exclude_unset=True, mode="json")
        if not fields:
            raise BadRequestError("No updates provided")
        if fields.get("folder_id") is not None:
            await self._check_folder(user_id, fields["folder_id"])
        items = await self.item_repo.list_by_ids(user_id, [i for i in ids if is_valid_id(i)])
        if not items:
            raise NotFoundError("No matching items found")
        before = tuple(ItemState.from_model(i) for i in items)
        for item in items:
            diff_fields(item, fields)
        await self.session.flush()
        after = tuple(ItemState.from_model(i) for i in items)
        await self._publish_after_commit(
            BulkOperation(
                operation="update",
                count=len(items),
                actor_id=user_id,
                before=before,
                after=after,
                details={"fields": sorted(fields)},
            )
        )
        return len(items)

    async def stats(self, user_id: str) -> dict:
        return await self.item_repo.stats(user_id)
