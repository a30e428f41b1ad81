"""
Item endpoints - CRUD, stock movements, images, barcodes, bulk edits.
Thin controllers: every route with an item id goes through the access gate,
the service does the work and publishes the event.
"""

from fastapi import APIRouter, Depends, Query

from inventory_api.config import get_settings
from inventory_api.core.access import guard
from inventory_api.core.dependencies import CurrentUserId, Dispatcher
from inventory_api.core.responses import created_response, paginate, success_response
from inventory_api.db.models.enums import ResourceType
from inventory_api.db.session import DbSession
from inventory_api.schemas.activity import ActivityResponse
from inventory_api.schemas.item import (
    BarcodeUpdate,
    BulkDelete,
    BulkUpdate,
    ImageAdd,
    ItemCreate,
    ItemMove,
    ItemResponse,
    ItemUpdate,
    QuantityChange,
)
from inventory_api.services.activity_service import ActivityService
from inventory_api.services.item_service import ItemService

router = APIRouter()
settings = get_settings()

owns_item = [Depends(guard(ResourceType.ITEM, "item_id"))]


def _item(item) -> dict:
    return {"item": ItemResponse.model_validate(item)}


@router.get("")
async def list_items(
    session: DbSession,
    dispatcher: Dispatcher,
    user_id: CurrentUserId,
    folder_id: str | None = None,
    search: str | None = None,
    tags: str | None = None,
    low_stock: bool = False,
    sort_by: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """List the caller's items. tags is a comma-separated list; folder_id=null means root."""
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    items, total = await ItemService(session, dispatcher).list_items(
        user_id,
        folder_id=folder_id,
        search=search,
        tags=tag_list,
        low_stock=low_stock,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return success_response("Items retrieved successfully", {
        "items": [ItemResponse.model_validate(i) for i in items],
        "pagination": paginate(page, limit, total),
    })


@router.post("", status_code=201)
async def create_item(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, data: ItemCreate):
    """Create item owned by the caller. Owner always comes from the token."""
    item = await ItemService(session, dispatcher).create(user_id, data)
    return created_response("Item created successfully", _item(item))


@router.get("/stats")
async def item_stats(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId):
    stats = await ItemService(session, dispatcher).stats(user_id)
    return success_response("Item statistics retrieved successfully", {"stats": stats})


@router.get("/barcode/{barcode}")
async def find_by_barcode(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, barcode: str):
    item = await ItemService(session, dispatcher).find_by_barcode(user_id, barcode)
    return success_response("Item retrieved successfully", _item(item))


@router.post("/bulk-delete")
async def bulk_delete(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, data: BulkDelete):
    count = await ItemService(session, dispatcher).bulk_delete(user_id, data.ids)
    return success_response(f"{count} items deleted successfully", {"count": count})


@router.post("/bulk-update")
async def bulk_update(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, data: BulkUpdate):
    count = await ItemService(session, dispatcher).bulk_update(user_id, data.ids, data.updates)
    return success_response(f"{count} items updated successfully", {"count": count})


@router.get("/{item_id}", dependencies=owns_item)
async def get_item(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str):
    item = await ItemService(session, dispatcher).get(user_id, item_id)
    return success_response("Item retrieved successfully", _item(item))


@router.put("/{item_id}", dependencies=owns_item)
async def update_item(
    session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str, data: ItemUpdate
):
    item = await ItemService(session, dispatcher).update(user_id, item_id, data)
    return success_response("Item updated successfully", _item(item))


@router.delete("/{item_id}", dependencies=owns_item)
async def delete_item(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str):
    await ItemService(session, dispatcher).delete(user_id, item_id)
    return success_response("Item deleted successfully")


@router.patch("/{item_id}/quantity", dependencies=owns_item)
async def update_quantity(
    session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str, data: QuantityChange
):
    item, change = await ItemService(session, dispatcher).update_quantity(user_id, item_id, data.change, data.reason)
    return success_response("Item quantity updated successfully", {**_item(item), "quantity_change": change})


@router.post("/{item_id}/images", dependencies=owns_item)
async def add_image(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str, data: ImageAdd):
    item = await ItemService(session, dispatcher).add_image(user_id, item_id, data.url)
    return success_response("Image added successfully", _item(item))


@router.delete("/{item_id}/images/{index}", dependencies=owns_item)
async def remove_image(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str, index: int):
    item = await ItemService(session, dispatcher).remove_image(user_id, item_id, index)
    return success_response("Image removed successfully", _item(item))


@router.put("/{item_id}/move", dependencies=owns_item)
async def move_item(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str, data: ItemMove):
    item = await ItemService(session, dispatcher).move(user_id, item_id, data.folder_id)
    return success_response("Item moved successfully", _item(item))


@router.put("/{item_id}/barcode", dependencies=owns_item)
async def update_barcode(
    session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str, data: BarcodeUpdate
):
    item = await ItemService(session, dispatcher).set_barcode(user_id, item_id, data)
    return success_response("Barcode updated successfully", _item(item))


@router.get("/{item_id}/barcode-history", dependencies=owns_item)
async def barcode_history(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, item_id: str):
    item = await ItemService(session, dispatcher).get(user_id, item_id)
    return success_response("Barcode history retrieved successfully", {
        "barcode": item.barcode,
        "barcode_format": item.barcode_format,
        "history": item.barcode_history or [],
    })


@router.get("/{item_id}/activities", dependencies=owns_item)
async def item_activities(
    session: DbSession,
    user_id: CurrentUserId,
    item_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    rows, total = await ActivityService(session).list_activities(
        user_id, resource_type=ResourceType.ITEM.value, resource_id=item_id, page=page, limit=limit
    )
    return success_response("Item activities retrieved successfully", {
        "activities": [ActivityResponse.model_validate(a) for a in rows],
        "pagination": paginate(page, limit, total),
    })
