"""
Folder endpoints - folder tree, nested listing and per-folder views.
"""

from fastapi import APIRouter, Depends, Query

from inventory_api.config import get_settings
from inventory_api.core.access import guard
from inventory_api.core.dependencies import CurrentUserId, Dispatcher
from inventory_api.core.responses import created_response, paginate, success_response
from inventory_api.db.models.enums import ResourceType
from inventory_api.db.session import DbSession
from inventory_api.schemas.activity import ActivityResponse
from inventory_api.schemas.folder import FolderCreate, FolderMove, FolderResponse, FolderUpdate
from inventory_api.schemas.item import ItemResponse
from inventory_api.services.activity_service import ActivityService
from inventory_api.services.folder_service import FolderService

router = APIRouter()
settings = get_settings()

owns_folder = [Depends(guard(ResourceType.FOLDER, "folder_id"))]


def _folder(folder) -> dict:
    return {"folder": FolderResponse.model_validate(folder)}


@router.post("", status_code=201)
async def create_folder(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, data: FolderCreate):
    folder = await FolderService(session, dispatcher).create(user_id, data)
    return created_response("Folder created successfully", _folder(folder))


@router.get("")
async def list_folders(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, parent_id: str | None = None):
    """Flat list. parent_id=null lists root folders only."""
    folders = await FolderService(session, dispatcher).list_folders(user_id, parent_id)
    return success_response("Folders retrieved successfully", {
        "folders": [FolderResponse.model_validate(f) for f in folders],
    })


@router.get("/hierarchy")
async def folder_hierarchy(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId):
    tree = await FolderService(session, dispatcher).hierarchy(user_id)
    return success_response("Folder hierarchy retrieved successfully", {"folders": tree})


@router.get("/{folder_id}", dependencies=owns_folder)
async def get_folder(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, folder_id: str):
    detail = await FolderService(session, dispatcher).detail(user_id, folder_id)
    return success_response("Folder retrieved successfully", {"folder": detail})


@router.put("/{folder_id}", dependencies=owns_folder)
async def update_folder(
    session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, folder_id: str, data: FolderUpdate
):
    folder = await FolderService(session, dispatcher).update(user_id, folder_id, data)
    return success_response("Folder updated successfully", _folder(folder))


@router.put("/{folder_id}/move", dependencies=owns_folder)
async def move_folder(
    session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, folder_id: str, data: FolderMove
):
    folder = await FolderService(session, dispatcher).move(user_id, folder_id, data.parent_id)
    return success_response("Folder moved successfully", _folder(folder))


@router.delete("/{folder_id}", dependencies=owns_folder)
async def delete_folder(session: DbSession, dispatcher: Dispatcher, user_id: CurrentUserId, folder_id: str):
    await FolderService(session, dispatcher).delete(user_id, folder_id)
    return success_response("Folder deleted successfully")


@router.get("/{folder_id}/items", dependencies=owns_folder)
async def folder_items(
    session: DbSession,
    dispatcher: Dispatcher,
    user_id: CurrentUserId,
    folder_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    items, total = await FolderService(session, dispatcher).items(user_id, folder_id, page, limit)
    return success_response("Folder items retrieved successfully", {
        "items": [ItemResponse.model_validate(i) for i in items],
        "pagination": paginate(page, limit, total),
    })


@router.get("/{folder_id}/activities", dependencies=owns_folder)
async def folder_activities(
    session: DbSession,
    user_id: CurrentUserId,
    folder_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    rows, total = await ActivityService(session).list_activities(
        user_id, resource_type=ResourceType.FOLDER.value, resource_id=folder_id, page=page, limit=limit
    )
    return success_response("Folder activities retrieved successfully", {
        "activities": [ActivityResponse.model_validate(a) for a in rows],
        "pagination": paginate(page, limit, total),
    })
