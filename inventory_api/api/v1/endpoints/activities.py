"""
Activity endpoints - read-only views over the caller's audit log.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from inventory_api.config import get_settings
from inventory_api.core.access import guard
from inventory_api.core.dependencies import CurrentUserId
from inventory_api.core.responses import paginate, success_response
from inventory_api.db.models.enums import ResourceType
from inventory_api.db.session import DbSession
from inventory_api.schemas.activity import ActivityResponse
from inventory_api.services.activity_service import ActivityService

router = APIRouter()
settings = get_settings()


async def _page(session, user_id: str, page: int, limit: int, message: str, **filters):
    rows, total = await ActivityService(session).list_activities(user_id, page=page, limit=limit, **filters)
    return success_response(message, {
        "activities": [ActivityResponse.model_validate(a) for a in rows],
        "pagination": paginate(page, limit, total),
    })


@router.get("")
async def list_activities(
    session: DbSession,
    user_id: CurrentUserId,
    resource_type: ResourceType | None = None,
    resource_id: str | None = None,
    action: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    return await _page(
        session, user_id, page, limit, "Activities retrieved successfully",
        resource_type=resource_type.value if resource_type else None,
        resource_id=resource_id,
        action=action,
        start=start_date,
        end=end_date,
    )


@router.get("/recent")
async def recent_activities(
    session: DbSession, user_id: CurrentUserId, limit: int = Query(10, ge=1, le=50)
):
    rows = await ActivityService(session).recent(user_id, limit)
    return success_response("Recent activities retrieved successfully", {
        "activities": [ActivityResponse.model_validate(a) for a in rows],
    })


@router.get("/stats")
async def activity_stats(session: DbSession, user_id: CurrentUserId, days: int = Query(30, ge=1, le=365)):
    stats = await ActivityService(session).stats(user_id, days)
    return success_response("Activity statistics retrieved successfully", {"stats": stats})


@router.get("/items/{item_id}", dependencies=[Depends(guard(ResourceType.ITEM, "item_id"))])
async def item_activities(
    session: DbSession,
    user_id: CurrentUserId,
    item_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    return await _page(
        session, user_id, page, limit, "Item activities retrieved successfully",
        resource_type=ResourceType.ITEM.value, resource_id=item_id,
    )


@router.get("/folders/{folder_id}", dependencies=[Depends(guard(ResourceType.FOLDER, "folder_id"))])
async def folder_activities(
    session: DbSession,
    user_id: CurrentUserId,
    folder_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    return await _page(
        session, user_id, page, limit, "Folder activities retrieved successfully",
        resource_type=ResourceType.FOLDER.value, resource_id=folder_id,
    )
