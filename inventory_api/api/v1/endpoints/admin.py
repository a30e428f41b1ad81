"""
Admin endpoints - account listing and activation. Admin role required throughout.
"""

from fastapi import APIRouter, Query

from inventory_api.core.dependencies import AdminUser, ClientInfo, Dispatcher
from inventory_api.core.responses import paginate, success_response
from inventory_api.db.models.enums import UserStatus
from inventory_api.db.session import DbSession
from inventory_api.schemas.activity import ActivityResponse
from inventory_api.schemas.user import UserResponse, UserStatusUpdate
from inventory_api.services.user_service import UserService

router = APIRouter()


@router.get("/users")
async def list_users(
    session: DbSession,
    dispatcher: Dispatcher,
    admin: AdminUser,
    status: UserStatus | None = None,
    search: str | None = Query(None, description="Substring of name or email"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    users, total = await UserService(session, dispatcher).list_users(
        status.value if status else None, search, page, limit
    )
    return success_response("Users retrieved successfully", {
        "users": [UserResponse.model_validate(u) for u in users],
        "pagination": paginate(page, limit, total),
    })


@router.get("/users/{user_id}")
async def get_user(session: DbSession, dispatcher: Dispatcher, admin: AdminUser, user_id: str):
    user, item_count, activities = await UserService(session, dispatcher).user_details(user_id)
    return success_response("User details retrieved successfully", {
        "user": UserResponse.model_validate(user),
        "item_count": item_count,
        "recent_activities": [ActivityResponse.model_validate(a) for a in activities],
    })


@router.put("/users/{user_id}/status")
async def update_user_status(
    session: DbSession,
    dispatcher: Dispatcher,
    client: ClientInfo,
    admin: AdminUser,
    user_id: str,
    data: UserStatusUpdate,
):
    user = await UserService(session, dispatcher, client).update_status(admin, user_id, data.status)
    return success_response("User status updated successfully", {"user": UserResponse.model_validate(user)})
