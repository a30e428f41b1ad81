"""
Alert endpoints - the caller's alert inbox plus admin broadcast and cleanup.
Alerts are created by the alert deriver off the event stream; here they are
only read and moved through active -> read -> resolved / dismissed.
"""

from fastapi import APIRouter, Query

from inventory_api.config import get_settings
from inventory_api.core.dependencies import AdminUser, CurrentUserId, Dispatcher
from inventory_api.core.responses import created_response, paginate, success_response
from inventory_api.db.models.enums import AlertKind, AlertStatus
from inventory_api.db.session import DbSession, async_session_maker
from inventory_api.events.payloads import SystemAlertRaised
from inventory_api.schemas.alert import AlertResponse, SystemAlertCreate
from inventory_api.services.alert_deriver import AlertDeriver
from inventory_api.services.alert_service import AlertService

router = APIRouter()
settings = get_settings()


def _alert(alert) -> dict:
    return {"alert": AlertResponse.model_validate(alert)}


@router.get("")
async def list_alerts(
    session: DbSession,
    user_id: CurrentUserId,
    status: AlertStatus | None = None,
    kind: AlertKind | None = None,
    item_id: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    alerts, total = await AlertService(session).list_alerts(
        user_id,
        status=status.value if status else None,
        kind=kind.value if kind else None,
        item_id=item_id,
        page=page,
        limit=limit,
    )
    return success_response("Alerts retrieved successfully", {
        "alerts": [AlertResponse.model_validate(a) for a in alerts],
        "pagination": paginate(page, limit, total),
    })


@router.get("/counts")
async def alert_counts(session: DbSession, user_id: CurrentUserId):
    counts = await AlertService(session).counts(user_id)
    return success_response("Alert counts retrieved successfully", {"counts": counts})


@router.post("/read-all")
async def mark_all_read(session: DbSession, user_id: CurrentUserId):
    n = await AlertService(session).mark_all_read(user_id)
    return success_response(f"{n} alerts marked as read", {"count": n})


@router.post("/system", status_code=201)
async def raise_system_alert(dispatcher: Dispatcher, admin: AdminUser, data: SystemAlertCreate):
    """Queue a system notice for one user, or every active user when user_id is omitted."""
    dispatcher.publish(
        SystemAlertRaised(
            title=data.title,
            message=data.message,
            priority=data.priority.value,
            user_id=data.user_id,
            details=data.details,
        )
    )
    return created_response("System alert queued successfully")


@router.post("/cleanup")
async def cleanup_alerts(admin: AdminUser):
    n = await AlertDeriver(async_session_maker, settings).cleanup()
    return success_response(f"{n} expired alerts removed", {"count": n})


@router.get("/{alert_id}")
async def get_alert(session: DbSession, user_id: CurrentUserId, alert_id: str):
    alert = await AlertService(session).get(user_id, alert_id)
    return success_response("Alert retrieved successfully", _alert(alert))


@router.put("/{alert_id}/read")
async def mark_read(session: DbSession, user_id: CurrentUserId, alert_id: str):
    alert = await AlertService(session).mark_read(user_id, alert_id)
    return success_response("Alert marked as read", _alert(alert))


@router.put("/{alert_id}/resolve")
async def resolve_alert(session: DbSession, user_id: CurrentUserId, alert_id: str):
    alert = await AlertService(session).resolve(user_id, alert_id)
    return success_response("Alert resolved successfully", _alert(alert))


@router.put("/{alert_id}/dismiss")
async def dismiss_alert(session: DbSession, user_id: CurrentUserId, alert_id: str):
    alert = await AlertService(session).dismiss(user_id, alert_id)
    return success_response("Alert dismissed successfully", _alert(alert))


@router.delete("/{alert_id}")
async def delete_alert(session: DbSession, user_id: CurrentUserId, alert_id: str):
    await AlertService(session).delete(user_id, alert_id)
    return success_response("Alert deleted successfully")
