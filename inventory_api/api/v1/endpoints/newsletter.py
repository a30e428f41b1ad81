"""
Newsletter endpoints. Subscribe and unsubscribe are public; listing is admin only.
"""

from fastapi import APIRouter, Query

from inventory_api.core.dependencies import AdminUser
from inventory_api.core.responses import created_response, paginate, success_response
from inventory_api.db.models.enums import SubscriptionStatus
from inventory_api.db.session import DbSession
from inventory_api.schemas.newsletter import SubscribeRequest, SubscriptionResponse, UnsubscribeRequest
from inventory_api.services.newsletter_service import NewsletterService

router = APIRouter()

_MESSAGES = {
    "subscribed": "Successfully subscribed to newsletter",
    "already_subscribed": "Email is already subscribed",
    "reactivated": "Subscription reactivated successfully",
}


@router.post("/subscribe")
async def subscribe(session: DbSession, data: SubscribeRequest):
    sub, outcome = await NewsletterService(session).subscribe(data.email, data.source)
    payload = {"subscription": SubscriptionResponse.model_validate(sub)}
    if outcome == "subscribed":
        return created_response(_MESSAGES[outcome], payload)
    return success_response(_MESSAGES[outcome], payload)


@router.post("/unsubscribe")
async def unsubscribe(session: DbSession, data: UnsubscribeRequest):
    sub = await NewsletterService(session).unsubscribe(token=data.token, email=data.email)
    return success_response("Successfully unsubscribed from newsletter", {
        "subscription": SubscriptionResponse.model_validate(sub),
    })


@router.get("/subscribers")
async def list_subscribers(
    session: DbSession,
    admin: AdminUser,
    status: SubscriptionStatus | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    subs, total = await NewsletterService(session).list_subscribers(
        status.value if status else None, page, limit
    )
    return success_response("Subscribers retrieved successfully", {
        "subscribers": [SubscriptionResponse.model_validate(s) for s in subs],
        "pagination": paginate(page, limit, total),
    })


@router.get("/stats")
async def newsletter_stats(session: DbSession, admin: AdminUser):
    stats = await NewsletterService(session).stats()
    return success_response("Newsletter statistics retrieved successfully", {"stats": stats})
