"""
Activity recorder - appends one immutable audit row per user action.

Writes happen in a session of their own so a failed insert can never roll
back or fail the request that triggered it: errors are logged and the
caller gets None.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inventory_api.db.models.activity import Activity
from inventory_api.db.models.enums import ActivityAction, ResourceType
from inventory_api.db.repositories.activity_repository import ActivityRepository
from inventory_api.events.payloads import (
    BulkOperation,
    Event,
    FolderCreated,
    FolderDeleted,
    FolderUpdated,
    ItemCreated,
    ItemDeleted,
    ItemUpdated,
    QuantityChanged,
    SystemAlertRaised,
    UserActivity,
)

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = frozenset(
    {
        "password",
        "token",
        "refreshToken",
        "refresh_token",
        "accessToken",
        "access_token",
        "hashed_password",
        "currentPassword",
        "current_password",
        "newPassword",
        "new_password",
    }
)


def redact(details: Any) -> Any:
    """Drop credential-like keys at any depth."""
    if isinstance(details, Mapping):
        return {k: redact(v) for k, v in details.items() if k not in SENSITIVE_FIELDS}
    if isinstance(details, (list, tuple)):
        return [redact(v) for v in details]
    return details


class ActivityRecorder:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def record(
        self,
        actor_id: str,
        resource_type: str,
        resource_id: str,
        action: str,
        details: Mapping[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Activity | None:
        try:
            async with self.session_factory() as session:
                activity = await ActivityRepository(session).add(
                    Activity(
                        user_id=str(actor_id),
                        resource_type=getattr(resource_type, "value", resource_type),
                        resource_id=str(resource_id),
                        action=getattr(action, "value", action),
                        details=redact(dict(details or {})),
                        ip_address=ip_address,
                        user_agent=user_agent,
                    )
                )
                await session.commit()
                return activity
        except Exception:
            logger.exception("Failed to record %s activity on %s", action, resource_type)
            return None

    async def handle(self, event: Event) -> None:
        """Dispatcher subscriber: one activity per event, none for system alerts."""
        item, folder = ResourceType.ITEM, ResourceType.FOLDER
        match event:
            case ItemCreated(item=state, actor_id=actor):
                await self.record(actor, item, state.id, ActivityAction.CREATE, {
                    "name": state.name,
                    "quantity": state.quantity,
                    "folder_id": state.folder_id,
                })
            case ItemUpdated(item=state, actor_id=actor, changes=changes, action=action):
                await self.record(actor, item, state.id, action, {"name": state.name, "changes": changes})
            case ItemDeleted(item=state, actor_id=actor):
                await self.record(actor, item, state.id, ActivityAction.DELETE, {
                    "name": state.name,
                    "quantity": state.quantity,
                    "folder_id": state.folder_id,
                })
            case QuantityChanged(item=state, previous=previous, next=new, actor_id=actor, reason=reason):
                await self.record(actor, item, state.id, ActivityAction.QUANTITY_CHANGE, {
                    "name": state.name,
                    "previous_quantity": previous,
                    "new_quantity": new,
                    "change": new - previous,
                    "reason": reason,
                })
            case FolderCreated(folder=state, actor_id=actor):
                await self.record(actor, folder, state.id, ActivityAction.CREATE, {"name": state.name})
            case FolderUpdated(folder=state, actor_id=actor, changes=changes, action=action):
                await self.record(actor, folder, state.id, action, {"name": state.name, "changes": changes})
            case FolderDeleted(folder=state, actor_id=actor):
                await self.record(actor, folder, state.id, ActivityAction.DELETE, {"name": state.name})
            case BulkOperation(operation=operation, count=count, actor_id=actor, details=details):
                action = ActivityAction.BULK_DELETE if operation == "delete" else ActivityAction.BULK_UPDATE
                # Bulk rows point at the actor; the affected ids go in details
                await self.record(actor, ResourceType.USER, actor, action, {
                    **details,
                    "operation": operation,
                    "count": count,
                    "item_ids": event.item_ids,
                })
            case UserActivity(user_id=user_id, action=action, details=details, ip_address=ip, user_agent=agent):
                subject = event.subject_id or user_id
                await self.record(user_id, ResourceType.USER, subject, action, details, ip, agent)
            case SystemAlertRaised():
                pass
