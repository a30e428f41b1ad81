"""
FastAPI dependencies - injection for DB session, auth and the event bus.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from inventory_api.core.errors import ForbiddenError, UnauthorizedError
from inventory_api.core.security import token_subject
from inventory_api.db.models.user import User
from inventory_api.db.repositories.user_repository import UserRepository
from inventory_api.db.session import DbSession
from inventory_api.events.dispatcher import EventDispatcher

security = HTTPBearer(auto_error=False)


async def get_current_user(
    session: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Resolve JWT to an active user. Raises 401 if missing or invalid."""
    if not credentials:
        raise UnauthorizedError("Not authenticated")
    user_id = token_subject(credentials.credentials)
    if user_id is None:
        raise UnauthorizedError("Invalid or expired token")
    user = await UserRepository(session).get_by_id(user_id)
    if not user or not user.is_active:
        raise UnauthorizedError("User not found or inactive")
    return user


async def get_optional_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Return user id if valid token present, else None. Does not hit the DB."""
    if not credentials:
        return None
    return token_subject(credentials.credentials)


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_current_user_id(user: CurrentUser) -> str:
    return user.id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


async def require_admin(user: CurrentUser) -> User:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


AdminUser = Annotated[User, Depends(require_admin)]


def get_dispatcher(request: Request) -> EventDispatcher:
    """The process-wide dispatcher built in create_app()."""
    return request.app.state.dispatcher


Dispatcher = Annotated[EventDispatcher, Depends(get_dispatcher)]


def client_info(request: Request) -> dict:
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


ClientInfo = Annotated[dict, Depends(client_info)]
