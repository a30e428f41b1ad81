"""
Access gate - route dependency that admits only the owner of a resource.

Order of checks: credential, then path parameter, then ownership.
A resource that exists but belongs to someone else answers exactly like one
that does not exist, so callers cannot probe for other users' ids.
"""

from fastapi import Depends, Request

from inventory_api.core.dependencies import get_optional_user_id
from inventory_api.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from inventory_api.db.models.enums import ResourceType
from inventory_api.db.session import DbSession
from inventory_api.services.ownership import OwnershipResolver


def guard(resource_type: ResourceType | str, resource_id_param: str = "id"):
    """Build a dependency that checks ownership of the resource in resource_id_param."""
    resource_type = ResourceType(resource_type)
    label = resource_type.value.capitalize()

    async def check_ownership(
        request: Request,
        session: DbSession,
        user_id: str | None = Depends(get_optional_user_id),
    ) -> str:
        if not user_id:
            raise UnauthorizedError("Not authenticated")
        resource_id = request.path_params.get(resource_id_param)
        if not resource_id or not str(resource_id).strip():
            raise BadRequestError("Resource ID is required")
        if not await OwnershipResolver(session).resolve(user_id, resource_type, resource_id):
            raise NotFoundError(f"{label} not found")
        return resource_id

    return check_ownership
