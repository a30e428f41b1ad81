"""
Tag endpoints. Tags are per-user labels; renames and deletes are pushed
down to the items carrying them.
"""

from fastapi import APIRouter

from inventory_api.core.dependencies import CurrentUserId
from inventory_api.core.responses import created_response, success_response
from inventory_api.db.session import DbSession
from inventory_api.schemas.tag import TagCreate, TagResponse, TagUpdate
from inventory_api.services.tag_service import TagService

router = APIRouter()


@router.get("")
async def list_tags(session: DbSession, user_id: CurrentUserId):
    tags = await TagService(session).list_tags(user_id)
    return success_response("Tags retrieved successfully", {"tags": tags})


@router.post("", status_code=201)
async def create_tag(session: DbSession, user_id: CurrentUserId, data: TagCreate):
    tag = await TagService(session).create(user_id, data)
    return created_response("Tag created successfully", {"tag": TagResponse.model_validate(tag)})


@router.get("/{tag_id}")
async def get_tag(session: DbSession, user_id: CurrentUserId, tag_id: str):
    tag = await TagService(session).get(user_id, tag_id)
    return success_response("Tag retrieved successfully", {"tag": TagResponse.model_validate(tag)})


@router.put("/{tag_id}")
async def update_tag(session: DbSession, user_id: CurrentUserId, tag_id: str, data: TagUpdate):
    tag = await TagService(session).update(user_id, tag_id, data)
    return success_response("Tag updated successfully", {"tag": TagResponse.model_validate(tag)})


@router.delete("/{tag_id}")
async def delete_tag(session: DbSession, user_id: CurrentUserId, tag_id: str):
    touched = await TagService(session).delete(user_id, tag_id)
    return success_response("Tag deleted successfully", {"items_updated": touched})
