"""
Settings endpoints - per-user settings document, whole or by section.
"""

from typing import Any

from fastapi import APIRouter, Body

from inventory_api.core.dependencies import CurrentUserId
from inventory_api.core.responses import success_response
from inventory_api.db.session import DbSession
from inventory_api.services.settings_service import SettingsService

router = APIRouter()


@router.get("")
async def get_settings_document(session: DbSession, user_id: CurrentUserId):
    data = await SettingsService(session).get(user_id)
    return success_response("Settings retrieved successfully", {"settings": data})


@router.put("")
async def update_settings(session: DbSession, user_id: CurrentUserId, document: dict[str, Any] = Body(...)):
    data = await SettingsService(session).update(user_id, document)
    return success_response("Settings updated successfully", {"settings": data})


@router.post("/reset")
async def reset_settings(session: DbSession, user_id: CurrentUserId):
    data = await SettingsService(session).reset(user_id)
    return success_response("Settings reset to defaults", {"settings": data})


@router.get("/{section}")
async def get_section(session: DbSession, user_id: CurrentUserId, section: str):
    data = await SettingsService(session).get_section(user_id, section)
    return success_response(f"{section} settings retrieved successfully", {section: data})


@router.put("/{section}")
async def update_section(
    session: DbSession, user_id: CurrentUserId, section: str, values: dict[str, Any] = Body(...)
):
    data = await SettingsService(session).update_section(user_id, section, values)
    return success_response(f"{section} settings updated successfully", {section: data})
