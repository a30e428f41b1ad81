"""
Settings service - per-user settings as sparse overrides over DEFAULT_SETTINGS.

Reads deep-merge the stored overrides onto the defaults: nested dicts merge
key by key, every other value (lists included) is replaced wholesale, and
stored values always win. Writes merge a partial document into the stored
overrides the same way.
"""

import copy
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.cache.redis_client import cache_delete, cache_get_json, cache_set_json
from inventory_api.config import get_settings
from inventory_api.core.errors import BadRequestError
from inventory_api.db.repositories.settings_repository import SettingsRepository

CACHE_PREFIX = "settings:"

DEFAULT_SETTINGS: dict[str, Any] = {
    "profile": {
        "timezone": "UTC",
        "language": "en",
        "dateFormat": "MM/DD/YYYY",
        "timeFormat": "12h",
    },
    "preferences": {
        "defaultView": "grid",
        "itemsPerPage": 20,
        "autoSave": True,
        "theme": "light",
        "compactMode": False,
        "showTutorials": True,
        "defaultSortBy": "createdAt",
        "defaultSortOrder": "desc",
    },
    "notifications": {
        "email": {"enabled": True, "lowStock": True, "reports": False, "updates": True, "marketing": False},
        "push": {"enabled": True, "lowStock": True, "reports": False, "updates": True},
        "inApp": {"enabled": True, "lowStock": True, "reports": True, "updates": True},
    },
    "privacy": {
        "profileVisibility": "private",
        "dataSharing": False,
        "analytics": True,
        "crashReports": True,
    },
    "security": {
        "twoFactorEnabled": False,
        "sessionTimeout": 24,
        "loginNotifications": True,
    },
    "integrations": {
        "googleDrive": {"enabled": False},
        "dropbox": {"enabled": False},
        "slack": {"enabled": False},
    },
}

SECTIONS = frozenset(DEFAULT_SETTINGS)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict: base with override merged in. Neither input is mutated."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _check_sections(document: dict[str, Any]) -> None:
    unknown = set(document) - SECTIONS
    if unknown:
        raise BadRequestError("Unknown settings section", details={"sections": sorted(unknown)})
    for section, value in document.items():
        if not isinstance(value, dict):
            raise BadRequestError(f"Settings section '{section}' must be an object")


class SettingsService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings_repo = SettingsRepository(session)
        self.ttl = get_settings().settings_cache_ttl

    async def get(self, user_id: str) -> dict[str, Any]:
        cached = await cache_get_json(CACHE_PREFIX + user_id)
        if cached is not None:
            return cached
        row = await self.settings_repo.get_for_user(user_id)
        merged = deep_merge(DEFAULT_SETTINGS, row.data if row else {})
        await cache_set_json(CACHE_PREFIX + user_id, merged, self.ttl)
        return merged

    async def get_section(self, user_id: str, section: str) -> dict[str, Any]:
        if section not in SECTIONS:
            raise BadRequestError(f"Unknown settings section '{section}'")
        return (await self.get(user_id))[section]

    async def update(self, user_id: str, document: dict[str, Any]) -> dict[str, Any]:
        _check_sections(document)
        row = await self.settings_repo.get_or_create(user_id)
        # Reassign so the JSON column is flagged dirty
        row.data = deep_merge(row.data or {}, document)
        await self.settings_repo.save(row)
        await self._invalidate_after_commit(user_id)
        return deep_merge(DEFAULT_SETTINGS, row.data)

    async def update_section(self, user_id: str, section: str, values: dict[str, Any]) -> dict[str, Any]:
        merged = await self.update(user_id, {section: values})
        return merged[section]

    async def reset(self, user_id: str) -> dict[str, Any]:
        row = await self.settings_repo.get_for_user(user_id)
        if row is not None:
            row.data = {}
            await self.settings_repo.save(row)
        await self._invalidate_after_commit(user_id)
        return copy.deepcopy(DEFAULT_SETTINGS)

    async def _invalidate_after_commit(self, user_id: str) -> None:
        # A read between delete and commit would re-cache the old overrides
        await self.session.commit()
        await cache_delete(CACHE_PREFIX + user_id)
