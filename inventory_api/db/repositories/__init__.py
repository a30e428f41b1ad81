# Repository pattern: abstract data access behind per-entity classes

from inventory_api.db.repositories.activity_repository import ActivityRepository
from inventory_api.db.repositories.alert_repository import AlertRepository
from inventory_api.db.repositories.folder_repository import FolderRepository
from inventory_api.db.repositories.item_repository import ItemRepository
from inventory_api.db.repositories.newsletter_repository import NewsletterRepository
from inventory_api.db.repositories.settings_repository import SettingsRepository
from inventory_api.db.repositories.tag_repository import TagRepository
from inventory_api.db.repositories.user_repository import UserRepository

__all__ = [
    "ActivityRepository",
    "AlertRepository",
    "FolderRepository",
    "ItemRepository",
    "NewsletterRepository",
    "SettingsRepository",
    "TagRepository",
    "UserRepository",
]
