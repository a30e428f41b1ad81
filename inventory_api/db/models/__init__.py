# Import every model so Base.metadata is complete (Alembic, create_all)

from inventory_api.db.models.activity import Activity
from inventory_api.db.models.alert import Alert
from inventory_api.db.models.folder import Folder
from inventory_api.db.models.item import Item
from inventory_api.db.models.newsletter import NewsletterSubscription
from inventory_api.db.models.settings import UserSettings
from inventory_api.db.models.tag import Tag
from inventory_api.db.models.user import User

__all__ = [
    "Activity",
    "Alert",
    "Folder",
    "Item",
    "NewsletterSubscription",
    "Tag",
    "User",
    "UserSettings",
]
