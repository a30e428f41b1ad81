"""Named topics for the in-process event bus."""

from enum import Enum


class Topic(str, Enum):
    ITEM_CREATED = "item:created"
    ITEM_UPDATED = "item:updated"
    ITEM_DELETED = "item:deleted"
    ITEM_QUANTITY_CHANGED = "item:quantity_changed"
    FOLDER_CREATED = "folder:created"
    FOLDER_UPDATED = "folder:updated"
    FOLDER_DELETED = "folder:deleted"
    BULK_OPERATION = "bulk:operation"
    SYSTEM_ALERT = "system:alert"
    USER_ACTIVITY = "user:activity"
