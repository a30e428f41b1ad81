"""Closed vocabularies stored as plain strings."""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class UserStatus(str, Enum):
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


class ResourceType(str, Enum):
    ITEM = "item"
    FOLDER = "folder"
    USER = "user"
    ALERT = "alert"


class ActivityAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MOVE = "move"
    QUANTITY_CHANGE = "quantity_change"
    ADD_IMAGE = "add_image"
    REMOVE_IMAGE = "remove_image"
    BARCODE_CHANGE = "barcode_change"
    BULK_UPDATE = "bulk_update"
    BULK_DELETE = "bulk_delete"
    LOGIN = "login"
    LOGOUT = "logout"
    REGISTER = "register"
    UPDATE_PASSWORD = "update_password"
    STATUS_CHANGE = "status_change"
    CUSTOM = "custom"


class AlertKind(str, Enum):
    LOW_QUANTITY = "low_quantity"
    ITEM_ACTIVITY = "item_activity"
    FOLDER_ACTIVITY = "folder_activity"
    BULK_OPERATION = "bulk_operation"
    SYSTEM = "system"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    READ = "read"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


OPEN_ALERT_STATUSES = (AlertStatus.ACTIVE.value, AlertStatus.READ.value)


class AlertPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class BarcodeFormat(str, Enum):
    UPC_A = "UPC_A"
    UPC_E = "UPC_E"
    EAN_13 = "EAN_13"
    EAN_8 = "EAN_8"
    CODE_128 = "CODE_128"
    CODE_39 = "CODE_39"
    CODE_93 = "CODE_93"
    CODABAR = "CODABAR"
    QR_CODE = "QR_CODE"


class TagColor(str, Enum):
    GRAY = "gray"
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"
    PINK = "pink"
    ORANGE = "orange"


class SubscriptionStatus(str, Enum):
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"
    BOUNCED = "bounced"
