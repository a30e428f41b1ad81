"""
Event variants, one frozen dataclass per topic.
Payloads carry snapshots of resource state taken at publish time, so
subscribers never depend on rows that may since have changed or vanished.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from inventory_api.events.topics import Topic


@dataclass(frozen=True)
class ItemState:
    id: str
    user_id: str
    name: str
    quantity: int
    min_level: int
    folder_id: str | None = None
    tags: tuple[str, ...] = ()

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_level

    @classmethod
    def from_model(cls, item) -> "ItemState":
        return cls(
            id=str(item.id),
            user_id=str(item.user_id),
            name=item.name,
            quantity=item.quantity,
            min_level=item.min_level,
            folder_id=item.folder_id,
            tags=tuple(item.tags or ()),
        )


@dataclass(frozen=True)
class FolderState:
    id: str
    user_id: str
    name: str
    parent_id: str | None = None

    @classmethod
    def from_model(cls, folder) -> "FolderState":
        return cls(
            id=str(folder.id),
            user_id=str(folder.user_id),
            name=folder.name,
            parent_id=folder.parent_id,
        )


@dataclass(frozen=True)
class ItemCreated:
    topic: ClassVar[Topic] = Topic.ITEM_CREATED
    item: ItemState
    actor_id: str


@dataclass(frozen=True)
class ItemUpdated:
    topic: ClassVar[Topic] = Topic.ITEM_UPDATED
    item: ItemState
    previous: ItemState
    actor_id: str
    changes: dict[str, Any] = field(default_factory=dict)
    action: str = "update"


@dataclass(frozen=True)
class ItemDeleted:
    topic: ClassVar[Topic] = Topic.ITEM_DELETED
    item: ItemState
    actor_id: str


@dataclass(frozen=True)
class QuantityChanged:
    topic: ClassVar[Topic] = Topic.ITEM_QUANTITY_CHANGED
    item: ItemState
    previous: int
    next: int
    actor_id: str
    reason: str = "manual"


@dataclass(frozen=True)
class FolderCreated:
    topic: ClassVar[Topic] = Topic.FOLDER_CREATED
    folder: FolderState
    actor_id: str


@dataclass(frozen=True)
class FolderUpdated:
    topic: ClassVar[Topic] = Topic.FOLDER_UPDATED
    folder: FolderState
    actor_id: str
    changes: dict[str, Any] = field(default_factory=dict)
    action: str = "update"


@dataclass(frozen=True)
class FolderDeleted:
    topic: ClassVar[Topic] = Topic.FOLDER_DELETED
    folder: FolderState
    actor_id: str


@dataclass(frozen=True)
class BulkOperation:
    """
    One event per bulk request. before holds the affected items as they were;
    after holds them as they are now (empty for deletes).
    """

    topic: ClassVar[Topic] = Topic.BULK_OPERATION
    operation: str
    count: int
    actor_id: str
    before: tuple[ItemState, ...] = ()
    after: tuple[ItemState, ...] = ()
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def item_ids(self) -> list[str]:
        return [state.id for state in self.before]


@dataclass(frozen=True)
class SystemAlertRaised:
    topic: ClassVar[Topic] = Topic.SYSTEM_ALERT
    title: str
    message: str
    priority: str = "medium"
    user_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UserActivity:
    """Account-level actions (login, register, password change, status change).

    user_id is the actor; subject_id names the account acted on when it differs.
    """

    topic: ClassVar[Topic] = Topic.USER_ACTIVITY
    user_id: str
    action: str
    details: dict[str, Any] = field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
    subject_id: str | None = None


Event = Union[
    ItemCreated,
    ItemUpdated,
    ItemDeleted,
    QuantityChanged,
    FolderCreated,
    FolderUpdated,
    FolderDeleted,
    BulkOperation,
    SystemAlertRaised,
    UserActivity,
]
