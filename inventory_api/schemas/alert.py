"""Alert request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from inventory_api.db.models.enums import AlertPriority


class SystemAlertCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=500)
    priority: AlertPriority = AlertPriority.MEDIUM
    user_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class AlertResponse(BaseModel):
    id: str
    user_id: str
    item_id: str | None = None
    folder_id: str | None = None
    kind: str
    priority: str
    title: str
    message: str
    status: str
    threshold: float | None = None
    current_value: float | None = None
    details: dict[str, Any]
    read_at: datetime | None = None
    resolved_at: datetime | None = None
    dismissed_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
