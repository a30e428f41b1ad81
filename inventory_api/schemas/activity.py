"""Activity response schema."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ActivityResponse(BaseModel):
    id: str
    user_id: str
    resource_type: str
    resource_id: str
    action: str
    details: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}
