"""Tag request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from inventory_api.db.models.enums import TagColor


class TagCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    color: TagColor = TagColor.GRAY
    description: str | None = Field(None, max_length=200)


class TagUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=50)
    color: TagColor | None = None
    description: str | None = Field(None, max_length=200)


class TagResponse(BaseModel):
    id: str
    name: str
    color: str
    description: str | None = None
    item_count: int = 0
    created_at: datetime

    model_config = {"from_attributes": True}
