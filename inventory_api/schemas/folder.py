"""Folder request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class FolderCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    parent_id: str | None = None


class FolderUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class FolderMove(BaseModel):
    parent_id: str | None = None


class FolderResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    parent_id: str | None = None
    user_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FolderNode(FolderResponse):
    children: list["FolderNode"] = Field(default_factory=list)


FolderNode.model_rebuild()
