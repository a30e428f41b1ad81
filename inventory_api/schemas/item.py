"""Item request/response schemas - REST API contract."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from inventory_api.db.models.enums import BarcodeFormat


class ItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    quantity: int = Field(0, ge=0)
    unit: str = "unit"
    min_level: int = Field(0, ge=0)
    price: float = Field(0, ge=0)
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    notes: str | None = None
    location: str | None = None
    sku: str | None = None
    barcode: str | None = None
    barcode_format: BarcodeFormat = BarcodeFormat.CODE_128
    folder_id: str | None = None


class ItemCreate(ItemBase):
    pass


class ItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    quantity: int | None = Field(None, ge=0)
    unit: str | None = None
    min_level: int | None = Field(None, ge=0)
    price: float | None = Field(None, ge=0)
    tags: list[str] | None = None
    notes: str | None = None
    location: str | None = None
    sku: str | None = None
    folder_id: str | None = None

    @field_validator("name", "quantity", "unit", "min_level", "price", "tags")
    @classmethod
    def not_null(cls, v):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("cannot be null")
        return v


class QuantityChange(BaseModel):
    change: int
    reason: str = "manual"


class ImageAdd(BaseModel):
    url: str = Field(..., min_length=1)


class ItemMove(BaseModel):
    folder_id: str | None = None


class BarcodeUpdate(BaseModel):
    barcode: str = Field(..., min_length=1, max_length=128)
    barcode_format: BarcodeFormat = BarcodeFormat.CODE_128


class BulkDelete(BaseModel):
    ids: list[str] = Field(..., min_length=1)


class BulkUpdate(BaseModel):
    ids: list[str] = Field(..., min_length=1)
    updates: ItemUpdate


class ItemResponse(ItemBase):
    id: str
    user_id: str
    barcode_format: str
    barcode_history: list[dict] = Field(default_factory=list)
    is_low_stock: bool
    value: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
