"""
Item model - the primary inventory unit.
"""

from sqlalchemy import JSON, Float, Integer, String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from inventory_api.db.base import Base, IdMixin, TimestampMixin
from inventory_api.db.models.enums import BarcodeFormat


class Item(IdMixin, TimestampMixin, Base):
    """Item entity. quantity <= min_level is the low-stock condition."""

    __tablename__ = "items"

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(String(32), nullable=False, default="unit")
    min_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sku: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    barcode: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    barcode_format: Mapped[str] = mapped_column(String(16), nullable=False, default=BarcodeFormat.CODE_128.value)
    barcode_history: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    folder_id: Mapped[str | None] = mapped_column(String(24), nullable=True, index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_level

    @property
    def value(self) -> float:
        return self.price * self.quantity

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name})>"
