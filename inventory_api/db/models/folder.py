"""
Folder model - hierarchical grouping of items. parent_id is a soft reference;
cycles are rejected by the folder service, not the schema.
"""

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from inventory_api.db.base import Base, IdMixin, TimestampMixin


class Folder(IdMixin, TimestampMixin, Base):
    __tablename__ = "folders"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_id: Mapped[str | None] = mapped_column(String(24), nullable=True, index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name})>"
