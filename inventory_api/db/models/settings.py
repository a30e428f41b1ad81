"""
UserSettings model - one row per user holding only the sections the user
has overridden. Defaults live in code and are merged on read.
"""

from sqlalchemy import JSON, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from inventory_api.db.base import Base, IdMixin, TimestampMixin


class UserSettings(IdMixin, TimestampMixin, Base):
    __tablename__ = "user_settings"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
