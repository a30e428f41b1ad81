"""
Activity model - append-only audit record of one user action on one resource.
resource_id is a soft reference so history survives resource deletion.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from inventory_api.db.base import Base, IdMixin, utcnow


class Activity(IdMixin, Base):
    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_user_created", "user_id", "created_at"),
        Index("ix_activities_resource_created", "resource_type", "resource_id", "created_at"),
    )

    user_id: Mapped[str] = mapped_column(String(24), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(16), nullable=False)
    resource_id: Mapped[str] = mapped_column(String(24), nullable=False)
    action: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, action={self.action}, resource={self.resource_type}:{self.resource_id})>"
