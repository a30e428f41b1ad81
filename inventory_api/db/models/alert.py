"""
Alert model - derived, status-bearing record of a condition needing attention.
Lifecycle: active -> read -> resolved | dismissed.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_api.db.base import Base, IdMixin, TimestampMixin
from inventory_api.db.models.enums import AlertPriority, AlertStatus

_OPEN_LOW_QUANTITY = text("kind = 'low_quantity' AND status IN ('active', 'read')")


class Alert(IdMixin, TimestampMixin, Base):
    __tablename__ = "alerts"
    __table_args__ = (
        Index("ix_alerts_user_status_created", "user_id", "status", "created_at"),
        Index("ix_alerts_item_kind", "item_id", "kind"),
        # At most one open low-stock alert per item
        Index(
            "uq_alerts_open_low_quantity",
            "item_id",
            unique=True,
            postgresql_where=_OPEN_LOW_QUANTITY,
            sqlite_where=_OPEN_LOW_QUANTITY,
        ),
    )

    user_id: Mapped[str] = mapped_column(String(24), nullable=False)
    item_id: Mapped[str | None] = mapped_column(String(24), nullable=True)
    folder_id: Mapped[str | None] = mapped_column(String(24), nullable=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default=AlertPriority.MEDIUM.value)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=AlertStatus.ACTIVE.value)
    threshold: Mapped[float | None] = mapped_column(Float, nullable=True)
    current_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dismissed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Alert(id={self.id}, kind={self.kind}, status={self.status})>"
