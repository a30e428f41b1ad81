"""
Newsletter subscription model. Not tied to a user account.
"""

import secrets
from datetime import datetime

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_api.db.base import Base, IdMixin, TimestampMixin, utcnow
from inventory_api.db.models.enums import SubscriptionStatus

DEFAULT_NEWSLETTER_PREFERENCES = {"productUpdates": True, "tips": True, "news": True}


def new_unsubscribe_token() -> str:
    return secrets.token_hex(32)


class NewsletterSubscription(IdMixin, TimestampMixin, Base):
    __tablename__ = "newsletter_subscriptions"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=SubscriptionStatus.SUBSCRIBED.value, index=True
    )
    source: Mapped[str] = mapped_column(String(64), nullable=False, default="website")
    preferences: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_NEWSLETTER_PREFERENCES)
    )
    unsubscribe_token: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, default=new_unsubscribe_token
    )
    subscribed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    unsubscribed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
