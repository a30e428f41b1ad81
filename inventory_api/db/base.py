"""
SQLAlchemy declarative base and shared column helpers.
Identifiers are opaque 24-char hex strings generated by the application,
so they compare as plain strings across every layer.
"""

import re
import secrets
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ID_LENGTH = 24
_ID_RE = re.compile(r"[0-9a-f]{24}")


def new_id() -> str:
    return secrets.token_hex(ID_LENGTH // 2)


def is_valid_id(value) -> bool:
    """True for well-formed identifiers."""
    return isinstance(value, str) and bool(_ID_RE.fullmatch(value))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models. Enables Alembic migrations."""

    pass


class IdMixin:
    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )
