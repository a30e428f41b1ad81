"""Initial schema: users, folders, items, tags, activities, alerts, settings, newsletter

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OPEN_LOW_QUANTITY = sa.text("kind = 'low_quantity' AND status IN ('active', 'read')")


def _id() -> sa.Column:
    return sa.Column("id", sa.String(24), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(16), nullable=False, server_default="user"),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_created_at"), "users", ["created_at"], unique=False)

    op.create_table(
        "folders",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("parent_id", sa.String(24), nullable=True),
        sa.Column("user_id", sa.String(24), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_folders_parent_id"), "folders", ["parent_id"], unique=False)
    op.create_index(op.f("ix_folders_user_id"), "folders", ["user_id"], unique=False)
    op.create_index(op.f("ix_folders_created_at"), "folders", ["created_at"], unique=False)

    op.create_table(
        "items",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(32), nullable=False, server_default="unit"),
        sa.Column("min_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("sku", sa.String(64), nullable=True),
        sa.Column("barcode", sa.String(128), nullable=True),
        sa.Column("barcode_format", sa.String(16), nullable=False, server_default="CODE_128"),
        sa.Column("barcode_history", sa.JSON(), nullable=False),
        sa.Column("folder_id", sa.String(24), nullable=True),
        sa.Column("user_id", sa.String(24), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_items_name"), "items", ["name"], unique=False)
    op.create_index(op.f("ix_items_sku"), "items", ["sku"], unique=False)
    op.create_index(op.f("ix_items_barcode"), "items", ["barcode"], unique=False)
    op.create_index(op.f("ix_items_folder_id"), "items", ["folder_id"], unique=False)
    op.create_index(op.f("ix_items_user_id"), "items", ["user_id"], unique=False)
    op.create_index(op.f("ix_items_created_at"), "items", ["created_at"], unique=False)

    op.create_table(
        "tags",
        _id(),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("color", sa.String(16), nullable=False, server_default="gray"),
        sa.Column("description", sa.String(200), nullable=True),
        sa.Column("user_id", sa.String(24), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
    )
    op.create_index(op.f("ix_tags_user_id"), "tags", ["user_id"], unique=False)
    op.create_index(op.f("ix_tags_created_at"), "tags", ["created_at"], unique=False)

    op.create_table(
        "activities",
        _id(),
        sa.Column("user_id", sa.String(24), nullable=False),
        sa.Column("resource_type", sa.String(16), nullable=False),
        sa.Column("resource_id", sa.String(24), nullable=False),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_activities_action"), "activities", ["action"], unique=False)
    op.create_index(op.f("ix_activities_created_at"), "activities", ["created_at"], unique=False)
    op.create_index("ix_activities_user_created", "activities", ["user_id", "created_at"], unique=False)
    op.create_index(
        "ix_activities_resource_created", "activities", ["resource_type", "resource_id", "created_at"], unique=False
    )

    op.create_table(
        "alerts",
        _id(),
        sa.Column("user_id", sa.String(24), nullable=False),
        sa.Column("item_id", sa.String(24), nullable=True),
        sa.Column("folder_id", sa.String(24), nullable=True),
        sa.Column("kind", sa.String(32), nullable=False),
        sa.Column("priority", sa.String(16), nullable=False, server_default="medium"),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("threshold", sa.Float(), nullable=True),
        sa.Column("current_value", sa.Float(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("dismissed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_alerts_expires_at"), "alerts", ["expires_at"], unique=False)
    op.create_index(op.f("ix_alerts_created_at"), "alerts", ["created_at"], unique=False)
    op.create_index("ix_alerts_user_status_created", "alerts", ["user_id", "status", "created_at"], unique=False)
    op.create_index("ix_alerts_item_kind", "alerts", ["item_id", "kind"], unique=False)
    op.create_index(
        "uq_alerts_open_low_quantity",
        "alerts",
        ["item_id"],
        unique=True,
        postgresql_where=OPEN_LOW_QUANTITY,
        sqlite_where=OPEN_LOW_QUANTITY,
    )

    op.create_table(
        "user_settings",
        _id(),
        sa.Column("user_id", sa.String(24), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index(op.f("ix_user_settings_created_at"), "user_settings", ["created_at"], unique=False)

    op.create_table(
        "newsletter_subscriptions",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="subscribed"),
        sa.Column("source", sa.String(64), nullable=False, server_default="website"),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("unsubscribe_token", sa.String(64), nullable=False),
        sa.Column("subscribed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("unsubscribed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("unsubscribe_token"),
    )
    op.create_index(
        op.f("ix_newsletter_subscriptions_email"), "newsletter_subscriptions", ["email"], unique=True
    )
    op.create_index(
        op.f("ix_newsletter_subscriptions_status"), "newsletter_subscriptions", ["status"], unique=False
    )
    op.create_index(
        op.f("ix_newsletter_subscriptions_created_at"), "newsletter_subscriptions", ["created_at"], unique=False
    )


def downgrade() -> None:
    op.drop_table("newsletter_subscriptions")
    op.drop_table("user_settings")
    op.drop_index("uq_alerts_open_low_quantity", table_name="alerts")
    op.drop_table("alerts")
    op.drop_table("activities")
    op.drop_table("tags")
    op.drop_table("items")
    op.drop_table("folders")
    op.drop_table("users")
