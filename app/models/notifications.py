"""In-app notification model."""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    func,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

notifications = Table(
    "notifications",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column(
        "user_id",
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("type", String(50), nullable=False),
    Column("title", Text, nullable=False),
    Column("body", Text, nullable=False),
    Column("data", JSON),
    Column("channel", String(20), nullable=False, server_default="in_app"),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("sent_at", DateTime(timezone=True)),
    Column("read_at", DateTime(timezone=True)),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    CheckConstraint("channel IN ('in_app', 'push', 'sms', 'email')", name="channel"),
    CheckConstraint("status IN ('pending', 'sent', 'read', 'failed')", name="status"),
    Index("ix_notifications_user_status", "user_id", "status"),
    Index("ix_notifications_created_at", "created_at"),
)
