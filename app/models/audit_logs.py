"""Audit trail for sensitive actions."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String, Table, Text, func

from app.core.utils import new_id, utc_now
from app.models.base import metadata

audit_logs = Table(
    "audit_logs",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="SET NULL")),
    Column("action", String(100), nullable=False),
    Column("resource_type", String(50), nullable=False),
    Column("resource_id", String(36)),
    Column("details", JSON),
    Column("ip_address", String(45)),
    Column("user_agent", Text),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    Index("ix_audit_logs_resource", "resource_type", "resource_id"),
    Index("ix_audit_logs_user", "user_id"),
)
