"""User model definition using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    String,
    Table,
    func,
    text,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    # Identity (mirrored from the auth provider)
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("phone", String(20), unique=True, index=True),
    Column("email_verified", Boolean, nullable=False, server_default=text("false")),
    Column("phone_verified", Boolean, nullable=False, server_default=text("false")),
    # Authorization
    Column("role", String(20), nullable=False, index=True),
    Column("status", String(20), nullable=False, server_default="pending", index=True),
    # Audit
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    CheckConstraint("role IN ('patient', 'doctor', 'admin')", name="role"),
    CheckConstraint("status IN ('pending', 'active', 'suspended')", name="status"),
)
