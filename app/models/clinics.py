"""Clinic model definition using SQLAlchemy Core."""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    String,
    Table,
    Text,
    func,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

clinics = Table(
    "clinics",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    # Basic Information
    Column("name", String(200), nullable=False),
    Column("slug", String(100), unique=True, index=True),
    Column("description", Text),
    Column("logo_url", String(500)),
    # Location
    Column("address", Text),
    Column("city", String(100), index=True),
    Column("region", String(100), index=True),
    # IANA zone the availability windows of its doctors are expressed in
    Column("timezone", String(64)),
    # Contact
    Column("phone", String(20)),
    Column("email", String(255)),
    Column("website", String(500)),
    # Example: {"monday": {"open": "09:00", "close": "18:00"}, "sunday": {"closed": true}}
    Column("operating_hours", JSON),
    # Example: {"allow_online_booking": true, "appointment_buffer": 10, "max_advance_booking_days": 30}
    Column("settings", JSON),
    Column("status", String(20), nullable=False, server_default="active", index=True),
    # Metadata
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
    CheckConstraint("status IN ('active', 'suspended')", name="status"),
)
