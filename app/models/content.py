"""Articles and doctor reviews."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    func,
    text,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

articles = Table(
    "articles",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("title", String(300), nullable=False),
    Column("slug", String(300), nullable=False, unique=True),
    Column("excerpt", Text),
    Column("body", Text, nullable=False),
    Column("category", String(50), index=True),
    Column("status", String(20), nullable=False, server_default="draft", index=True),
    Column("author_id", String(36), ForeignKey("users.id")),
    Column("published_at", DateTime(timezone=True)),
    Column("view_count", Integer, nullable=False, server_default=text("0")),
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
    CheckConstraint("status IN ('draft', 'published', 'archived')", name="status"),
)

reviews = Table(
    "reviews",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("patient_id", String(36), ForeignKey("patients.id"), nullable=False),
    Column("doctor_id", String(36), ForeignKey("doctors.id"), nullable=False, index=True),
    # One review per completed appointment
    Column(
        "appointment_id",
        String(36),
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("rating", Integer, nullable=False),
    Column("comment", Text),
    Column("is_anonymous", Boolean, nullable=False, server_default=text("false")),
    Column("moderation_status", String(20), nullable=False, server_default="pending"),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    CheckConstraint("rating BETWEEN 1 AND 5", name="rating"),
    CheckConstraint(
        "moderation_status IN ('pending', 'approved', 'rejected')",
        name="moderation_status",
    ),
)
