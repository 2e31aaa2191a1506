"""Patient model definition using SQLAlchemy Core."""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    func,
)

from app.core.utils import utc_now
from app.models.base import metadata

patients = Table(
    "patients",
    metadata,
    # Shares its primary key with the owning user
    Column(
        "id",
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    # Personal health information
    Column("date_of_birth", Date),
    Column("gender", String(20)),
    Column("blood_type", String(5)),
    Column("allergies", JSON),
    Column("preferred_language", String(5), server_default="en"),
    # Emergency contact
    Column("emergency_contact_name", String(200)),
    Column("emergency_contact_phone", String(20)),
    Column("clinic_id", String(36), ForeignKey("clinics.id"), index=True),
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
    CheckConstraint(
        "gender IS NULL OR gender IN ('male', 'female', 'other', 'prefer_not_to_say')",
        name="gender",
    ),
)

Index("ix_patients_name", patients.c.first_name, patients.c.last_name)
