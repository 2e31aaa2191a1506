"""Doctor and weekly availability models using SQLAlchemy Core."""

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Time,
    func,
    text,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

doctors = Table(
    "doctors",
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
    Column("title", String(20), server_default="Dr."),
    # Professional credentials
    Column("license_number", String(100), unique=True, index=True),
    Column("specialties", JSON),
    Column("languages", JSON),
    Column("qualifications", JSON),
    Column("years_of_experience", Integer),
    Column("bio", Text),
    # Practice information
    Column("consultation_fee", Numeric(10, 2), nullable=False),
    Column("consultation_duration_minutes", Integer, nullable=False, server_default=text("30")),
    Column("consultation_modes", JSON),
    Column("clinic_id", String(36), ForeignKey("clinics.id"), index=True),
    # Verification
    Column(
        "verification_status",
        String(20),
        nullable=False,
        server_default="pending",
        index=True,
    ),
    Column("verification_notes", Text),
    Column("verified_at", DateTime(timezone=True)),
    Column("verified_by", String(36), ForeignKey("users.id")),
    # Ratings and counters
    Column("average_rating", Numeric(3, 2), nullable=False, server_default=text("0")),
    Column("total_reviews", Integer, nullable=False, server_default=text("0")),
    Column("total_consultations", Integer, nullable=False, server_default=text("0")),
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
        "verification_status IN ('pending', 'verified', 'rejected')",
        name="verification_status",
    ),
)

# Weekly recurring windows; day_of_week counts from Sunday = 0
doctor_availability = Table(
    "doctor_availability",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column(
        "doctor_id",
        String(36),
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("day_of_week", Integer, nullable=False),
    Column("start_time", Time, nullable=False),
    Column("end_time", Time, nullable=False),
    Column("consultation_mode", String(20), nullable=False, server_default="in_person"),
    Column("is_active", Boolean, nullable=False, server_default=text("true")),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    CheckConstraint("day_of_week BETWEEN 0 AND 6", name="day_of_week"),
    CheckConstraint("start_time < end_time", name="window_order"),
    CheckConstraint("consultation_mode IN ('in_person', 'video')", name="consultation_mode"),
    Index("ix_doctor_availability_doctor_day", "doctor_id", "day_of_week"),
)
