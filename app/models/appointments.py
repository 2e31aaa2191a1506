"""Appointments table model using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
    text,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

ACTIVE_SLOT_PREDICATE = "status NOT IN ('cancelled', 'no_show')"

appointments = Table(
    "appointments",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    # Ownership / references
    Column("patient_id", String(36), ForeignKey("patients.id"), nullable=False, index=True),
    Column("doctor_id", String(36), ForeignKey("doctors.id"), nullable=False, index=True),
    Column("clinic_id", String(36), ForeignKey("clinics.id"), nullable=True),
    # Appointment details
    Column("scheduled_at", DateTime(timezone=True), nullable=False),
    Column("duration_minutes", Integer, nullable=False, server_default=text("30")),
    Column("consultation_type", String(20), nullable=False),
    Column("notes", Text),
    # Status management
    Column("status", String(20), nullable=False, server_default="pending_payment", index=True),
    Column("cancellation_reason", Text),
    Column("cancelled_at", DateTime(timezone=True)),
    Column("cancelled_by", String(36), ForeignKey("users.id")),
    # Payment link is set once a payment is initialized
    Column("payment_id", String(36)),
    # Audit fields
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
    # Constraints
    CheckConstraint("consultation_type IN ('in_person', 'video')", name="consultation_type"),
    CheckConstraint(
        "status IN ('pending_payment', 'confirmed', 'in_progress', 'completed', "
        "'cancelled', 'no_show')",
        name="status",
    ),
    # One live booking per doctor and start time; cancelled and no-show rows free the slot
    Index(
        "uq_appointments_doctor_slot_active",
        "doctor_id",
        "scheduled_at",
        unique=True,
        postgresql_where=text(ACTIVE_SLOT_PREDICATE),
        sqlite_where=text(ACTIVE_SLOT_PREDICATE),
    ),
    Index("ix_appointments_doctor_scheduled", "doctor_id", "scheduled_at"),
)
