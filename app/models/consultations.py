"""Consultation and prescription models using SQLAlchemy Core."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
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

consultations = Table(
    "consultations",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    # At most one consultation per appointment
    Column(
        "appointment_id",
        String(36),
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("room_id", String(100)),
    Column("started_at", DateTime(timezone=True)),
    Column("ended_at", DateTime(timezone=True)),
    Column("duration_seconds", Integer),
    # Clinical notes
    Column("doctor_notes", Text),
    Column("diagnosis", Text),
    Column("follow_up_recommended", Boolean, nullable=False, server_default=text("false")),
    Column("follow_up_notes", Text),
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
)

prescriptions = Table(
    "prescriptions",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column(
        "consultation_id",
        String(36),
        ForeignKey("consultations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("patient_id", String(36), ForeignKey("patients.id"), nullable=False, index=True),
    Column("doctor_id", String(36), ForeignKey("doctors.id"), nullable=False, index=True),
    # Example: [{"name": "Amoxicillin", "dosage": "500mg", "frequency": "3x daily", "duration": "7 days"}]
    Column("medications", JSON, nullable=False),
    Column("instructions", Text),
    Column("valid_until", Date),
    Column(
        "issued_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    ),
)
