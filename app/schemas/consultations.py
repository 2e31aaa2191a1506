"""Consultation and prescription schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from app.schemas.appointments import AppointmentStatus


class ConsultationResponse(BaseModel):
    """Consultation row."""

    id: str
    appointment_id: str
    room_id: str | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_seconds: int | None = None
    doctor_notes: str | None = None
    diagnosis: str | None = None
    follow_up_recommended: bool = False
    follow_up_notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConsultationSession(BaseModel):
    """Everything a participant needs to join the video room."""

    appointment_id: str
    appointment_status: AppointmentStatus
    room_id: str | None = None
    join_token: str | None = None
    role: str
    consultation: ConsultationResponse | None = None


class ConsultationNotes(BaseModel):
    """Doctor's clinical notes."""

    doctor_notes: str | None = None
    diagnosis: str | None = None
    follow_up_recommended: bool | None = None
    follow_up_notes: str | None = None


class Medication(BaseModel):
    """One prescribed medication."""

    name: str = Field(..., min_length=1, max_length=200)
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = Field(..., min_length=1, max_length=100)
    duration: str | None = Field(None, max_length=100)
    instructions: str | None = None


class PrescriptionCreate(BaseModel):
    """Schema for issuing a prescription."""

    appointment_id: str
    medications: list[Medication] = Field(..., min_length=1)
    instructions: str | None = None
    valid_until: date | None = None


class PrescriptionResponse(BaseModel):
    """Prescription response."""

    id: str
    consultation_id: str
    patient_id: str
    doctor_id: str
    medications: list[Medication]
    instructions: str | None = None
    valid_until: date | None = None
    issued_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}
