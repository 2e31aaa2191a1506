"""Appointment schemas for request/response validation."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from app.core.utils import as_utc


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class ConsultationType(str, Enum):
    """How the consultation takes place."""

    IN_PERSON = "in_person"
    VIDEO = "video"


class AppointmentCreate(BaseModel):
    """Schema for booking a new appointment."""

    doctor_id: str = Field(..., min_length=1, max_length=36)
    scheduled_at: datetime
    consultation_type: ConsultationType
    clinic_id: str | None = Field(None, max_length=36)
    notes: str | None = Field(None, max_length=1000)

    @field_validator("scheduled_at")
    @classmethod
    def normalize_scheduled_at(cls, v: datetime) -> datetime:
        """Store every start time in UTC."""
        return as_utc(v)


class AppointmentCancel(BaseModel):
    """Optional body for cancellation."""

    reason: str | None = Field(None, max_length=500)


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: str
    patient_id: str
    doctor_id: str
    clinic_id: str | None = None
    scheduled_at: datetime
    duration_minutes: int
    consultation_type: ConsultationType
    status: AppointmentStatus
    notes: str | None = None
    cancellation_reason: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    payment_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("scheduled_at", "cancelled_at", "created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class AppointmentFilters(BaseModel):
    """Filters for listing appointments."""

    status: AppointmentStatus | None = None
    upcoming: bool = False
    on_date: date | None = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=50)


class TimeSlot(BaseModel):
    """A bookable or booked interval, in UTC."""

    start: datetime
    end: datetime
    modes: list[ConsultationType] = Field(default_factory=list)


class SlotAvailabilityResponse(BaseModel):
    """Slots for one doctor on one local date."""

    doctor_id: str
    day: date
    timezone: str
    duration_minutes: int
    available_slots: list[TimeSlot]
    booked_slots: list[TimeSlot]
