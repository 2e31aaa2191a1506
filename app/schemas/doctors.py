"""Doctor schemas for request/response validation."""

from datetime import datetime, time
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_serializer, model_validator

from app.schemas.appointments import ConsultationType

# ============================================================================
# Doctor Profile Schemas
# ============================================================================


class VerificationStatus(str, Enum):
    """Doctor verification status."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class DoctorProfileCreate(BaseModel):
    """Schema for a doctor registering their profile."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    license_number: str = Field(..., min_length=1, max_length=100)
    specialties: list[str] = Field(..., min_length=1)
    languages: list[str] = Field(default_factory=lambda: ["en"])
    qualifications: list[str] | None = None
    years_of_experience: int | None = Field(None, ge=0)
    bio: str | None = None
    consultation_fee: Decimal = Field(..., ge=0, decimal_places=2)
    consultation_duration_minutes: int = Field(30, ge=10, le=180)
    consultation_modes: list[ConsultationType] = Field(
        default_factory=lambda: [ConsultationType.IN_PERSON]
    )
    clinic_id: str | None = None


class DoctorResponse(BaseModel):
    """Doctor response schema."""

    id: str
    title: str | None = None
    first_name: str
    last_name: str
    license_number: str | None = None
    specialties: list[str] | None = None
    languages: list[str] | None = None
    qualifications: list[str] | None = None
    years_of_experience: int | None = None
    bio: str | None = None
    consultation_fee: Decimal
    consultation_duration_minutes: int
    consultation_modes: list[ConsultationType] | None = None
    clinic_id: str | None = None
    verification_status: VerificationStatus
    verification_notes: str | None = None
    verified_at: datetime | None = None
    verified_by: str | None = None
    average_rating: Decimal = Decimal("0")
    total_reviews: int = 0
    total_consultations: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("consultation_fee", "average_rating", when_used="json")
    def serialize_decimal(self, value: Decimal | None) -> float | None:
        """Serialize Decimal to float for JSON."""
        return float(value) if value is not None else None


class DoctorSearchFilters(BaseModel):
    """Search filters for the public doctor directory."""

    q: str | None = None
    specialty: str | None = None
    mode: ConsultationType | None = None
    max_fee: Decimal | None = Field(None, ge=0)
    min_rating: float | None = Field(None, ge=0, le=5)
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)


# ============================================================================
# Availability Schemas
# ============================================================================


class AvailabilityWindow(BaseModel):
    """One weekly recurring window; day_of_week counts from Sunday = 0."""

    day_of_week: int = Field(..., ge=0, le=6)
    start_time: time
    end_time: time
    consultation_mode: ConsultationType = ConsultationType.IN_PERSON
    is_active: bool = True

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_window_order(self) -> "AvailabilityWindow":
        """Validate the window starts before it ends."""
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class AvailabilityUpdate(BaseModel):
    """Replacement set of weekly windows."""

    windows: list[AvailabilityWindow]


# ============================================================================
# Verification Schemas
# ============================================================================


class VerificationApprove(BaseModel):
    """Optional notes attached to an approval."""

    notes: str | None = Field(None, max_length=1000)


class VerificationReject(BaseModel):
    """Optional reason attached to a rejection."""

    reason: str | None = Field(None, max_length=1000)


class VerificationDetail(DoctorResponse):
    """Doctor profile as seen by a moderator."""

    email: str | None = None
    phone: str | None = None
