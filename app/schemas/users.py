"""User and patient profile schemas."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from app.schemas.doctors import DoctorResponse


class UserRole(str, Enum):
    """User roles."""

    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class UserResponse(BaseModel):
    """Schema for user response."""

    id: str
    email: str
    phone: str | None = None
    email_verified: bool = False
    phone_verified: bool = False
    role: UserRole
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PatientProfileUpdate(BaseModel):
    """Create or update the caller's patient profile."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: date | None = None
    gender: str | None = Field(None, pattern="^(male|female|other|prefer_not_to_say)$")
    blood_type: str | None = Field(None, max_length=5)
    allergies: list[str] | None = None
    preferred_language: str = Field("en", max_length=5)
    emergency_contact_name: str | None = Field(None, max_length=200)
    emergency_contact_phone: str | None = Field(None, max_length=20)


class PatientProfileResponse(PatientProfileUpdate):
    """Patient profile response."""

    id: str
    clinic_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MeResponse(BaseModel):
    """The caller's account and role profile."""

    user: UserResponse
    patient: PatientProfileResponse | None = None
    doctor: DoctorResponse | None = None
