"""Medical record schemas."""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class RecordType(str, Enum):
    """Kinds of medical record."""

    LAB_RESULT = "lab_result"
    PRESCRIPTION = "prescription"
    IMAGING = "imaging"
    VACCINATION = "vaccination"
    MEDICAL_HISTORY = "medical_history"
    OTHER = "other"


class RecordCreate(BaseModel):
    """Metadata for a file already uploaded to external storage."""

    record_type: RecordType
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    file_url: str | None = Field(None, max_length=1000)
    file_path: str | None = Field(None, max_length=500)
    mime_type: str | None = Field(None, max_length=100)
    file_size: int | None = Field(None, ge=0)
    record_date: date | None = None
    metadata: dict[str, Any] | None = None


class RecordShare(BaseModel):
    """Target doctor for share/revoke."""

    doctor_id: str = Field(..., min_length=1, max_length=36)


class RecordResponse(BaseModel):
    """Medical record response."""

    id: str
    patient_id: str
    record_type: RecordType
    title: str
    description: str | None = None
    file_url: str | None = None
    file_path: str | None = None
    mime_type: str | None = None
    file_size: int | None = None
    record_date: date | None = None
    shared_with: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime
