"""Doctor review schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_serializer


class ModerationStatus(str, Enum):
    """Review moderation status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewCreate(BaseModel):
    """Schema for a patient reviewing a completed appointment."""

    appointment_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)
    is_anonymous: bool = False


class ReviewResponse(BaseModel):
    """Review response schema."""

    id: str
    doctor_id: str
    appointment_id: str
    rating: int
    comment: str | None = None
    is_anonymous: bool
    moderation_status: ModerationStatus
    patient_name: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class RatingSummary(BaseModel):
    """Approved-review statistics for one doctor."""

    doctor_id: str
    average_rating: Decimal
    total_reviews: int
    distribution: dict[int, int]

    @field_serializer("average_rating", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)
