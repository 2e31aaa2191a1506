"""Payment schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_serializer, model_validator


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    """Customer-facing payment method."""

    MPESA = "mpesa"
    CARD = "card"


class PaymentType(str, Enum):
    """What a payment pays for."""

    APPOINTMENT = "appointment"
    ORDER = "order"


class PaymentInitialize(BaseModel):
    """Start a payment for exactly one appointment or order."""

    appointment_id: str | None = None
    order_id: str | None = None
    method: PaymentMethod = PaymentMethod.MPESA
    email: str | None = Field(None, description="Overrides the account email sent to the gateway")

    @model_validator(mode="after")
    def check_single_target(self) -> "PaymentInitialize":
        """Require exactly one of appointment_id and order_id."""
        if bool(self.appointment_id) == bool(self.order_id):
            raise ValueError("Provide exactly one of appointment_id or order_id")
        return self


class PaymentInitializeResponse(BaseModel):
    """Gateway checkout handle."""

    payment_id: str
    reference: str
    authorization_url: str
    access_code: str | None = None


class PaymentResponse(BaseModel):
    """Payment response."""

    id: str
    user_id: str
    type: PaymentType
    amount: Decimal
    currency: str
    method: PaymentMethod
    status: PaymentStatus
    provider: str
    provider_reference: str | None = None
    appointment_id: str | None = None
    order_id: str | None = None
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)


class WebhookAck(BaseModel):
    """Acknowledgement returned to the gateway."""

    received: bool = True
    event: str | None = None
