"""Pharmacy order schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_serializer


class OrderStatus(str, Enum):
    """Order status enumeration."""

    PENDING_PAYMENT = "pending_payment"
    PLACED = "placed"
    PROCESSING = "processing"
    DISPATCHED = "dispatched"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderItemCreate(BaseModel):
    """A line in a new order."""

    name: str = Field(..., min_length=1, max_length=200)
    quantity: int = Field(..., gt=0, le=100)
    unit_price: Decimal = Field(..., ge=0, decimal_places=2)


class OrderCreate(BaseModel):
    """Schema for creating an order."""

    items: list[OrderItemCreate] = Field(..., min_length=1)
    prescription_id: str | None = None
    delivery_address: str = Field(..., min_length=1)
    delivery_notes: str | None = None


class OrderStatusUpdate(BaseModel):
    """Admin status change."""

    status: OrderStatus


class OrderItemResponse(BaseModel):
    """Order line response."""

    id: str
    name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    @field_serializer("unit_price", "total_price", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)


class OrderResponse(BaseModel):
    """Order response."""

    id: str
    patient_id: str
    prescription_id: str | None = None
    status: OrderStatus
    subtotal: Decimal
    delivery_fee: Decimal
    total_amount: Decimal
    delivery_address: str | None = None
    delivery_notes: str | None = None
    payment_id: str | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_serializer("subtotal", "delivery_fee", "total_amount", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)
