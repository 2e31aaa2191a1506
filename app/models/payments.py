"""Payment model using SQLAlchemy Core."""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Table,
    func,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

payments = Table(
    "payments",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False, index=True),
    Column("type", String(20), nullable=False),
    Column("amount", Numeric(10, 2), nullable=False),
    Column("currency", String(3), nullable=False, server_default="KES"),
    Column("method", String(20), nullable=False),
    Column("status", String(20), nullable=False, server_default="pending", index=True),
    # Gateway bookkeeping
    Column("provider", String(20), nullable=False, server_default="paystack"),
    Column("provider_reference", String(100), unique=True),
    Column("provider_response", JSON),
    # Exactly one of these is set, matching ``type``
    Column("appointment_id", String(36), ForeignKey("appointments.id")),
    Column("order_id", String(36), ForeignKey("orders.id")),
    Column("paid_at", DateTime(timezone=True)),
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
    CheckConstraint("type IN ('appointment', 'order')", name="type"),
    CheckConstraint("method IN ('mpesa', 'card')", name="method"),
    CheckConstraint("status IN ('pending', 'completed', 'failed', 'refunded')", name="status"),
)
