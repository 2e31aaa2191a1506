"""Pharmacy order models using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    func,
)

from app.core.utils import new_id, utc_now
from app.models.base import metadata

orders = Table(
    "orders",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("patient_id", String(36), ForeignKey("patients.id"), nullable=False, index=True),
    Column("prescription_id", String(36), ForeignKey("prescriptions.id")),
    Column("status", String(20), nullable=False, server_default="pending_payment", index=True),
    # Amounts are computed server-side
    Column("subtotal", Numeric(10, 2), nullable=False),
    Column("delivery_fee", Numeric(10, 2), nullable=False),
    Column("total_amount", Numeric(10, 2), nullable=False),
    Column("delivery_address", Text),
    Column("delivery_notes", Text),
    Column("payment_id", String(36)),
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
    CheckConstraint(
        "status IN ('pending_payment', 'placed', 'processing', 'dispatched', "
        "'delivered', 'cancelled')",
        name="status",
    ),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column(
        "order_id",
        String(36),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", String(200), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(10, 2), nullable=False),
    Column("total_price", Numeric(10, 2), nullable=False),
    CheckConstraint("quantity > 0", name="quantity"),
)
