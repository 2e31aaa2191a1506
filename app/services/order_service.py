"""Pharmacy order service."""

from decimal import Decimal

import structlog
from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from app.core.state_machines import ORDER_LIFECYCLE
from app.core.utils import new_id, utc_now
from app.models.consultations import prescriptions
from app.models.orders import order_items, orders
from app.models.patients import patients
from app.schemas.common import Pagination
from app.schemas.orders import OrderCreate, OrderItemResponse, OrderResponse, OrderStatus
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)

CENTS = Decimal("0.01")
CANCELLABLE_BY_PATIENT = (
    OrderStatus.PENDING_PAYMENT.value,
    OrderStatus.PLACED.value,
    OrderStatus.PROCESSING.value,
)


class OrderService:
    """Service for pharmacy orders."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_row(self, order_id: str):
        row = (await self.db.execute(select(orders).where(orders.c.id == order_id))).fetchone()
        if not row:
            raise NotFoundException("Order not found")
        return row

    async def _to_response(self, row) -> OrderResponse:
        items = (
            await self.db.execute(
                select(order_items).where(order_items.c.order_id == row.id).order_by(order_items.c.name)
            )
        ).fetchall()
        return OrderResponse(
            **dict(row._mapping),
            items=[OrderItemResponse.model_validate(dict(item._mapping)) for item in items],
        )

    async def _transition(self, row, target: OrderStatus, **values):
        ORDER_LIFECYCLE.ensure(row.status, target.value)
        updated = (
            await self.db.execute(
                update(orders)
                .where(and_(orders.c.id == row.id, orders.c.status == row.status))
                .values(status=target.value, updated_at=utc_now(), **values)
                .returning(orders)
            )
        ).fetchone()
        if not updated:
            raise ConflictException("Order was modified concurrently, please retry")
        return updated

    async def create(self, user_id: str, data: OrderCreate) -> OrderResponse:
        """
        Create an order awaiting payment. Totals are computed here.

        Raises:
            NotFoundException: Caller has no patient profile, or prescription missing
            ForbiddenException: Prescription issued to another patient
        """
        patient = (
            await self.db.execute(select(patients.c.id).where(patients.c.id == user_id))
        ).fetchone()
        if not patient:
            raise NotFoundException("Patient not found")

        if data.prescription_id:
            prescription = (
                await self.db.execute(
                    select(prescriptions.c.patient_id).where(
                        prescriptions.c.id == data.prescription_id
                    )
                )
            ).fetchone()
            if not prescription:
                raise NotFoundException("Prescription not found")
            if prescription.patient_id != user_id:
                raise ForbiddenException("Prescription belongs to another patient")

        lines = [
            {
                "name": item.name,
                "quantity": item.quantity,
                "unit_price": item.unit_price.quantize(CENTS),
                "total_price": (item.unit_price * item.quantity).quantize(CENTS),
            }
            for item in data.items
        ]
        subtotal = sum((line["total_price"] for line in lines), Decimal("0"))
        delivery_fee = Decimal(str(settings.order_delivery_fee)).quantize(CENTS)

        order_id = new_id()
        await self.db.execute(
            insert(orders).values(
                id=order_id,
                patient_id=user_id,
                prescription_id=data.prescription_id,
                status=OrderStatus.PENDING_PAYMENT.value,
                subtotal=subtotal,
                delivery_fee=delivery_fee,
                total_amount=subtotal + delivery_fee,
                delivery_address=data.delivery_address,
                delivery_notes=data.delivery_notes,
            )
        )
        await self.db.execute(
            insert(order_items), [{"order_id": order_id, **line} for line in lines]
        )
        await self.db.commit()

        logger.info(
            "order_created",
            order_id=order_id,
            patient_id=user_id,
            items=len(lines),
            total=str(subtotal + delivery_fee),
        )
        return await self._to_response(await self._get_row(order_id))

    async def list_own(
        self, user_id: str, page: int = 1, limit: int = 20
    ) -> tuple[list[OrderResponse], Pagination]:
        """List the caller's orders, newest first."""
        condition = orders.c.patient_id == user_id
        total = (
            await self.db.execute(select(func.count()).select_from(orders).where(condition))
        ).scalar() or 0
        rows = (
            await self.db.execute(
                select(orders)
                .where(condition)
                .order_by(orders.c.created_at.desc())
                .limit(limit)
                .offset((page - 1) * limit)
            )
        ).fetchall()
        items = [await self._to_response(row) for row in rows]
        return items, Pagination.build(page, limit, total)

    async def get(self, order_id: str, user: dict) -> OrderResponse:
        """Get an order the caller owns (admins see all)."""
        row = await self._get_row(order_id)
        if row.patient_id != user["id"] and user["role"] != "admin":
            raise ForbiddenException("Access denied to this order")
        return await self._to_response(row)

    async def update_status(self, order_id: str, target: OrderStatus) -> OrderResponse:
        """Admin status change along the order lifecycle."""
        row = await self._get_row(order_id)
        updated = await self._transition(row, target)
        await NotificationService.notify(
            self.db,
            user_id=row.patient_id,
            notification_type=f"order_{target.value}",
            title="Order update",
            body=f"Your order is now {target.value.replace('_', ' ')}.",
            data={"order_id": row.id},
        )
        await self.db.commit()

        logger.info("order_status_changed", order_id=row.id, status=target.value)
        return await self._to_response(updated)

    async def cancel(self, order_id: str, user_id: str) -> OrderResponse:
        """
        Cancel an order the caller owns before it is dispatched.

        Raises:
            BadRequestException: Order already dispatched, delivered or cancelled
        """
        row = await self._get_row(order_id)
        if row.patient_id != user_id:
            raise ForbiddenException("Access denied to this order")
        if row.status not in CANCELLABLE_BY_PATIENT:
            raise BadRequestException("Order can no longer be cancelled")

        updated = await self._transition(row, OrderStatus.CANCELLED)
        await self.db.commit()

        logger.info("order_cancelled", order_id=row.id)
        return await self._to_response(updated)

    async def mark_placed(self, order_id: str, payment_id: str) -> None:
        """Move a paid order to ``placed``, without committing. Idempotent."""
        row = await self._get_row(order_id)
        if row.status == OrderStatus.PLACED.value:
            return
        await self._transition(row, OrderStatus.PLACED, payment_id=payment_id)
        await NotificationService.notify(
            self.db,
            user_id=row.patient_id,
            notification_type="order_placed",
            title="Order placed",
            body="Your payment was received and your order has been placed.",
            data={"order_id": row.id},
        )
        logger.info("order_placed", order_id=row.id, payment_id=payment_id)
