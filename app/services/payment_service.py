"""Payment service: checkout, verification, webhooks and refunds."""

from decimal import Decimal
from typing import Any

import structlog
from fastapi import Request
from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ExternalServiceException,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
)
from app.core.paystack import PaystackClient, from_subunit, to_subunit
from app.core.state_machines import PAYMENT_LIFECYCLE
from app.core.utils import new_id, utc_now
from app.models.appointments import appointments
from app.models.doctors import doctors
from app.models.orders import orders
from app.models.payments import payments
from app.schemas.common import Pagination
from app.schemas.payments import (
    PaymentInitialize,
    PaymentInitializeResponse,
    PaymentResponse,
    PaymentStatus,
    PaymentType,
)
from app.services.appointment_service import AppointmentService
from app.services.audit_service import AuditService
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService

logger = structlog.get_logger(__name__)


def build_reference(payment_id: str) -> str:
    """Gateway reference for a payment row."""
    return f"{settings.payment_reference_prefix}-{payment_id}"


class PaymentService:
    """Service for payments through Paystack."""

    def __init__(self, db: AsyncSession, paystack: PaystackClient | None = None):
        """Initialize service with database session and gateway client."""
        self.db = db
        self.paystack = paystack

    async def _get_row(self, payment_id: str):
        row = (
            await self.db.execute(select(payments).where(payments.c.id == payment_id))
        ).fetchone()
        if not row:
            raise NotFoundException("Payment not found")
        return row

    async def _get_by_reference(self, reference: str):
        return (
            await self.db.execute(select(payments).where(payments.c.provider_reference == reference))
        ).fetchone()

    async def _resolve_target(self, user_id: str, data: PaymentInitialize) -> tuple[str, Decimal]:
        """Load the appointment or order being paid and its server-side amount."""
        if data.appointment_id:
            row = (
                await self.db.execute(
                    select(
                        appointments.c.patient_id,
                        appointments.c.status,
                        doctors.c.consultation_fee,
                    )
                    .join(doctors, doctors.c.id == appointments.c.doctor_id)
                    .where(appointments.c.id == data.appointment_id)
                )
            ).fetchone()
            if not row:
                raise NotFoundException("Appointment not found")
            owner, status, amount = row.patient_id, row.status, row.consultation_fee
            payment_type = PaymentType.APPOINTMENT.value
        else:
            row = (
                await self.db.execute(
                    select(orders.c.patient_id, orders.c.status, orders.c.total_amount).where(
                        orders.c.id == data.order_id
                    )
                )
            ).fetchone()
            if not row:
                raise NotFoundException("Order not found")
            owner, status, amount = row.patient_id, row.status, row.total_amount
            payment_type = PaymentType.ORDER.value

        if owner != user_id:
            raise ForbiddenException("You can only pay for your own bookings and orders")
        if status != "pending_payment":
            raise BadRequestException(f"Cannot pay for a {payment_type} in status '{status}'")
        return payment_type, Decimal(str(amount))

    async def initialize(self, user: dict, data: PaymentInitialize) -> PaymentInitializeResponse:
        """
        Create a pending payment and open a Paystack checkout for it.

        Args:
            user: Paying user
            data: Target appointment or order and payment method

        Returns:
            Payment id, gateway reference and checkout URL

        Raises:
            NotFoundException: If the target does not exist
            ForbiddenException: If the target belongs to someone else
            BadRequestException: If the target is not awaiting payment
            ExternalServiceException: If the gateway rejects the checkout
        """
        payment_type, amount = await self._resolve_target(user["id"], data)

        payment_id = new_id()
        reference = build_reference(payment_id)
        await self.db.execute(
            insert(payments).values(
                id=payment_id,
                user_id=user["id"],
                type=payment_type,
                amount=amount,
                currency=settings.payment_currency,
                method=data.method.value,
                status=PaymentStatus.PENDING.value,
                provider="paystack",
                provider_reference=reference,
                appointment_id=data.appointment_id,
                order_id=data.order_id,
            )
        )
        await self.db.commit()

        try:
            checkout = await self.paystack.initialize_transaction(
                email=data.email or user["email"],
                amount=amount,
                reference=reference,
                method=data.method.value,
                callback_url=(
                    f"{settings.public_api_url}{settings.api_v1_prefix}/payments/verify/{reference}"
                ),
                metadata={"payment_id": payment_id, "type": payment_type},
            )
        except ExternalServiceException:
            await self.db.execute(
                update(payments)
                .where(payments.c.id == payment_id)
                .values(status=PaymentStatus.FAILED.value, updated_at=utc_now())
            )
            await self.db.commit()
            logger.warning("payment_initialize_failed", payment_id=payment_id)
            raise

        await self.db.execute(
            update(payments)
            .where(payments.c.id == payment_id)
            .values(provider_response=checkout, updated_at=utc_now())
        )
        target = appointments if data.appointment_id else orders
        await self.db.execute(
            update(target)
            .where(target.c.id == (data.appointment_id or data.order_id))
            .values(payment_id=payment_id, updated_at=utc_now())
        )
        await self.db.commit()

        logger.info(
            "payment_initialized",
            payment_id=payment_id,
            type=payment_type,
            amount=str(amount),
            method=data.method.value,
        )
        return PaymentInitializeResponse(
            payment_id=payment_id,
            reference=reference,
            authorization_url=checkout["authorization_url"],
            access_code=checkout.get("access_code"),
        )

    async def _complete(self, payment, provider_data: dict[str, Any]) -> None:
        """Complete a pending payment and release its target, without committing."""
        if payment.status == PaymentStatus.COMPLETED.value:
            return

        reported = provider_data.get("amount")
        if reported is not None and int(reported) != to_subunit(payment.amount):
            logger.warning(
                "payment_amount_mismatch",
                payment_id=payment.id,
                expected=str(payment.amount),
                reported=str(from_subunit(int(reported))),
            )
            await self._fail(payment, provider_data)
            return

        PAYMENT_LIFECYCLE.ensure(payment.status, PaymentStatus.COMPLETED.value)
        await self.db.execute(
            update(payments)
            .where(payments.c.id == payment.id)
            .values(
                status=PaymentStatus.COMPLETED.value,
                paid_at=utc_now(),
                provider_response=provider_data,
                updated_at=utc_now(),
            )
        )

        try:
            if payment.appointment_id:
                await AppointmentService(self.db).confirm(payment.appointment_id, payment.id)
            elif payment.order_id:
                await OrderService(self.db).mark_placed(payment.order_id, payment.id)
        except InvalidTransitionException as e:
            # Target moved on (e.g. cancelled) before the money arrived; refund is manual
            logger.warning(
                "payment_target_not_confirmable",
                payment_id=payment.id,
                current=e.current,
                target=e.target,
            )

        await AuditService.record(
            self.db,
            user_id=None,
            action="payment.complete",
            resource_type="payment",
            resource_id=payment.id,
            details={"reference": payment.provider_reference, "amount": str(payment.amount)},
        )
        logger.info("payment_completed", payment_id=payment.id, type=payment.type)

    async def _fail(self, payment, provider_data: dict[str, Any]) -> None:
        if payment.status == PaymentStatus.FAILED.value:
            return
        PAYMENT_LIFECYCLE.ensure(payment.status, PaymentStatus.FAILED.value)
        await self.db.execute(
            update(payments)
            .where(payments.c.id == payment.id)
            .values(
                status=PaymentStatus.FAILED.value,
                provider_response=provider_data,
                updated_at=utc_now(),
            )
        )
        await NotificationService.notify(
            self.db,
            user_id=payment.user_id,
            notification_type="payment_failed",
            title="Payment failed",
            body="Your payment could not be completed. Please try again.",
            data={"payment_id": payment.id},
        )
        logger.info("payment_failed", payment_id=payment.id)

    async def verify(self, reference: str, user: dict) -> PaymentResponse:
        """
        Re-check a pending payment with the gateway and apply the outcome.

        Raises:
            NotFoundException: Unknown reference
            ForbiddenException: Payment belongs to someone else
        """
        payment = await self._get_by_reference(reference)
        if not payment:
            raise NotFoundException("Payment not found")
        if payment.user_id != user["id"] and user["role"] != "admin":
            raise ForbiddenException("Access denied to this payment")

        if payment.status == PaymentStatus.PENDING.value:
            outcome = await self.paystack.verify_transaction(reference)
            if outcome.get("status") == "success":
                await self._complete(payment, outcome)
            elif outcome.get("status") in ("failed", "abandoned"):
                await self._fail(payment, outcome)
            await self.db.commit()

        return PaymentResponse.model_validate(dict((await self._get_row(payment.id))._mapping))

    async def handle_webhook(self, event: dict[str, Any]) -> str | None:
        """
        Apply a verified Paystack event.

        Unknown references and event types are acknowledged and ignored so the
        gateway does not keep retrying them.

        Returns:
            Event name that was processed
        """
        event_type = event.get("event")
        data = event.get("data") or {}
        reference = data.get("reference")

        payment = await self._get_by_reference(reference) if reference else None
        if not payment:
            logger.warning(
                "paystack_webhook_unknown_reference", event_type=event_type, reference=reference
            )
            return event_type

        if event_type == "charge.success":
            if payment.status not in (PaymentStatus.PENDING.value, PaymentStatus.COMPLETED.value):
                logger.warning(
                    "paystack_webhook_stale",
                    event_type=event_type,
                    payment_id=payment.id,
                    status=payment.status,
                )
                return event_type
            await self._complete(payment, data)
        elif event_type == "charge.failed":
            if payment.status == PaymentStatus.PENDING.value:
                await self._fail(payment, data)
        else:
            logger.info("paystack_webhook_ignored", event_type=event_type, reference=reference)
            return event_type

        await self.db.commit()
        logger.info("paystack_webhook_processed", event_type=event_type, payment_id=payment.id)
        return event_type

    async def list_own(
        self, user_id: str, page: int = 1, limit: int = 20
    ) -> tuple[list[PaymentResponse], Pagination]:
        """List the caller's payments, newest first."""
        condition = payments.c.user_id == user_id
        total = (
            await self.db.execute(select(func.count()).select_from(payments).where(condition))
        ).scalar() or 0
        rows = (
            await self.db.execute(
                select(payments)
                .where(condition)
                .order_by(payments.c.created_at.desc())
                .limit(limit)
                .offset((page - 1) * limit)
            )
        ).fetchall()
        items = [PaymentResponse.model_validate(dict(row._mapping)) for row in rows]
        return items, Pagination.build(page, limit, total)

    async def get(self, payment_id: str, user: dict) -> PaymentResponse:
        """Get a payment the caller owns (admins see all)."""
        row = await self._get_row(payment_id)
        if row.user_id != user["id"] and user["role"] != "admin":
            raise ForbiddenException("Access denied to this payment")
        return PaymentResponse.model_validate(dict(row._mapping))

    async def refund(
        self,
        payment_id: str,
        admin: dict,
        request: Request | None = None,
    ) -> PaymentResponse:
        """
        Refund a completed payment through the gateway.

        Raises:
            NotFoundException: Unknown payment
            ConflictException: Payment is not completed
            ExternalServiceException: Gateway refused the refund
        """
        row = await self._get_row(payment_id)
        PAYMENT_LIFECYCLE.ensure(row.status, PaymentStatus.REFUNDED.value)

        refund = await self.paystack.refund(
            row.provider_reference, merchant_note=f"Refund issued by {admin['id']}"
        )
        response = dict(row.provider_response or {})
        response["refund"] = refund

        updated = (
            await self.db.execute(
                update(payments)
                .where(
                    and_(
                        payments.c.id == row.id,
                        payments.c.status == PaymentStatus.COMPLETED.value,
                    )
                )
                .values(
                    status=PaymentStatus.REFUNDED.value,
                    provider_response=response,
                    updated_at=utc_now(),
                )
                .returning(payments)
            )
        ).fetchone()
        if not updated:
            raise ConflictException("Payment was modified concurrently, please retry")
        await NotificationService.notify(
            self.db,
            user_id=row.user_id,
            notification_type="payment_refunded",
            title="Payment refunded",
            body=f"{row.currency} {row.amount} has been refunded.",
            data={"payment_id": row.id},
        )
        await AuditService.record(
            self.db,
            user_id=admin["id"],
            action="payment.refund",
            resource_type="payment",
            resource_id=row.id,
            details={"amount": str(row.amount)},
            request=request,
        )
        await self.db.commit()

        logger.info("payment_refunded", payment_id=row.id, admin_id=admin["id"])
        return PaymentResponse.model_validate(dict(updated._mapping))
