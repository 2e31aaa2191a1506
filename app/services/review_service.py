"""Doctor review service for business logic."""

from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from app.core.utils import utc_now
from app.models.appointments import appointments
from app.models.content import reviews
from app.models.doctors import doctors
from app.models.patients import patients
from app.schemas.appointments import AppointmentStatus
from app.schemas.common import Pagination
from app.schemas.doctors import VerificationStatus
from app.schemas.reviews import ModerationStatus, RatingSummary, ReviewCreate, ReviewResponse
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)

ALREADY_REVIEWED_MESSAGE = "You have already reviewed this appointment"


def round_rating(value) -> Decimal:
    """Average rating to two places, the precision of ``doctors.average_rating``."""
    return Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def display_name(row) -> str | None:
    """Public reviewer name: first name and last initial, hidden when anonymous."""
    if row.is_anonymous or not row.first_name:
        return None
    initial = f" {row.last_name[0]}." if row.last_name else ""
    return f"{row.first_name}{initial}"


class ReviewService:
    """Service for patient reviews and doctor ratings."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    def _select_reviews(self):
        return select(
            reviews,
            patients.c.first_name,
            patients.c.last_name,
        ).select_from(reviews.outerjoin(patients, patients.c.id == reviews.c.patient_id))

    @staticmethod
    def _to_response(row) -> ReviewResponse:
        values = dict(row._mapping)
        values["patient_name"] = display_name(row)
        return ReviewResponse.model_validate(values)

    async def _ensure_verified_doctor(self, doctor_id: str) -> None:
        row = (
            await self.db.execute(
                select(doctors.c.id).where(
                    doctors.c.id == doctor_id,
                    doctors.c.verification_status == VerificationStatus.VERIFIED.value,
                )
            )
        ).fetchone()
        if not row:
            raise NotFoundException("Doctor not found")

    async def refresh_doctor_rating(self, doctor_id: str) -> tuple[Decimal, int]:
        """
        Recompute a doctor's average rating and review count from approved
        reviews, without committing.
        """
        row = (
            await self.db.execute(
                select(func.avg(reviews.c.rating), func.count()).where(
                    reviews.c.doctor_id == doctor_id,
                    reviews.c.moderation_status == ModerationStatus.APPROVED.value,
                )
            )
        ).fetchone()
        average, total = round_rating(row[0]), row[1] or 0
        await self.db.execute(
            update(doctors)
            .where(doctors.c.id == doctor_id)
            .values(average_rating=average, total_reviews=total, updated_at=utc_now())
        )
        return average, total

    async def create(self, user: dict, data: ReviewCreate) -> ReviewResponse:
        """
        Review a completed appointment.

        Reviews are published immediately and the doctor's rating is
        recomputed in the same transaction.

        Raises:
            NotFoundException: Appointment does not exist
            ForbiddenException: Appointment belongs to another patient
            BadRequestException: Appointment is not completed
            ConflictException: Appointment already reviewed
        """
        appointment = (
            await self.db.execute(
                select(appointments).where(appointments.c.id == data.appointment_id)
            )
        ).fetchone()
        if not appointment:
            raise NotFoundException("Appointment not found")
        if appointment.patient_id != user["id"]:
            raise ForbiddenException("You can only review your own appointments")
        if appointment.status != AppointmentStatus.COMPLETED.value:
            raise BadRequestException("Only completed appointments can be reviewed")

        existing = (
            await self.db.execute(
                select(reviews.c.id).where(reviews.c.appointment_id == appointment.id)
            )
        ).fetchone()
        if existing:
            raise ConflictException(ALREADY_REVIEWED_MESSAGE)

        try:
            review_id = (
                await self.db.execute(
                    insert(reviews)
                    .values(
                        patient_id=appointment.patient_id,
                        doctor_id=appointment.doctor_id,
                        appointment_id=appointment.id,
                        rating=data.rating,
                        comment=data.comment,
                        is_anonymous=data.is_anonymous,
                        moderation_status=ModerationStatus.APPROVED.value,
                    )
                    .returning(reviews.c.id)
                )
            ).scalar_one()
            average, total = await self.refresh_doctor_rating(appointment.doctor_id)
            await NotificationService.notify(
                self.db,
                user_id=appointment.doctor_id,
                notification_type="review_received",
                title="New review",
                body=f"A patient rated your consultation {data.rating}/5.",
                data={"review_id": review_id, "appointment_id": appointment.id},
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException(ALREADY_REVIEWED_MESSAGE)

        logger.info(
            "review_created",
            review_id=review_id,
            doctor_id=appointment.doctor_id,
            rating=data.rating,
            average_rating=str(average),
            total_reviews=total,
        )
        row = (
            await self.db.execute(self._select_reviews().where(reviews.c.id == review_id))
        ).fetchone()
        return self._to_response(row)

    async def list_for_doctor(
        self, doctor_id: str, page: int = 1, limit: int = 10
    ) -> tuple[list[ReviewResponse], Pagination]:
        """List a verified doctor's approved reviews, newest first."""
        await self._ensure_verified_doctor(doctor_id)
        conditions = (
            reviews.c.doctor_id == doctor_id,
            reviews.c.moderation_status == ModerationStatus.APPROVED.value,
        )
        total = (
            await self.db.execute(select(func.count()).select_from(reviews).where(*conditions))
        ).scalar() or 0
        rows = (
            await self.db.execute(
                self._select_reviews()
                .where(*conditions)
                .order_by(reviews.c.created_at.desc())
                .limit(limit)
                .offset((page - 1) * limit)
            )
        ).fetchall()
        return [self._to_response(row) for row in rows], Pagination.build(page, limit, total)

    async def summary(self, doctor_id: str) -> RatingSummary:
        """Average, count and per-star distribution of approved reviews."""
        await self._ensure_verified_doctor(doctor_id)
        rows = (
            await self.db.execute(
                select(reviews.c.rating, func.count())
                .where(
                    reviews.c.doctor_id == doctor_id,
                    reviews.c.moderation_status == ModerationStatus.APPROVED.value,
                )
                .group_by(reviews.c.rating)
            )
        ).fetchall()

        distribution = {stars: 0 for stars in range(5, 0, -1)}
        for rating, count in rows:
            distribution[rating] = count
        total = sum(distribution.values())
        average = (
            round_rating(Decimal(sum(s * c for s, c in distribution.items())) / total)
            if total
            else round_rating(0)
        )
        return RatingSummary(
            doctor_id=doctor_id,
            average_rating=average,
            total_reviews=total,
            distribution=distribution,
        )
