"""Appointment service for business logic."""

from datetime import date, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog
from fastapi import Request
from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from app.core.state_machines import APPOINTMENT_LIFECYCLE
from app.core.utils import as_utc, utc_now
from app.core.video import create_room_id
from app.models.appointments import appointments
from app.models.clinics import clinics
from app.models.consultations import consultations
from app.models.doctors import doctor_availability, doctors
from app.models.patients import patients
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentResponse,
    AppointmentStatus,
    ConsultationType,
    SlotAvailabilityResponse,
    TimeSlot,
)
from app.schemas.common import Pagination
from app.services.audit_service import AuditService
from app.services.notification_service import NotificationService
from app.services.slot_generator import Booking, Window, generate_slots

logger = structlog.get_logger(__name__)

SLOT_TAKEN_MESSAGE = "This time slot is already booked"
INACTIVE_STATUSES = (AppointmentStatus.CANCELLED.value, AppointmentStatus.NO_SHOW.value)
TERMINAL_STATUSES = (
    AppointmentStatus.COMPLETED.value,
    AppointmentStatus.CANCELLED.value,
    AppointmentStatus.NO_SHOW.value,
)


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Clinic zone, falling back to the configured default."""
    try:
        return ZoneInfo(name or settings.default_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("unknown_timezone", timezone=name)
        return ZoneInfo(settings.default_timezone)


def clinic_booking_settings(clinic: dict | None) -> dict[str, Any]:
    """Booking knobs from clinic settings with configured defaults."""
    raw = (clinic or {}).get("settings") or {}
    return {
        "allow_online_booking": bool(raw.get("allow_online_booking", True)),
        "buffer_minutes": int(
            raw.get("appointment_buffer", settings.default_appointment_buffer_minutes)
        ),
        "max_advance_days": int(
            raw.get("max_advance_booking_days", settings.default_max_advance_booking_days)
        ),
        "timezone": (clinic or {}).get("timezone"),
    }


def local_day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """UTC instants bounding a local calendar day."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    return as_utc(start), as_utc(start + timedelta(days=1))


class AppointmentService:
    """Service for managing appointments."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def _get_row(self, appointment_id: str):
        result = await self.db.execute(
            select(appointments).where(appointments.c.id == appointment_id)
        )
        row = result.fetchone()
        if not row:
            raise NotFoundException("Appointment not found")
        return row

    async def _get_verified_doctor(self, doctor_id: str):
        result = await self.db.execute(
            select(doctors).where(
                and_(
                    doctors.c.id == doctor_id,
                    doctors.c.verification_status == "verified",
                )
            )
        )
        doctor = result.fetchone()
        if not doctor:
            raise NotFoundException("Doctor not found or not verified")
        return doctor

    async def _get_clinic(self, clinic_id: str | None) -> dict | None:
        if not clinic_id:
            return None
        result = await self.db.execute(select(clinics).where(clinics.c.id == clinic_id))
        row = result.fetchone()
        return dict(row._mapping) if row else None

    @staticmethod
    def _ensure_participant(row, user: dict) -> None:
        if user["role"] == "admin":
            return
        if user["id"] not in (row.patient_id, row.doctor_id):
            raise ForbiddenException("Access denied to this appointment")

    @staticmethod
    def _ensure_doctor_or_admin(row, user: dict) -> None:
        if user["role"] == "admin":
            return
        if user["id"] != row.doctor_id:
            raise ForbiddenException("Only the appointment's doctor can do this")

    async def transition(self, row, target: AppointmentStatus, **values: Any):
        """
        Move an appointment along its lifecycle without committing.

        The update is guarded on the status that was read, so a concurrent
        change surfaces as a conflict instead of being overwritten.
        """
        APPOINTMENT_LIFECYCLE.ensure(row.status, target.value)

        stmt = (
            update(appointments)
            .where(
                and_(
                    appointments.c.id == row.id,
                    appointments.c.status == row.status,
                )
            )
            .values(status=target.value, updated_at=utc_now(), **values)
            .returning(appointments)
        )
        updated = (await self.db.execute(stmt)).fetchone()
        if not updated:
            raise ConflictException("Appointment was modified concurrently, please retry")
        return updated

    # ------------------------------------------------------------------
    # Booking
    # ------------------------------------------------------------------

    async def book(
        self,
        user: dict,
        data: AppointmentCreate,
        request: Request | None = None,
    ) -> AppointmentResponse:
        """
        Book an appointment for the calling patient.

        Args:
            user: Authenticated user
            data: Booking request
            request: Source request for the audit entry

        Returns:
            Created appointment in ``pending_payment``

        Raises:
            NotFoundException: Patient profile or verified doctor missing
            BadRequestException: Doctor does not offer the consultation type
            ConflictException: Slot already held by an active appointment
        """
        patient = (
            await self.db.execute(select(patients.c.id).where(patients.c.id == user["id"]))
        ).fetchone()
        if not patient:
            raise NotFoundException("Patient not found")

        doctor = await self._get_verified_doctor(data.doctor_id)

        modes = doctor.consultation_modes or [ConsultationType.IN_PERSON.value]
        if data.consultation_type.value not in modes:
            raise BadRequestException(
                f"Doctor does not offer {data.consultation_type.value} consultations"
            )

        scheduled_at = as_utc(data.scheduled_at)
        existing = await self.db.execute(
            select(appointments.c.id).where(
                and_(
                    appointments.c.doctor_id == doctor.id,
                    appointments.c.scheduled_at == scheduled_at,
                    appointments.c.status.notin_(INACTIVE_STATUSES),
                )
            )
        )
        if existing.first():
            raise ConflictException(SLOT_TAKEN_MESSAGE)

        values = {
            "patient_id": user["id"],
            "doctor_id": doctor.id,
            "clinic_id": data.clinic_id or doctor.clinic_id,
            "scheduled_at": scheduled_at,
            "duration_minutes": doctor.consultation_duration_minutes,
            "consultation_type": data.consultation_type.value,
            "notes": data.notes,
            "status": AppointmentStatus.PENDING_PAYMENT.value,
        }

        try:
            result = await self.db.execute(
                insert(appointments).values(**values).returning(appointments)
            )
            row = result.fetchone()

            await NotificationService.notify(
                self.db,
                user_id=user["id"],
                notification_type="appointment_booked",
                title="Appointment booked",
                body=(
                    f"Your appointment with Dr. {doctor.last_name} on "
                    f"{scheduled_at:%Y-%m-%d %H:%M} UTC is awaiting payment."
                ),
                data={"appointment_id": row.id},
            )
            await AuditService.record(
                self.db,
                user_id=user["id"],
                action="appointment.book",
                resource_type="appointment",
                resource_id=row.id,
                details={"doctor_id": doctor.id, "scheduled_at": scheduled_at.isoformat()},
                request=request,
            )
            await self.db.commit()
        except IntegrityError:
            # The partial unique index lost a race to a concurrent booking
            await self.db.rollback()
            logger.info(
                "appointment_slot_conflict",
                doctor_id=doctor.id,
                scheduled_at=scheduled_at.isoformat(),
            )
            raise ConflictException(SLOT_TAKEN_MESSAGE)

        logger.info(
            "appointment_booked",
            appointment_id=row.id,
            patient_id=user["id"],
            doctor_id=doctor.id,
            scheduled_at=scheduled_at.isoformat(),
        )
        return AppointmentResponse.model_validate(dict(row._mapping))

    async def get_slots(
        self,
        doctor_id: str,
        day: date,
        consultation_type: ConsultationType | None = None,
        now: datetime | None = None,
    ) -> SlotAvailabilityResponse:
        """
        Compute the free and booked slots of a doctor for one local day.

        Raises:
            NotFoundException: If the doctor is missing or not verified
        """
        doctor = await self._get_verified_doctor(doctor_id)
        clinic = await self._get_clinic(doctor.clinic_id)
        knobs = clinic_booking_settings(clinic)
        tz = resolve_timezone(knobs["timezone"])

        window_rows = (
            await self.db.execute(
                select(doctor_availability).where(
                    and_(
                        doctor_availability.c.doctor_id == doctor.id,
                        doctor_availability.c.is_active.is_(True),
                    )
                )
            )
        ).fetchall()
        windows = [
            Window(
                day_of_week=w.day_of_week,
                start_time=w.start_time,
                end_time=w.end_time,
                consultation_mode=w.consultation_mode,
            )
            for w in window_rows
        ]

        day_start, day_end = local_day_bounds(day, tz)
        booked_rows = (
            await self.db.execute(
                select(appointments)
                .where(
                    and_(
                        appointments.c.doctor_id == doctor.id,
                        appointments.c.status.notin_(INACTIVE_STATUSES),
                        appointments.c.scheduled_at >= day_start - timedelta(days=1),
                        appointments.c.scheduled_at < day_end + timedelta(days=1),
                    )
                )
                .order_by(appointments.c.scheduled_at)
            )
        ).fetchall()
        bookings = [
            Booking(scheduled_at=as_utc(b.scheduled_at), duration_minutes=b.duration_minutes)
            for b in booked_rows
        ]

        available = generate_slots(
            day=day,
            windows=windows,
            duration_minutes=doctor.consultation_duration_minutes,
            bookings=bookings,
            tz=tz,
            now=now or utc_now(),
            buffer_minutes=knobs["buffer_minutes"],
            max_advance_days=knobs["max_advance_days"],
            allow_online_booking=knobs["allow_online_booking"],
            consultation_type=consultation_type.value if consultation_type else None,
        )
        booked = [
            TimeSlot(
                start=as_utc(b.scheduled_at),
                end=as_utc(b.scheduled_at) + timedelta(minutes=b.duration_minutes),
                modes=[ConsultationType(b.consultation_type)],
            )
            for b in booked_rows
            if day_start <= as_utc(b.scheduled_at) < day_end
        ]

        return SlotAvailabilityResponse(
            doctor_id=doctor.id,
            day=day,
            timezone=tz.key,
            duration_minutes=doctor.consultation_duration_minutes,
            available_slots=available,
            booked_slots=booked,
        )

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def _paginate(
        self, conditions: list, order_by, page: int, limit: int
    ) -> tuple[list[AppointmentResponse], Pagination]:
        count_stmt = select(func.count()).select_from(appointments).where(and_(*conditions))
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = (
            select(appointments)
            .where(and_(*conditions))
            .order_by(order_by)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = (await self.db.execute(stmt)).fetchall()
        items = [AppointmentResponse.model_validate(dict(row._mapping)) for row in rows]
        return items, Pagination.build(page, limit, total)

    async def list_for_patient(
        self, user_id: str, filters: AppointmentFilters
    ) -> tuple[list[AppointmentResponse], Pagination]:
        """
        List the caller's appointments as a patient.

        Upcoming lists future, non-terminal appointments soonest first;
        otherwise the newest come first.
        """
        conditions = [appointments.c.patient_id == user_id]
        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)

        order_by = appointments.c.scheduled_at.desc()
        if filters.upcoming:
            conditions.append(appointments.c.scheduled_at > utc_now())
            conditions.append(appointments.c.status.notin_(TERMINAL_STATUSES))
            order_by = appointments.c.scheduled_at.asc()

        return await self._paginate(conditions, order_by, filters.page, filters.limit)

    async def list_for_doctor(
        self, user: dict, filters: AppointmentFilters
    ) -> tuple[list[AppointmentResponse], Pagination]:
        """List a doctor's schedule, soonest first. Admins see every doctor."""
        conditions = []
        if user["role"] != "admin":
            conditions.append(appointments.c.doctor_id == user["id"])
        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)
        if filters.on_date:
            day_start, day_end = local_day_bounds(
                filters.on_date, resolve_timezone(settings.default_timezone)
            )
            conditions.append(appointments.c.scheduled_at >= day_start)
            conditions.append(appointments.c.scheduled_at < day_end)

        return await self._paginate(
            conditions, appointments.c.scheduled_at.asc(), filters.page, filters.limit
        )

    async def get_appointment(self, appointment_id: str, user: dict) -> AppointmentResponse:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If user is neither participant nor admin
        """
        row = await self._get_row(appointment_id)
        self._ensure_participant(row, user)
        return AppointmentResponse.model_validate(dict(row._mapping))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def cancel(
        self,
        appointment_id: str,
        user: dict,
        reason: str | None = None,
        request: Request | None = None,
        now: datetime | None = None,
    ) -> AppointmentResponse:
        """
        Cancel an appointment.

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If user is neither participant nor admin
            BadRequestException: Terminal status or inside the cancellation cutoff
        """
        row = await self._get_row(appointment_id)
        self._ensure_participant(row, user)

        if not APPOINTMENT_LIFECYCLE.can_transition(row.status, AppointmentStatus.CANCELLED.value):
            raise BadRequestException("Cannot cancel this appointment")

        now = now or utc_now()
        cutoff = settings.cancellation_cutoff_hours
        if as_utc(row.scheduled_at) - now < timedelta(hours=cutoff):
            raise BadRequestException(
                f"Cannot cancel appointment less than {cutoff} hours before scheduled time"
            )

        updated = await self.transition(
            row,
            AppointmentStatus.CANCELLED,
            cancellation_reason=reason,
            cancelled_by=user["id"],
            cancelled_at=now,
        )

        recipients = {row.patient_id, row.doctor_id} - {user["id"]}
        for recipient in sorted(recipients):
            await NotificationService.notify(
                self.db,
                user_id=recipient,
                notification_type="appointment_cancelled",
                title="Appointment cancelled",
                body=(
                    f"The appointment on {as_utc(row.scheduled_at):%Y-%m-%d %H:%M} UTC "
                    "has been cancelled."
                ),
                data={"appointment_id": row.id, "reason": reason},
            )
        await AuditService.record(
            self.db,
            user_id=user["id"],
            action="appointment.cancel",
            resource_type="appointment",
            resource_id=row.id,
            details={"reason": reason, "previous_status": row.status},
            request=request,
        )
        await self.db.commit()

        logger.info(
            "appointment_cancelled",
            appointment_id=row.id,
            cancelled_by=user["id"],
            previous_status=row.status,
        )
        return AppointmentResponse.model_validate(dict(updated._mapping))

    async def open_consultation(self, row) -> tuple[Any, Any]:
        """
        Move a confirmed appointment to ``in_progress`` and open its video room,
        without committing.

        Returns:
            Updated appointment row and the new consultation row
        """
        updated = await self.transition(row, AppointmentStatus.IN_PROGRESS)
        consultation = (
            await self.db.execute(
                insert(consultations)
                .values(
                    appointment_id=row.id,
                    room_id=create_room_id(row.id),
                    started_at=utc_now(),
                )
                .returning(consultations)
            )
        ).fetchone()
        await NotificationService.notify(
            self.db,
            user_id=row.patient_id,
            notification_type="consultation_started",
            title="Your consultation has started",
            body="Your doctor is ready. Join the consultation now.",
            data={"appointment_id": row.id, "room_id": consultation.room_id},
        )
        return updated, consultation

    async def start(self, appointment_id: str, user: dict) -> AppointmentResponse:
        """Move a confirmed appointment to ``in_progress`` and open its room."""
        row = await self._get_row(appointment_id)
        self._ensure_doctor_or_admin(row, user)
        updated, consultation = await self.open_consultation(row)
        await self.db.commit()

        logger.info("appointment_started", appointment_id=row.id, room_id=consultation.room_id)
        return AppointmentResponse.model_validate(dict(updated._mapping))

    async def mark_completed(self, row) -> Any:
        """
        Complete an appointment, close its open consultation and bump the
        doctor's counter, without committing.
        """
        updated = await self.transition(row, AppointmentStatus.COMPLETED)
        await self.db.execute(
            update(doctors)
            .where(doctors.c.id == row.doctor_id)
            .values(total_consultations=doctors.c.total_consultations + 1)
        )

        consultation = (
            await self.db.execute(
                select(consultations).where(
                    consultations.c.appointment_id == row.id,
                    consultations.c.ended_at.is_(None),
                )
            )
        ).fetchone()
        if consultation:
            ended_at = utc_now()
            started_at = as_utc(consultation.started_at) or ended_at
            await self.db.execute(
                update(consultations)
                .where(consultations.c.id == consultation.id)
                .values(
                    ended_at=ended_at,
                    duration_seconds=int((ended_at - started_at).total_seconds()),
                    updated_at=ended_at,
                )
            )
        return updated

    async def complete(self, appointment_id: str, user: dict) -> AppointmentResponse:
        """Move an in-progress appointment to ``completed``."""
        row = await self._get_row(appointment_id)
        self._ensure_doctor_or_admin(row, user)
        updated = await self.mark_completed(row)
        await self.db.commit()

        logger.info("appointment_completed", appointment_id=row.id, doctor_id=row.doctor_id)
        return AppointmentResponse.model_validate(dict(updated._mapping))

    async def mark_no_show(self, appointment_id: str, user: dict) -> AppointmentResponse:
        """Record that the patient did not attend."""
        row = await self._get_row(appointment_id)
        self._ensure_doctor_or_admin(row, user)
        updated = await self.transition(row, AppointmentStatus.NO_SHOW)
        await NotificationService.notify(
            self.db,
            user_id=row.patient_id,
            notification_type="appointment_no_show",
            title="Missed appointment",
            body="You were marked as not attending your appointment.",
            data={"appointment_id": row.id},
        )
        await self.db.commit()

        logger.info("appointment_no_show", appointment_id=row.id)
        return AppointmentResponse.model_validate(dict(updated._mapping))

    async def confirm(self, appointment_id: str, payment_id: str) -> None:
        """
        Confirm an appointment after payment, without committing.

        Repeated confirmation for the same appointment is a no-op.
        """
        row = await self._get_row(appointment_id)
        if row.status == AppointmentStatus.CONFIRMED.value:
            return

        await self.transition(row, AppointmentStatus.CONFIRMED, payment_id=payment_id)
        for recipient, body in (
            (row.patient_id, "Your payment was received and your appointment is confirmed."),
            (row.doctor_id, "A new appointment has been confirmed on your schedule."),
        ):
            await NotificationService.notify(
                self.db,
                user_id=recipient,
                notification_type="appointment_confirmed",
                title="Appointment confirmed",
                body=body,
                data={"appointment_id": row.id},
            )
        logger.info("appointment_confirmed", appointment_id=row.id, payment_id=payment_id)
