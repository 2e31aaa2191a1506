"""Consultation and prescription service."""

import structlog
from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, ForbiddenException, NotFoundException
from app.core.utils import utc_now
from app.core.video import create_join_token
from app.models.appointments import appointments
from app.models.consultations import consultations, prescriptions
from app.schemas.appointments import AppointmentStatus
from app.schemas.common import Pagination
from app.schemas.consultations import (
    ConsultationNotes,
    ConsultationResponse,
    ConsultationSession,
    PrescriptionCreate,
    PrescriptionResponse,
)
from app.services.appointment_service import AppointmentService
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)

NOTE_STATUSES = (AppointmentStatus.IN_PROGRESS.value, AppointmentStatus.COMPLETED.value)


class ConsultationService:
    """Service for running consultations and recording their outcome."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.appointments = AppointmentService(db)

    async def _get_appointment(self, appointment_id: str):
        row = (
            await self.db.execute(select(appointments).where(appointments.c.id == appointment_id))
        ).fetchone()
        if not row:
            raise NotFoundException("Appointment not found")
        return row

    async def _get_consultation(self, appointment_id: str):
        return (
            await self.db.execute(
                select(consultations).where(consultations.c.appointment_id == appointment_id)
            )
        ).fetchone()

    @staticmethod
    def _ensure_doctor(appointment, user: dict) -> None:
        if appointment.doctor_id != user["id"]:
            raise ForbiddenException("Only the appointment's doctor can do this")

    @staticmethod
    def _participant_role(appointment, user: dict) -> str:
        if appointment.doctor_id == user["id"]:
            return "doctor"
        if appointment.patient_id == user["id"]:
            return "patient"
        if user["role"] == "admin":
            return "observer"
        raise ForbiddenException("Access denied to this consultation")

    async def start(self, appointment_id: str, user: dict) -> ConsultationResponse:
        """
        Start the consultation for a confirmed appointment.

        Raises:
            ForbiddenException: Caller is not the appointment's doctor
            ConflictException: Appointment is not confirmed
        """
        appointment = await self._get_appointment(appointment_id)
        self._ensure_doctor(appointment, user)

        _, row = await self.appointments.open_consultation(appointment)
        await self.db.commit()

        logger.info("consultation_started", appointment_id=appointment.id, room_id=row.room_id)
        return ConsultationResponse.model_validate(dict(row._mapping))

    async def get_session(self, appointment_id: str, user: dict) -> ConsultationSession:
        """Room details and a join token for a participant."""
        appointment = await self._get_appointment(appointment_id)
        role = self._participant_role(appointment, user)
        consultation = await self._get_consultation(appointment_id)

        room_id = consultation.room_id if consultation else None
        join_token = None
        if room_id and appointment.status == AppointmentStatus.IN_PROGRESS.value:
            join_token = create_join_token(room_id, user["id"], role)

        return ConsultationSession(
            appointment_id=appointment.id,
            appointment_status=appointment.status,
            room_id=room_id,
            join_token=join_token,
            role=role,
            consultation=(
                ConsultationResponse.model_validate(dict(consultation._mapping))
                if consultation
                else None
            ),
        )

    async def end(self, appointment_id: str, user: dict) -> ConsultationResponse:
        """
        End an in-progress consultation and complete the appointment.

        Raises:
            NotFoundException: Consultation was never started
            ConflictException: Appointment is not in progress
        """
        appointment = await self._get_appointment(appointment_id)
        self._participant_role(appointment, user)
        if not await self._get_consultation(appointment_id):
            raise NotFoundException("Consultation not found")

        await self.appointments.mark_completed(appointment)
        await self.db.commit()

        row = await self._get_consultation(appointment_id)
        logger.info(
            "consultation_ended",
            appointment_id=appointment.id,
            duration_seconds=row.duration_seconds,
        )
        return ConsultationResponse.model_validate(dict(row._mapping))

    async def save_notes(
        self, appointment_id: str, user: dict, data: ConsultationNotes
    ) -> ConsultationResponse:
        """
        Create or update the doctor's notes.

        A consultation row is created on first write for appointments that are
        in progress or completed; afterwards notes can change at any time.
        """
        appointment = await self._get_appointment(appointment_id)
        self._ensure_doctor(appointment, user)

        values = data.model_dump(exclude_unset=True)
        if values.get("follow_up_recommended") is None:
            values.pop("follow_up_recommended", None)
        consultation = await self._get_consultation(appointment_id)
        if consultation:
            stmt = (
                update(consultations)
                .where(consultations.c.id == consultation.id)
                .values(updated_at=utc_now(), **values)
                .returning(consultations)
            )
        else:
            if appointment.status not in NOTE_STATUSES:
                raise BadRequestException("Consultation has not started")
            stmt = (
                insert(consultations)
                .values(appointment_id=appointment.id, **values)
                .returning(consultations)
            )

        row = (await self.db.execute(stmt)).fetchone()
        await self.db.commit()

        logger.info("consultation_notes_saved", appointment_id=appointment.id)
        return ConsultationResponse.model_validate(dict(row._mapping))


class PrescriptionService:
    """Service for prescriptions issued during consultations."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def create(self, user: dict, data: PrescriptionCreate) -> PrescriptionResponse:
        """
        Issue a prescription for one of the doctor's consultations.

        Raises:
            NotFoundException: Appointment or its consultation missing
            ForbiddenException: Appointment belongs to another doctor
        """
        row = (
            await self.db.execute(
                select(
                    appointments.c.id,
                    appointments.c.patient_id,
                    appointments.c.doctor_id,
                    consultations.c.id.label("consultation_id"),
                )
                .select_from(
                    appointments.outerjoin(
                        consultations, consultations.c.appointment_id == appointments.c.id
                    )
                )
                .where(appointments.c.id == data.appointment_id)
            )
        ).fetchone()
        if not row:
            raise NotFoundException("Appointment not found")
        if row.doctor_id != user["id"]:
            raise ForbiddenException("Only the appointment's doctor can prescribe")
        if not row.consultation_id:
            raise NotFoundException("Consultation not found")

        prescription = (
            await self.db.execute(
                insert(prescriptions)
                .values(
                    consultation_id=row.consultation_id,
                    patient_id=row.patient_id,
                    doctor_id=row.doctor_id,
                    medications=[m.model_dump() for m in data.medications],
                    instructions=data.instructions,
                    valid_until=data.valid_until,
                )
                .returning(prescriptions)
            )
        ).fetchone()
        await NotificationService.notify(
            self.db,
            user_id=row.patient_id,
            notification_type="prescription_issued",
            title="New prescription",
            body="Your doctor has issued a prescription.",
            data={"prescription_id": prescription.id},
        )
        await self.db.commit()

        logger.info(
            "prescription_issued",
            prescription_id=prescription.id,
            doctor_id=row.doctor_id,
            medications=len(data.medications),
        )
        return PrescriptionResponse.model_validate(dict(prescription._mapping))

    async def list_own(
        self, user_id: str, page: int = 1, limit: int = 20
    ) -> tuple[list[PrescriptionResponse], Pagination]:
        """List prescriptions issued to the caller, newest first."""
        condition = prescriptions.c.patient_id == user_id
        total = (
            await self.db.execute(select(func.count()).select_from(prescriptions).where(condition))
        ).scalar() or 0
        rows = (
            await self.db.execute(
                select(prescriptions)
                .where(condition)
                .order_by(prescriptions.c.issued_at.desc())
                .limit(limit)
                .offset((page - 1) * limit)
            )
        ).fetchall()
        items = [PrescriptionResponse.model_validate(dict(row._mapping)) for row in rows]
        return items, Pagination.build(page, limit, total)

    async def get(self, prescription_id: str, user: dict) -> PrescriptionResponse:
        """Get a prescription for its patient, its doctor or an admin."""
        row = (
            await self.db.execute(
                select(prescriptions).where(prescriptions.c.id == prescription_id)
            )
        ).fetchone()
        if not row:
            raise NotFoundException("Prescription not found")
        if user["role"] != "admin" and user["id"] not in (row.patient_id, row.doctor_id):
            raise ForbiddenException("Access denied to this prescription")
        return PrescriptionResponse.model_validate(dict(row._mapping))
