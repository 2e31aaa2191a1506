"""Medical record service.

Access rules: the owning patient always; a doctor when the record was shared
with them or while they hold a confirmed or in-progress appointment with the
patient.
"""

import structlog
from fastapi import Request
from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenException, NotFoundException
from app.core.utils import utc_now
from app.models.appointments import appointments
from app.models.doctors import doctors
from app.models.medical_records import medical_records
from app.models.patients import patients
from app.schemas.common import Pagination
from app.schemas.records import RecordCreate, RecordResponse, RecordType
from app.services.audit_service import AuditService

logger = structlog.get_logger(__name__)

CARE_STATUSES = ("confirmed", "in_progress")


def _to_response(row) -> RecordResponse:
    data = dict(row._mapping)
    data["shared_with"] = data.get("shared_with") or []
    return RecordResponse.model_validate(data)


class RecordService:
    """Service for medical record metadata and sharing."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_row(self, record_id: str):
        row = (
            await self.db.execute(select(medical_records).where(medical_records.c.id == record_id))
        ).fetchone()
        if not row:
            raise NotFoundException("Medical record not found")
        return row

    async def _get_owned_row(self, record_id: str, user_id: str):
        row = await self._get_row(record_id)
        if row.patient_id != user_id:
            raise ForbiddenException("Only the record owner can do this")
        return row

    async def has_care_relationship(self, doctor_id: str, patient_id: str) -> bool:
        """True while the doctor has a confirmed or in-progress appointment with the patient."""
        stmt = select(appointments.c.id).where(
            and_(
                appointments.c.doctor_id == doctor_id,
                appointments.c.patient_id == patient_id,
                appointments.c.status.in_(CARE_STATUSES),
            )
        )
        return (await self.db.execute(stmt.limit(1))).first() is not None

    async def create(self, user_id: str, data: RecordCreate) -> RecordResponse:
        """
        Store metadata for an uploaded record.

        Raises:
            NotFoundException: If the caller has no patient profile
        """
        patient = (
            await self.db.execute(select(patients.c.id).where(patients.c.id == user_id))
        ).fetchone()
        if not patient:
            raise NotFoundException("Patient not found")

        values = data.model_dump(mode="python")
        values["record_type"] = data.record_type.value
        stmt = (
            insert(medical_records)
            .values(patient_id=user_id, shared_with=[], **values)
            .returning(medical_records)
        )
        row = (await self.db.execute(stmt)).fetchone()
        await self.db.commit()

        logger.info("medical_record_created", record_id=row.id, record_type=row.record_type)
        return _to_response(row)

    async def list_own(
        self,
        user_id: str,
        record_type: RecordType | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[RecordResponse], Pagination]:
        """List the caller's records, newest first."""
        conditions = [medical_records.c.patient_id == user_id]
        if record_type:
            conditions.append(medical_records.c.record_type == record_type.value)

        count_stmt = select(func.count()).select_from(medical_records).where(and_(*conditions))
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = (
            select(medical_records)
            .where(and_(*conditions))
            .order_by(medical_records.c.created_at.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = (await self.db.execute(stmt)).fetchall()
        return [_to_response(row) for row in rows], Pagination.build(page, limit, total)

    async def get(self, record_id: str, user: dict) -> RecordResponse:
        """
        Get a record the caller may read.

        Raises:
            NotFoundException: If the record does not exist
            ForbiddenException: If the caller has no access
        """
        row = await self._get_row(record_id)
        if row.patient_id == user["id"]:
            return _to_response(row)

        if user["role"] == "admin":
            logger.info("medical_record_admin_read", record_id=row.id, admin_id=user["id"])
            return _to_response(row)

        if user["role"] == "doctor":
            if user["id"] in (row.shared_with or []):
                return _to_response(row)
            if await self.has_care_relationship(user["id"], row.patient_id):
                return _to_response(row)

        raise ForbiddenException("Access denied to this record")

    async def delete_record(
        self, record_id: str, user_id: str, request: Request | None = None
    ) -> None:
        """Delete a record the caller owns."""
        row = await self._get_owned_row(record_id, user_id)
        await self.db.execute(delete(medical_records).where(medical_records.c.id == row.id))
        await AuditService.record(
            self.db,
            user_id=user_id,
            action="medical_record.delete",
            resource_type="medical_record",
            resource_id=row.id,
            details={"record_type": row.record_type, "title": row.title},
            request=request,
        )
        await self.db.commit()

        logger.info("medical_record_deleted", record_id=row.id)

    async def _set_shared(self, row, shared_with: list[str]):
        stmt = (
            update(medical_records)
            .where(medical_records.c.id == row.id)
            .values(shared_with=shared_with, updated_at=utc_now())
            .returning(medical_records)
        )
        updated = (await self.db.execute(stmt)).fetchone()
        await self.db.commit()
        return updated

    async def share(self, record_id: str, user_id: str, doctor_id: str) -> RecordResponse:
        """
        Grant a doctor read access. Sharing twice is a no-op.

        Raises:
            NotFoundException: If the record or doctor does not exist
        """
        row = await self._get_owned_row(record_id, user_id)
        doctor = (
            await self.db.execute(select(doctors.c.id).where(doctors.c.id == doctor_id))
        ).fetchone()
        if not doctor:
            raise NotFoundException("Doctor not found")

        shared_with = list(row.shared_with or [])
        if doctor_id in shared_with:
            return _to_response(row)

        shared_with.append(doctor_id)
        updated = await self._set_shared(row, shared_with)
        logger.info("medical_record_shared", record_id=row.id, doctor_id=doctor_id)
        return _to_response(updated)

    async def revoke(self, record_id: str, user_id: str, doctor_id: str) -> RecordResponse:
        """Withdraw a doctor's explicit access. Revoking twice is a no-op."""
        row = await self._get_owned_row(record_id, user_id)
        shared_with = list(row.shared_with or [])
        if doctor_id not in shared_with:
            return _to_response(row)

        shared_with.remove(doctor_id)
        updated = await self._set_shared(row, shared_with)
        logger.info("medical_record_revoked", record_id=row.id, doctor_id=doctor_id)
        return _to_response(updated)

    async def list_for_patient(
        self, user: dict, patient_id: str
    ) -> list[RecordResponse]:
        """
        A patient's records as seen by a treating doctor.

        Doctors without an active care relationship get an empty list;
        admins see everything.
        """
        if user["role"] != "admin" and not await self.has_care_relationship(
            user["id"], patient_id
        ):
            return []

        stmt = (
            select(medical_records)
            .where(medical_records.c.patient_id == patient_id)
            .order_by(medical_records.c.created_at.desc())
        )
        rows = (await self.db.execute(stmt)).fetchall()
        return [_to_response(row) for row in rows]
