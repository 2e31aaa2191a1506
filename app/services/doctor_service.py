"""Doctor service for business logic."""

import structlog
from sqlalchemy import String, and_, cast, delete, func, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException, NotFoundException
from app.models.clinics import clinics
from app.models.doctors import doctor_availability, doctors
from app.schemas.common import Pagination
from app.schemas.doctors import (
    AvailabilityUpdate,
    AvailabilityWindow,
    DoctorProfileCreate,
    DoctorResponse,
    DoctorSearchFilters,
    VerificationStatus,
)

logger = structlog.get_logger(__name__)


def json_array_contains(column, value: str):
    """Match an element of a JSON string array stored in ``column``."""
    return cast(column, String).ilike(f'%"{value}"%')


class DoctorService:
    """Service for doctor profiles and weekly availability."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_row(self, doctor_id: str, verified_only: bool = True):
        conditions = [doctors.c.id == doctor_id]
        if verified_only:
            conditions.append(doctors.c.verification_status == VerificationStatus.VERIFIED.value)
        row = (await self.db.execute(select(doctors).where(and_(*conditions)))).fetchone()
        if not row:
            raise NotFoundException("Doctor not found")
        return row

    async def search(
        self, filters: DoctorSearchFilters
    ) -> tuple[list[DoctorResponse], Pagination]:
        """
        Search the directory of verified doctors.

        Args:
            filters: Text query, specialty, mode, fee and rating filters

        Returns:
            Page of doctors, best rated first
        """
        conditions = [doctors.c.verification_status == VerificationStatus.VERIFIED.value]

        if filters.q:
            pattern = f"%{filters.q}%"
            conditions.append(
                or_(
                    doctors.c.first_name.ilike(pattern),
                    doctors.c.last_name.ilike(pattern),
                    cast(doctors.c.specialties, String).ilike(pattern),
                )
            )
        if filters.specialty:
            conditions.append(json_array_contains(doctors.c.specialties, filters.specialty))
        if filters.mode:
            conditions.append(json_array_contains(doctors.c.consultation_modes, filters.mode.value))
        if filters.max_fee is not None:
            conditions.append(doctors.c.consultation_fee <= filters.max_fee)
        if filters.min_rating is not None:
            conditions.append(doctors.c.average_rating >= filters.min_rating)

        count_stmt = select(func.count()).select_from(doctors).where(and_(*conditions))
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = (
            select(doctors)
            .where(and_(*conditions))
            .order_by(
                doctors.c.average_rating.desc(),
                doctors.c.total_reviews.desc(),
                doctors.c.last_name,
            )
            .limit(filters.limit)
            .offset((filters.page - 1) * filters.limit)
        )
        rows = (await self.db.execute(stmt)).fetchall()
        items = [DoctorResponse.model_validate(dict(row._mapping)) for row in rows]
        return items, Pagination.build(filters.page, filters.limit, total)

    async def get_public_profile(self, doctor_id: str) -> DoctorResponse:
        """Get a verified doctor's profile."""
        row = await self._get_row(doctor_id)
        return DoctorResponse.model_validate(dict(row._mapping))

    async def get_own_profile(self, user_id: str) -> DoctorResponse:
        """Get the caller's profile whatever its verification status."""
        row = await self._get_row(user_id, verified_only=False)
        return DoctorResponse.model_validate(dict(row._mapping))

    async def get_availability(
        self, doctor_id: str, verified_only: bool = True
    ) -> list[AvailabilityWindow]:
        """Weekly windows ordered by day and start time."""
        await self._get_row(doctor_id, verified_only=verified_only)
        stmt = (
            select(doctor_availability)
            .where(doctor_availability.c.doctor_id == doctor_id)
            .order_by(doctor_availability.c.day_of_week, doctor_availability.c.start_time)
        )
        rows = (await self.db.execute(stmt)).fetchall()
        return [AvailabilityWindow.model_validate(dict(row._mapping)) for row in rows]

    async def register_profile(self, user_id: str, data: DoctorProfileCreate) -> DoctorResponse:
        """
        Create the caller's doctor profile in ``pending`` verification.

        Raises:
            ConflictException: If a profile already exists, whatever its status
            NotFoundException: If the referenced clinic does not exist
        """
        existing = (
            await self.db.execute(
                select(doctors.c.id, doctors.c.verification_status).where(doctors.c.id == user_id)
            )
        ).fetchone()
        if existing:
            raise ConflictException(
                f"Doctor profile already exists with status '{existing.verification_status}'"
            )

        if data.clinic_id:
            clinic = (
                await self.db.execute(select(clinics.c.id).where(clinics.c.id == data.clinic_id))
            ).fetchone()
            if not clinic:
                raise NotFoundException("Clinic not found")

        values = data.model_dump(mode="json", exclude={"consultation_fee"})
        values["consultation_fee"] = data.consultation_fee
        stmt = (
            insert(doctors)
            .values(
                id=user_id,
                verification_status=VerificationStatus.PENDING.value,
                **values,
            )
            .returning(doctors)
        )
        row = (await self.db.execute(stmt)).fetchone()
        await self.db.commit()

        logger.info("doctor_profile_created", doctor_id=user_id, license=data.license_number)
        return DoctorResponse.model_validate(dict(row._mapping))

    async def set_availability(
        self, user_id: str, data: AvailabilityUpdate
    ) -> list[AvailabilityWindow]:
        """Replace the caller's weekly windows."""
        await self._get_row(user_id, verified_only=False)

        await self.db.execute(
            delete(doctor_availability).where(doctor_availability.c.doctor_id == user_id)
        )
        if data.windows:
            await self.db.execute(
                insert(doctor_availability),
                [
                    {
                        "doctor_id": user_id,
                        **window.model_dump(mode="python"),
                        "consultation_mode": window.consultation_mode.value,
                    }
                    for window in data.windows
                ],
            )
        await self.db.commit()

        logger.info("doctor_availability_updated", doctor_id=user_id, windows=len(data.windows))
        return await self.get_availability(user_id, verified_only=False)
