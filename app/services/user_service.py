"""User service for business logic."""

import structlog
from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenException
from app.core.utils import utc_now
from app.models.doctors import doctors
from app.models.patients import patients
from app.models.users import users
from app.schemas.doctors import DoctorResponse
from app.schemas.users import MeResponse, PatientProfileResponse, PatientProfileUpdate, UserResponse

logger = structlog.get_logger(__name__)


class UserService:
    """Service for user operations."""

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: str) -> dict | None:
        """Get user by ID."""
        result = await db.execute(select(users).where(users.c.id == user_id))
        user = result.mappings().first()
        return dict(user) if user else None

    @staticmethod
    async def get_me(db: AsyncSession, user: dict) -> MeResponse:
        """The caller's account together with their role profile."""
        patient = (
            await db.execute(select(patients).where(patients.c.id == user["id"]))
        ).mappings().first()
        doctor = (
            await db.execute(select(doctors).where(doctors.c.id == user["id"]))
        ).mappings().first()
        return MeResponse(
            user=UserResponse.model_validate(user),
            patient=PatientProfileResponse.model_validate(dict(patient)) if patient else None,
            doctor=DoctorResponse.model_validate(dict(doctor)) if doctor else None,
        )

    @staticmethod
    async def upsert_patient_profile(
        db: AsyncSession, user: dict, data: PatientProfileUpdate
    ) -> PatientProfileResponse:
        """
        Create or update the caller's patient profile.

        Raises:
            ForbiddenException: If the caller is not a patient
        """
        if user["role"] != "patient":
            raise ForbiddenException("Only patients have a patient profile")

        values = data.model_dump()
        exists = (
            await db.execute(select(patients.c.id).where(patients.c.id == user["id"]))
        ).first()
        if exists:
            stmt = (
                update(patients)
                .where(patients.c.id == user["id"])
                .values(updated_at=utc_now(), **values)
                .returning(patients)
            )
        else:
            stmt = insert(patients).values(id=user["id"], **values).returning(patients)

        row = (await db.execute(stmt)).mappings().first()
        if user["status"] == "pending":
            await db.execute(
                update(users)
                .where(users.c.id == user["id"])
                .values(status="active", updated_at=utc_now())
            )
        await db.commit()

        logger.info("patient_profile_saved", user_id=user["id"], created=not exists)
        return PatientProfileResponse.model_validate(dict(row))
