"""Doctor verification workflow for moderators."""

import structlog
from fastapi import Request
from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException, NotFoundException
from app.core.state_machines import VERIFICATION_LIFECYCLE
from app.core.utils import utc_now
from app.models.doctors import doctors
from app.models.users import users
from app.schemas.common import Pagination
from app.schemas.doctors import VerificationDetail, VerificationStatus
from app.services.audit_service import AuditService
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)


class VerificationService:
    """Approve or reject doctors awaiting verification."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    def _detail_query(self):
        return select(doctors, users.c.email, users.c.phone).join(
            users, users.c.id == doctors.c.id
        )

    async def list_verifications(
        self,
        status: VerificationStatus = VerificationStatus.PENDING,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[VerificationDetail], Pagination]:
        """List doctors by verification status, oldest submission first."""
        condition = doctors.c.verification_status == status.value
        count_stmt = select(func.count()).select_from(doctors).where(condition)
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = (
            self._detail_query()
            .where(condition)
            .order_by(doctors.c.created_at.asc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = (await self.db.execute(stmt)).fetchall()
        items = [VerificationDetail.model_validate(dict(row._mapping)) for row in rows]
        return items, Pagination.build(page, limit, total)

    async def get_verification(self, doctor_id: str) -> VerificationDetail:
        """Get one doctor's verification record."""
        row = (
            await self.db.execute(self._detail_query().where(doctors.c.id == doctor_id))
        ).fetchone()
        if not row:
            raise NotFoundException("Doctor not found")
        return VerificationDetail.model_validate(dict(row._mapping))

    async def _decide(
        self,
        doctor_id: str,
        moderator_id: str,
        target: VerificationStatus,
        notes: str | None,
        request: Request | None,
    ) -> VerificationDetail:
        current = (
            await self.db.execute(
                select(doctors.c.verification_status).where(doctors.c.id == doctor_id)
            )
        ).fetchone()
        if not current:
            raise NotFoundException("Doctor not found")

        VERIFICATION_LIFECYCLE.ensure(current.verification_status, target.value)

        values = {
            "verification_status": target.value,
            "verification_notes": notes,
            "updated_at": utc_now(),
        }
        if target == VerificationStatus.VERIFIED:
            values["verified_at"] = utc_now()
            values["verified_by"] = moderator_id

        # Guarded on pending so two moderators cannot both decide
        result = await self.db.execute(
            update(doctors)
            .where(
                and_(
                    doctors.c.id == doctor_id,
                    doctors.c.verification_status == VerificationStatus.PENDING.value,
                )
            )
            .values(**values)
        )
        if result.rowcount != 1:
            raise ConflictException("Doctor verification was already decided")

        if target == VerificationStatus.VERIFIED:
            title, body = (
                "Profile verified",
                "Your profile has been verified and is now visible to patients.",
            )
        else:
            title, body = (
                "Verification unsuccessful",
                f"Your profile could not be verified. {notes or ''}".strip(),
            )
        await NotificationService.notify(
            self.db,
            user_id=doctor_id,
            notification_type=f"doctor_{target.value}",
            title=title,
            body=body,
        )
        await AuditService.record(
            self.db,
            user_id=moderator_id,
            action=f"doctor.{'approve' if target == VerificationStatus.VERIFIED else 'reject'}",
            resource_type="doctor",
            resource_id=doctor_id,
            details={"notes": notes},
            request=request,
        )
        await self.db.commit()

        logger.info(
            "doctor_verification_decided",
            doctor_id=doctor_id,
            status=target.value,
            moderator_id=moderator_id,
        )
        if target == VerificationStatus.VERIFIED:
            # Consumed by the external search indexer
            logger.info("search_index_requested", resource_type="doctor", resource_id=doctor_id)

        return await self.get_verification(doctor_id)

    async def approve(
        self,
        doctor_id: str,
        moderator_id: str,
        notes: str | None = None,
        request: Request | None = None,
    ) -> VerificationDetail:
        """
        Approve a pending doctor.

        Raises:
            NotFoundException: If the doctor does not exist
            ConflictException: If the doctor is not pending
        """
        return await self._decide(
            doctor_id, moderator_id, VerificationStatus.VERIFIED, notes, request
        )

    async def reject(
        self,
        doctor_id: str,
        moderator_id: str,
        reason: str | None = None,
        request: Request | None = None,
    ) -> VerificationDetail:
        """
        Reject a pending doctor, keeping the reason as verification notes.

        Raises:
            NotFoundException: If the doctor does not exist
            ConflictException: If the doctor is not pending
        """
        return await self._decide(
            doctor_id, moderator_id, VerificationStatus.REJECTED, reason, request
        )
