"""Moderator endpoints for doctor verification."""

from fastapi import APIRouter, Body, Query, Request

from app.dependencies import AdminUser, DatabaseSession
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.schemas.doctors import (
    VerificationApprove,
    VerificationDetail,
    VerificationReject,
    VerificationStatus,
)
from app.services.verification_service import VerificationService

router = APIRouter()


@router.get(
    "/",
    response_model=PaginatedResponse[VerificationDetail],
    summary="List doctors by verification status",
)
async def list_verifications(
    current_user: AdminUser,
    db: DatabaseSession,
    status_filter: VerificationStatus = Query(VerificationStatus.PENDING, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[VerificationDetail]:
    """
    List doctors in the verification queue, oldest submission first.

    Args:
        current_user: Authenticated admin
        db: Database session
        status_filter: pending (default), verified or rejected
        page: Page number
        limit: Items per page

    Returns:
        Paginated doctor profiles with contact details
    """
    items, pagination = await VerificationService(db).list_verifications(
        status_filter, page, limit
    )
    return PaginatedResponse(data=items, pagination=pagination)


@router.get(
    "/{doctor_id}",
    response_model=SuccessResponse[VerificationDetail],
    summary="Get a doctor's verification record",
)
async def get_verification(
    doctor_id: str,
    current_user: AdminUser,
    db: DatabaseSession,
) -> SuccessResponse[VerificationDetail]:
    """Get one doctor's profile as seen by a moderator."""
    return SuccessResponse(data=await VerificationService(db).get_verification(doctor_id))


@router.post(
    "/{doctor_id}/approve",
    response_model=SuccessResponse[VerificationDetail],
    summary="Approve a doctor",
)
async def approve_doctor(
    doctor_id: str,
    request: Request,
    current_user: AdminUser,
    db: DatabaseSession,
    data: VerificationApprove | None = Body(None),
) -> SuccessResponse[VerificationDetail]:
    """
    Approve a pending doctor so they appear in search.

    Raises:
        NotFoundException: Unknown doctor
        ConflictException: Doctor is not pending
    """
    doctor = await VerificationService(db).approve(
        doctor_id, current_user["id"], notes=data.notes if data else None, request=request
    )
    return SuccessResponse(data=doctor, message="Doctor verified")


@router.post(
    "/{doctor_id}/reject",
    response_model=SuccessResponse[VerificationDetail],
    summary="Reject a doctor",
)
async def reject_doctor(
    doctor_id: str,
    request: Request,
    current_user: AdminUser,
    db: DatabaseSession,
    data: VerificationReject | None = Body(None),
) -> SuccessResponse[VerificationDetail]:
    """
    Reject a pending doctor with an optional reason.

    Raises:
        NotFoundException: Unknown doctor
        ConflictException: Doctor is not pending
    """
    doctor = await VerificationService(db).reject(
        doctor_id, current_user["id"], reason=data.reason if data else None, request=request
    )
    return SuccessResponse(data=doctor, message="Doctor rejected")
