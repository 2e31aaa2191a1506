"""Prescription endpoints."""

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, DatabaseSession, DoctorUser
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.schemas.consultations import PrescriptionCreate, PrescriptionResponse
from app.services.consultation_service import PrescriptionService

router = APIRouter()


@router.post(
    "/",
    response_model=SuccessResponse[PrescriptionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Issue a prescription",
)
async def create_prescription(
    data: PrescriptionCreate,
    current_user: DoctorUser,
    db: DatabaseSession,
) -> SuccessResponse[PrescriptionResponse]:
    """
    Issue a prescription for one of the doctor's consultations.

    Raises:
        NotFoundException: Unknown appointment or consultation
        ForbiddenException: Caller is not the appointment's doctor
    """
    prescription = await PrescriptionService(db).create(current_user, data)
    return SuccessResponse(data=prescription, message="Prescription issued")


@router.get(
    "/my",
    response_model=PaginatedResponse[PrescriptionResponse],
    summary="List my prescriptions",
)
async def list_my_prescriptions(
    current_user: CurrentUser,
    db: DatabaseSession,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[PrescriptionResponse]:
    """Prescriptions issued to the caller, newest first."""
    items, pagination = await PrescriptionService(db).list_own(current_user["id"], page, limit)
    return PaginatedResponse(data=items, pagination=pagination)


@router.get(
    "/{prescription_id}",
    response_model=SuccessResponse[PrescriptionResponse],
    summary="Get prescription by ID",
)
async def get_prescription(
    prescription_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[PrescriptionResponse]:
    """Get a prescription for its patient, its doctor or an admin."""
    return SuccessResponse(data=await PrescriptionService(db).get(prescription_id, current_user))
