"""Medical record endpoints."""

from fastapi import APIRouter, Query, Request, status

from app.dependencies import CurrentUser, DatabaseSession, DoctorOrAdminUser, PatientUser
from app.schemas.common import MessageResponse, PaginatedResponse, SuccessResponse
from app.schemas.records import RecordCreate, RecordResponse, RecordShare, RecordType
from app.services.record_service import RecordService

router = APIRouter()


@router.post(
    "/",
    response_model=SuccessResponse[RecordResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a medical record",
)
async def create_record(
    data: RecordCreate,
    current_user: PatientUser,
    db: DatabaseSession,
) -> SuccessResponse[RecordResponse]:
    """
    Register a record whose file already lives in external storage.

    Args:
        data: Record metadata and file location
        current_user: Authenticated patient
        db: Database session

    Returns:
        Created record
    """
    record = await RecordService(db).create(current_user["id"], data)
    return SuccessResponse(data=record, message="Record saved")


@router.get(
    "/my",
    response_model=PaginatedResponse[RecordResponse],
    summary="List my medical records",
)
async def list_my_records(
    current_user: CurrentUser,
    db: DatabaseSession,
    record_type: RecordType | None = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[RecordResponse]:
    """List the caller's own records, newest first."""
    items, pagination = await RecordService(db).list_own(
        current_user["id"], record_type, page, limit
    )
    return PaginatedResponse(data=items, pagination=pagination)


@router.get(
    "/patient/{patient_id}",
    response_model=SuccessResponse[list[RecordResponse]],
    summary="List a patient's records",
)
async def list_patient_records(
    patient_id: str,
    current_user: DoctorOrAdminUser,
    db: DatabaseSession,
) -> SuccessResponse[list[RecordResponse]]:
    """
    A patient's records for a treating doctor.

    Empty when the doctor has no confirmed or in-progress
    appointment with the patient.
    """
    records = await RecordService(db).list_for_patient(current_user, patient_id)
    return SuccessResponse(data=records)


@router.get(
    "/{record_id}",
    response_model=SuccessResponse[RecordResponse],
    summary="Get a medical record",
)
async def get_record(
    record_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[RecordResponse]:
    """
    Get a record owned by, shared with, or relevant to the caller.

    Raises:
        NotFoundException: Unknown record
        ForbiddenException: Caller has no access
    """
    return SuccessResponse(data=await RecordService(db).get(record_id, current_user))


@router.delete(
    "/{record_id}",
    response_model=MessageResponse,
    summary="Delete a medical record",
)
async def delete_record(
    record_id: str,
    request: Request,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> MessageResponse:
    """Delete a record the caller owns."""
    await RecordService(db).delete_record(record_id, current_user["id"], request)
    return MessageResponse(message="Record deleted")


@router.post(
    "/{record_id}/share",
    response_model=SuccessResponse[RecordResponse],
    summary="Share a record with a doctor",
)
async def share_record(
    record_id: str,
    data: RecordShare,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[RecordResponse]:
    """Grant a doctor read access to one of the caller's records."""
    record = await RecordService(db).share(record_id, current_user["id"], data.doctor_id)
    return SuccessResponse(data=record, message="Record shared")


@router.post(
    "/{record_id}/revoke",
    response_model=SuccessResponse[RecordResponse],
    summary="Revoke a doctor's access",
)
async def revoke_record(
    record_id: str,
    data: RecordShare,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[RecordResponse]:
    """Withdraw a doctor's explicit access to one of the caller's records."""
    record = await RecordService(db).revoke(record_id, current_user["id"], data.doctor_id)
    return SuccessResponse(data=record, message="Access revoked")
