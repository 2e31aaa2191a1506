"""Doctor directory and profile endpoints."""

from decimal import Decimal

from fastapi import APIRouter, Query, status

from app.dependencies import DatabaseSession, DoctorUser
from app.schemas.appointments import ConsultationType
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.schemas.doctors import (
    AvailabilityUpdate,
    AvailabilityWindow,
    DoctorProfileCreate,
    DoctorResponse,
    DoctorSearchFilters,
)
from app.services.doctor_service import DoctorService

router = APIRouter()


# ============================================================================
# Public Directory
# ============================================================================


@router.get(
    "/",
    response_model=PaginatedResponse[DoctorResponse],
    summary="Search verified doctors",
)
async def search_doctors(
    db: DatabaseSession,
    q: str | None = Query(None, description="Name or specialty text"),
    specialty: str | None = Query(None),
    mode: ConsultationType | None = Query(None, description="Consultation mode offered"),
    max_fee: Decimal | None = Query(None, ge=0),
    min_rating: float | None = Query(None, ge=0, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[DoctorResponse]:
    """
    Search the public directory. Only verified doctors are listed.

    - **q**: Matches first name, last name or specialty
    - **specialty**: Exact specialty
    - **mode**: in_person, video or phone
    - **max_fee**: Upper bound on the consultation fee
    - **min_rating**: Lower bound on the average rating
    """
    filters = DoctorSearchFilters(
        q=q,
        specialty=specialty,
        mode=mode,
        max_fee=max_fee,
        min_rating=min_rating,
        page=page,
        limit=limit,
    )
    items, pagination = await DoctorService(db).search(filters)
    return PaginatedResponse(data=items, pagination=pagination)


# ============================================================================
# Own Profile
# ============================================================================


@router.get(
    "/me",
    response_model=SuccessResponse[DoctorResponse],
    summary="Get my doctor profile",
)
async def get_my_profile(
    current_user: DoctorUser,
    db: DatabaseSession,
) -> SuccessResponse[DoctorResponse]:
    """Get the caller's profile, including its verification status."""
    profile = await DoctorService(db).get_own_profile(current_user["id"])
    return SuccessResponse(data=profile)


@router.post(
    "/me",
    response_model=SuccessResponse[DoctorResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register my doctor profile",
)
async def register_profile(
    data: DoctorProfileCreate,
    current_user: DoctorUser,
    db: DatabaseSession,
) -> SuccessResponse[DoctorResponse]:
    """
    Register the caller's doctor profile. It stays out of the directory
    until a moderator approves it.

    Args:
        data: Profile details
        current_user: Authenticated doctor
        db: Database session

    Returns:
        Created profile in pending verification

    Raises:
        ConflictException: If the caller already has a profile
    """
    profile = await DoctorService(db).register_profile(current_user["id"], data)
    return SuccessResponse(data=profile, message="Profile submitted for verification")


@router.put(
    "/me/availability",
    response_model=SuccessResponse[list[AvailabilityWindow]],
    summary="Replace my weekly availability",
)
async def set_my_availability(
    data: AvailabilityUpdate,
    current_user: DoctorUser,
    db: DatabaseSession,
) -> SuccessResponse[list[AvailabilityWindow]]:
    """Replace every weekly window of the caller."""
    windows = await DoctorService(db).set_availability(current_user["id"], data)
    return SuccessResponse(data=windows, message="Availability updated")


# ============================================================================
# Public Profile
# ============================================================================


@router.get(
    "/{doctor_id}",
    response_model=SuccessResponse[DoctorResponse],
    summary="Get doctor profile",
)
async def get_doctor(doctor_id: str, db: DatabaseSession) -> SuccessResponse[DoctorResponse]:
    """
    Get a verified doctor's public profile.

    Raises:
        NotFoundException: Unknown or unverified doctor
    """
    return SuccessResponse(data=await DoctorService(db).get_public_profile(doctor_id))


@router.get(
    "/{doctor_id}/availability",
    response_model=SuccessResponse[list[AvailabilityWindow]],
    summary="Get doctor weekly availability",
)
async def get_doctor_availability(
    doctor_id: str, db: DatabaseSession
) -> SuccessResponse[list[AvailabilityWindow]]:
    """Weekly windows of a verified doctor."""
    return SuccessResponse(data=await DoctorService(db).get_availability(doctor_id))
