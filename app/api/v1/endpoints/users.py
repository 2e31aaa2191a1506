"""User profile endpoints."""

from fastapi import APIRouter

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.common import SuccessResponse
from app.schemas.users import MeResponse, PatientProfileResponse, PatientProfileUpdate
from app.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=SuccessResponse[MeResponse], summary="Get current user")
async def get_me(current_user: CurrentUser, db: DatabaseSession) -> SuccessResponse[MeResponse]:
    """
    Get the authenticated user's account and role profile.

    Returns:
        Account plus patient or doctor profile when present
    """
    return SuccessResponse(data=await UserService.get_me(db, current_user))


@router.put(
    "/me/patient",
    response_model=SuccessResponse[PatientProfileResponse],
    summary="Create or update my patient profile",
)
async def upsert_patient_profile(
    data: PatientProfileUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[PatientProfileResponse]:
    """
    Save the caller's patient profile. Completing it activates a pending account.

    Raises:
        ForbiddenException: If the caller is not a patient
    """
    profile = await UserService.upsert_patient_profile(db, current_user, data)
    return SuccessResponse(data=profile, message="Profile saved")
