"""Consultation endpoints, keyed by appointment."""

from fastapi import APIRouter

from app.dependencies import CurrentUser, DatabaseSession, DoctorUser
from app.schemas.common import SuccessResponse
from app.schemas.consultations import ConsultationNotes, ConsultationResponse, ConsultationSession
from app.services.consultation_service import ConsultationService

router = APIRouter()


@router.post(
    "/{appointment_id}/start",
    response_model=SuccessResponse[ConsultationResponse],
    summary="Start a consultation",
)
async def start_consultation(
    appointment_id: str,
    current_user: DoctorUser,
    db: DatabaseSession,
) -> SuccessResponse[ConsultationResponse]:
    """
    Open the video room and move the appointment to in progress.

    Args:
        appointment_id: Appointment ID
        current_user: The appointment's doctor
        db: Database session

    Returns:
        Consultation with its room ID

    Raises:
        ForbiddenException: Caller is not the appointment's doctor
        ConflictException: Appointment is not confirmed
    """
    consultation = await ConsultationService(db).start(appointment_id, current_user)
    return SuccessResponse(data=consultation, message="Consultation started")


@router.get(
    "/{appointment_id}/session",
    response_model=SuccessResponse[ConsultationSession],
    summary="Join details for a consultation",
)
async def get_session(
    appointment_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[ConsultationSession]:
    """Room ID and a join token while the consultation is in progress."""
    session = await ConsultationService(db).get_session(appointment_id, current_user)
    return SuccessResponse(data=session)


@router.post(
    "/{appointment_id}/end",
    response_model=SuccessResponse[ConsultationResponse],
    summary="End a consultation",
)
async def end_consultation(
    appointment_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[ConsultationResponse]:
    """End the consultation and complete the appointment."""
    consultation = await ConsultationService(db).end(appointment_id, current_user)
    return SuccessResponse(data=consultation, message="Consultation ended")


@router.put(
    "/{appointment_id}/notes",
    response_model=SuccessResponse[ConsultationResponse],
    summary="Save consultation notes",
)
async def save_notes(
    appointment_id: str,
    data: ConsultationNotes,
    current_user: DoctorUser,
    db: DatabaseSession,
) -> SuccessResponse[ConsultationResponse]:
    """Create or update the doctor's notes and diagnosis."""
    consultation = await ConsultationService(db).save_notes(appointment_id, current_user, data)
    return SuccessResponse(data=consultation, message="Notes saved")
