"""Doctor review endpoints."""

from fastapi import APIRouter, Query, status

from app.dependencies import DatabaseSession, PatientUser
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.schemas.reviews import RatingSummary, ReviewCreate, ReviewResponse
from app.services.review_service import ReviewService

router = APIRouter()


@router.post(
    "/",
    response_model=SuccessResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review a completed appointment",
)
async def create_review(
    data: ReviewCreate,
    current_user: PatientUser,
    db: DatabaseSession,
) -> SuccessResponse[ReviewResponse]:
    """
    Rate the doctor of one of the caller's completed appointments.

    Args:
        data: Appointment, rating from 1 to 5 and optional comment
        current_user: Authenticated patient
        db: Database session

    Returns:
        Created review

    Raises:
        BadRequestException: Appointment is not completed
        ConflictException: Appointment already reviewed
    """
    review = await ReviewService(db).create(current_user, data)
    return SuccessResponse(data=review, message="Review submitted")


@router.get(
    "/doctor/{doctor_id}",
    response_model=PaginatedResponse[ReviewResponse],
    summary="List a doctor's reviews",
)
async def list_doctor_reviews(
    doctor_id: str,
    db: DatabaseSession,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
) -> PaginatedResponse[ReviewResponse]:
    """List approved reviews for a verified doctor, newest first."""
    items, pagination = await ReviewService(db).list_for_doctor(doctor_id, page=page, limit=limit)
    return PaginatedResponse(data=items, pagination=pagination)


@router.get(
    "/doctor/{doctor_id}/summary",
    response_model=SuccessResponse[RatingSummary],
    summary="Doctor rating summary",
)
async def get_rating_summary(
    doctor_id: str,
    db: DatabaseSession,
) -> SuccessResponse[RatingSummary]:
    """Average rating, review count and per-star distribution."""
    return SuccessResponse(data=await ReviewService(db).summary(doctor_id))
