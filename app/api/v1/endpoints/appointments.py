"""Appointment endpoints."""

from datetime import date

from fastapi import APIRouter, Body, Query, Request, status

from app.dependencies import CurrentUser, DatabaseSession, DoctorOrAdminUser
from app.schemas.appointments import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentResponse,
    AppointmentStatus,
    ConsultationType,
    SlotAvailabilityResponse,
)
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.services.appointment_service import AppointmentService

router = APIRouter()


@router.post(
    "/",
    response_model=SuccessResponse[AppointmentResponse],
    status_code=status.HTTP_201_CREATED,
    tags=["Appointments"],
    summary="Book an appointment",
)
async def book_appointment(
    data: AppointmentCreate,
    request: Request,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[AppointmentResponse]:
    """
    Book an appointment with a verified doctor for the authenticated patient.

    Args:
        data: Doctor, start time and consultation type
        request: Incoming request
        current_user: Authenticated user
        db: Database session

    Returns:
        Created appointment awaiting payment

    Raises:
        NotFoundException: Patient profile or verified doctor missing
        ConflictException: Slot already booked
    """
    service = AppointmentService(db)
    appointment = await service.book(current_user, data, request)
    return SuccessResponse(data=appointment, message="Appointment booked")


@router.get(
    "/slots/{doctor_id}",
    response_model=SuccessResponse[SlotAvailabilityResponse],
    tags=["Appointments"],
    summary="Available slots for a doctor on a date",
)
async def get_available_slots(
    doctor_id: str,
    db: DatabaseSession,
    day: date = Query(..., alias="date", description="Local date, YYYY-MM-DD"),
    consultation_type: ConsultationType | None = Query(None),
) -> SuccessResponse[SlotAvailabilityResponse]:
    """
    Compute bookable slots from the doctor's weekly windows.

    Args:
        doctor_id: Doctor ID
        db: Database session
        day: Local calendar date
        consultation_type: Keep only slots offering this mode

    Returns:
        Available and booked slots in UTC
    """
    service = AppointmentService(db)
    return SuccessResponse(data=await service.get_slots(doctor_id, day, consultation_type))


@router.get(
    "/my",
    response_model=PaginatedResponse[AppointmentResponse],
    tags=["Appointments"],
    summary="List my appointments",
)
async def list_my_appointments(
    current_user: CurrentUser,
    db: DatabaseSession,
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    upcoming: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
) -> PaginatedResponse[AppointmentResponse]:
    """
    List the authenticated patient's appointments.

    Args:
        current_user: Authenticated user
        db: Database session
        status_filter: Filter by status
        upcoming: Only future, non-terminal appointments
        page: Page number
        limit: Items per page

    Returns:
        Paginated list of appointments
    """
    filters = AppointmentFilters(status=status_filter, upcoming=upcoming, page=page, limit=limit)
    service = AppointmentService(db)
    items, pagination = await service.list_for_patient(current_user["id"], filters)
    return PaginatedResponse(data=items, pagination=pagination)


@router.get(
    "/doctor",
    response_model=PaginatedResponse[AppointmentResponse],
    tags=["Appointments"],
    summary="List a doctor's appointments",
)
async def list_doctor_appointments(
    current_user: DoctorOrAdminUser,
    db: DatabaseSession,
    on_date: date | None = Query(None, alias="date"),
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
) -> PaginatedResponse[AppointmentResponse]:
    """
    List the calling doctor's schedule, soonest first.

    Args:
        current_user: Authenticated doctor or admin
        db: Database session
        on_date: Only appointments on this local date
        status_filter: Filter by status
        page: Page number
        limit: Items per page

    Returns:
        Paginated list of appointments
    """
    filters = AppointmentFilters(
        status=status_filter, on_date=on_date, page=page, limit=limit
    )
    service = AppointmentService(db)
    items, pagination = await service.list_for_doctor(current_user, filters)
    return PaginatedResponse(data=items, pagination=pagination)


@router.get(
    "/{appointment_id}",
    response_model=SuccessResponse[AppointmentResponse],
    tags=["Appointments"],
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[AppointmentResponse]:
    """
    Get a specific appointment by ID.

    Args:
        appointment_id: Appointment ID
        current_user: Authenticated user
        db: Database session

    Returns:
        Appointment details

    Raises:
        NotFoundException: If appointment not found
        ForbiddenException: If the caller is not a participant
    """
    service = AppointmentService(db)
    return SuccessResponse(data=await service.get_appointment(appointment_id, current_user))


@router.delete(
    "/{appointment_id}",
    response_model=SuccessResponse[AppointmentResponse],
    tags=["Appointments"],
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: str,
    request: Request,
    current_user: CurrentUser,
    db: DatabaseSession,
    data: AppointmentCancel | None = Body(None),
) -> SuccessResponse[AppointmentResponse]:
    """
    Cancel an appointment at least two hours before it starts.

    Args:
        appointment_id: Appointment ID
        request: Incoming request
        current_user: Authenticated user
        db: Database session
        data: Optional cancellation reason

    Returns:
        Cancelled appointment

    Raises:
        BadRequestException: Terminal status or too close to the start time
    """
    service = AppointmentService(db)
    appointment = await service.cancel(
        appointment_id, current_user, reason=data.reason if data else None, request=request
    )
    return SuccessResponse(data=appointment, message="Appointment cancelled")


@router.post(
    "/{appointment_id}/start",
    response_model=SuccessResponse[AppointmentResponse],
    tags=["Appointments"],
    summary="Start appointment",
)
async def start_appointment(
    appointment_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[AppointmentResponse]:
    """Move a confirmed appointment to in progress."""
    service = AppointmentService(db)
    return SuccessResponse(data=await service.start(appointment_id, current_user))


@router.post(
    "/{appointment_id}/complete",
    response_model=SuccessResponse[AppointmentResponse],
    tags=["Appointments"],
    summary="Complete appointment",
)
async def complete_appointment(
    appointment_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[AppointmentResponse]:
    """Mark an in-progress appointment as completed."""
    service = AppointmentService(db)
    return SuccessResponse(data=await service.complete(appointment_id, current_user))


@router.post(
    "/{appointment_id}/no-show",
    response_model=SuccessResponse[AppointmentResponse],
    tags=["Appointments"],
    summary="Mark patient as no-show",
)
async def mark_no_show(
    appointment_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[AppointmentResponse]:
    """Record that the patient did not attend a confirmed appointment."""
    service = AppointmentService(db)
    return SuccessResponse(data=await service.mark_no_show(appointment_id, current_user))
