"""In-app notification endpoints."""

from fastapi import APIRouter, Query

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.schemas.notifications import NotificationResponse, ReadAllResponse
from app.services.notification_service import NotificationService

router = APIRouter()


@router.get(
    "/my",
    response_model=PaginatedResponse[NotificationResponse],
    summary="List my notifications",
)
async def list_my_notifications(
    current_user: CurrentUser,
    db: DatabaseSession,
    unread_only: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[NotificationResponse]:
    """
    List the caller's notifications, newest first.

    Args:
        current_user: Authenticated user
        db: Database session
        unread_only: Only notifications not yet read
        page: Page number
        limit: Items per page

    Returns:
        Paginated notifications
    """
    items, pagination = await NotificationService.list_for_user(
        db, current_user["id"], unread_only=unread_only, page=page, limit=limit
    )
    return PaginatedResponse(data=items, pagination=pagination)


@router.post(
    "/read-all",
    response_model=SuccessResponse[ReadAllResponse],
    summary="Mark all notifications read",
)
async def mark_all_read(
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[ReadAllResponse]:
    """Mark every unread notification of the caller as read."""
    updated = await NotificationService.mark_all_read(db, current_user["id"])
    return SuccessResponse(data=ReadAllResponse(updated=updated))


@router.post(
    "/{notification_id}/read",
    response_model=SuccessResponse[NotificationResponse],
    summary="Mark notification read",
)
async def mark_read(
    notification_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[NotificationResponse]:
    """Mark one of the caller's notifications as read."""
    notification = await NotificationService.mark_read(db, current_user["id"], notification_id)
    return SuccessResponse(data=notification)
