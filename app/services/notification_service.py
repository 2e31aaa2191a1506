"""In-app notification service.

Rows are written inside the caller's transaction; delivery over push or SMS
channels is handled by an external worker that reads ``pending`` rows.
"""

from typing import Any

import structlog
from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.core.utils import utc_now
from app.models.notifications import notifications
from app.schemas.common import Pagination
from app.schemas.notifications import NotificationResponse

logger = structlog.get_logger(__name__)


class NotificationService:
    """Service for managing in-app notifications."""

    @staticmethod
    async def notify(
        db: AsyncSession,
        user_id: str,
        notification_type: str,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> str:
        """
        Queue a notification for a user.

        Does not commit; the row becomes visible with the caller's transaction.

        Args:
            db: Database session
            user_id: Recipient
            notification_type: Event name, e.g. ``appointment_booked``
            title: Notification title
            body: Notification body
            data: Optional payload for the client

        Returns:
            ID of the notification row
        """
        stmt = (
            insert(notifications)
            .values(
                user_id=user_id,
                type=notification_type,
                title=title,
                body=body,
                data=data,
                channel="in_app",
                status="pending",
            )
            .returning(notifications.c.id)
        )
        result = await db.execute(stmt)
        notification_id = result.scalar_one()

        logger.info(
            "notification_queued",
            notification_id=notification_id,
            user_id=user_id,
            type=notification_type,
        )
        return notification_id

    @staticmethod
    async def list_for_user(
        db: AsyncSession,
        user_id: str,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[NotificationResponse], Pagination]:
        """List a user's notifications, newest first."""
        conditions = [notifications.c.user_id == user_id]
        if unread_only:
            conditions.append(notifications.c.read_at.is_(None))

        count_stmt = select(func.count()).select_from(notifications).where(and_(*conditions))
        total = (await db.execute(count_stmt)).scalar() or 0

        stmt = (
            select(notifications)
            .where(and_(*conditions))
            .order_by(notifications.c.created_at.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = (await db.execute(stmt)).fetchall()
        items = [NotificationResponse.model_validate(dict(row._mapping)) for row in rows]
        return items, Pagination.build(page, limit, total)

    @staticmethod
    async def mark_read(db: AsyncSession, user_id: str, notification_id: str) -> NotificationResponse:
        """
        Mark one notification as read.

        Raises:
            NotFoundException: If the notification does not belong to the user
        """
        stmt = (
            update(notifications)
            .where(
                and_(
                    notifications.c.id == notification_id,
                    notifications.c.user_id == user_id,
                )
            )
            .values(status="read", read_at=utc_now())
            .returning(notifications)
        )
        row = (await db.execute(stmt)).fetchone()
        if not row:
            raise NotFoundException("Notification not found")
        await db.commit()
        return NotificationResponse.model_validate(dict(row._mapping))

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: str) -> int:
        """Mark every unread notification of a user as read."""
        stmt = (
            update(notifications)
            .where(
                and_(
                    notifications.c.user_id == user_id,
                    notifications.c.read_at.is_(None),
                )
            )
            .values(status="read", read_at=utc_now())
        )
        result = await db.execute(stmt)
        await db.commit()

        logger.info("notifications_marked_read", user_id=user_id, count=result.rowcount)
        return result.rowcount
