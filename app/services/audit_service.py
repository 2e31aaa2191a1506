"""Audit trail writer."""

from typing import Any

import structlog
from fastapi import Request
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit_logs import audit_logs

logger = structlog.get_logger(__name__)


class AuditService:
    """Writes ``audit_logs`` rows inside the caller's transaction."""

    @staticmethod
    async def record(
        db: AsyncSession,
        user_id: str | None,
        action: str,
        resource_type: str,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
        request: Request | None = None,
    ) -> None:
        """
        Record a sensitive action.

        Args:
            db: Database session
            user_id: Acting user, or None for system actions (webhooks)
            action: Dotted action name, e.g. ``appointment.cancel``
            resource_type: Table-level resource name
            resource_id: Affected row
            details: Free-form context
            request: Source request, for client address and user agent
        """
        ip_address = None
        user_agent = None
        if request is not None:
            ip_address = request.client.host if request.client else None
            user_agent = request.headers.get("user-agent")

        await db.execute(
            insert(audit_logs).values(
                user_id=user_id,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
        logger.info(
            "audit_recorded",
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            user_id=user_id,
        )
