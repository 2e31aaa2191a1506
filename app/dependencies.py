"""FastAPI dependencies."""

from collections.abc import AsyncGenerator, Callable
from typing import Annotated

import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.paystack import PaystackClient, get_paystack_client
from app.core.security import decode_access_token
from app.database import get_db
from app.services.user_service import UserService

# Security; the session cookie is accepted when no bearer token is sent
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """
    Extract and validate user ID from the JWT.

    Args:
        request: Incoming request, for the session cookie
        credentials: Bearer token credentials, if any

    Returns:
        User ID from token

    Raises:
        HTTPException: If token is missing, invalid or expired
    """
    token = credentials.credentials if credentials else None
    if not token:
        token = request.cookies.get(settings.session_cookie_name)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


async def get_current_user(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """
    Get current user from database.

    Args:
        user_id: User ID from JWT token
        db: Database session

    Returns:
        User data from database

    Raises:
        HTTPException: If user not found or suspended
    """
    user = await UserService.get_user_by_id(db, user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user["status"] == "suspended":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is suspended",
        )

    return user


def require_roles(*roles: str) -> Callable:
    """
    Build a dependency that admits only the given roles.

    Args:
        roles: Allowed role names

    Returns:
        Dependency returning the current user
    """

    async def checker(current_user: Annotated[dict, Depends(get_current_user)]) -> dict:
        if current_user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user

    return checker


require_admin = require_roles("admin")
require_doctor = require_roles("doctor")
require_patient = require_roles("patient")
require_doctor_or_admin = require_roles("doctor", "admin")


async def get_auth_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client for the upstream auth service."""
    async with httpx.AsyncClient(
        base_url=settings.auth_service_url,
        timeout=settings.auth_proxy_timeout_seconds,
    ) as client:
        yield client


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
AdminUser = Annotated[dict, Depends(require_admin)]
DoctorUser = Annotated[dict, Depends(require_doctor)]
PatientUser = Annotated[dict, Depends(require_patient)]
DoctorOrAdminUser = Annotated[dict, Depends(require_doctor_or_admin)]
Paystack = Annotated[PaystackClient, Depends(get_paystack_client)]
AuthHttpClient = Annotated[httpx.AsyncClient, Depends(get_auth_http_client)]
