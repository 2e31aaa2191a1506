"""Health check endpoints."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.config import settings
from app.database import check_database_connection

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class ComponentHealth(BaseModel):
    status: str
    detail: str | None = None


class DetailedHealthResponse(HealthResponse):
    """Per-component view of what booking and checkout depend on."""

    database: ComponentHealth
    scheduling: ComponentHealth
    payments: ComponentHealth


def check_scheduling() -> ComponentHealth:
    """Slots cannot be generated without the default clinic zone."""
    try:
        ZoneInfo(settings.default_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return ComponentHealth(
            status="unhealthy", detail=f"unknown timezone {settings.default_timezone}"
        )
    return ComponentHealth(
        status="healthy",
        detail=(
            f"{settings.default_timezone}, "
            f"cancellation cutoff {settings.cancellation_cutoff_hours}h"
        ),
    )


def check_payments() -> ComponentHealth:
    if not settings.paystack_secret_key:
        return ComponentHealth(status="unconfigured", detail="PAYSTACK_SECRET_KEY is not set")
    return ComponentHealth(status="configured", detail=settings.payment_currency)


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns:
        Basic health status
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Detailed health check",
)
async def detailed_health_check() -> DetailedHealthResponse:
    """
    Database, scheduling and payment readiness.

    The service is degraded when the database is unreachable or slots cannot
    be computed; missing payment keys only disable checkout.
    """
    database = ComponentHealth(
        status="healthy" if await check_database_connection() else "unhealthy"
    )
    scheduling = check_scheduling()

    return DetailedHealthResponse(
        status=(
            "healthy"
            if database.status == scheduling.status == "healthy"
            else "degraded"
        ),
        version=settings.app_version,
        environment=settings.environment,
        database=database,
        scheduling=scheduling,
        payments=check_payments(),
    )


@router.get(
    "/ping",
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Simple ping",
)
async def ping() -> dict[str, str]:
    return {"message": "pong"}
