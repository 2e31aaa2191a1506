"""Admin dashboard analytics."""

from fastapi import APIRouter, Query

from app.dependencies import AdminUser, DatabaseSession
from app.schemas.analytics import (
    ActivityItem,
    GrowthMetrics,
    GrowthPeriod,
    PlatformMetrics,
    TimeSeriesMetric,
    TimeSeriesPoint,
    TopDoctor,
)
from app.schemas.common import SuccessResponse
from app.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/metrics", response_model=SuccessResponse[PlatformMetrics], summary="Platform metrics")
async def get_metrics(current_user: AdminUser, db: DatabaseSession) -> SuccessResponse[PlatformMetrics]:
    """
    Headline counters: users, doctors, appointments, revenue and articles.

    Returns:
        Platform metrics
    """
    return SuccessResponse(data=await AnalyticsService(db).get_metrics())


@router.get("/growth", response_model=SuccessResponse[GrowthMetrics], summary="Growth metrics")
async def get_growth(
    current_user: AdminUser,
    db: DatabaseSession,
    period: GrowthPeriod = Query(GrowthPeriod.MONTH),
) -> SuccessResponse[GrowthMetrics]:
    """Compare the current week or month against the previous one."""
    return SuccessResponse(data=await AnalyticsService(db).get_growth(period))


@router.get(
    "/activity", response_model=SuccessResponse[list[ActivityItem]], summary="Recent activity"
)
async def get_activity(
    current_user: AdminUser,
    db: DatabaseSession,
    limit: int = Query(20, ge=1, le=100),
) -> SuccessResponse[list[ActivityItem]]:
    """Latest registrations, bookings and payments."""
    return SuccessResponse(data=await AnalyticsService(db).get_activity(limit))


@router.get(
    "/timeseries",
    response_model=SuccessResponse[list[TimeSeriesPoint]],
    summary="Daily time series",
)
async def get_timeseries(
    current_user: AdminUser,
    db: DatabaseSession,
    metric: TimeSeriesMetric = Query(...),
    days: int = Query(30, ge=1, le=365),
) -> SuccessResponse[list[TimeSeriesPoint]]:
    """One point per UTC day for the chosen metric."""
    return SuccessResponse(data=await AnalyticsService(db).get_timeseries(metric, days))


@router.get(
    "/doctors/top", response_model=SuccessResponse[list[TopDoctor]], summary="Top doctors"
)
async def get_top_doctors(
    current_user: AdminUser,
    db: DatabaseSession,
    limit: int = Query(10, ge=1, le=50),
) -> SuccessResponse[list[TopDoctor]]:
    """Doctors ranked by appointment volume."""
    return SuccessResponse(data=await AnalyticsService(db).get_top_doctors(limit))
