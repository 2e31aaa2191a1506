"""Admin analytics schemas."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel


class GrowthPeriod(str, Enum):
    """Comparison window for growth figures."""

    WEEK = "week"
    MONTH = "month"


class TimeSeriesMetric(str, Enum):
    """Metrics available as a daily series."""

    USERS = "users"
    APPOINTMENTS = "appointments"
    REVENUE = "revenue"


class PlatformMetrics(BaseModel):
    """Headline counters for the admin dashboard."""

    total_users: int
    total_doctors: int
    total_patients: int
    verified_doctors: int
    pending_verifications: int
    total_appointments: int
    completed_appointments: int
    in_progress_appointments: int
    today_appointments: int
    total_revenue: float
    month_revenue: float
    total_articles: int
    published_articles: int


class GrowthFigure(BaseModel):
    """Current vs previous window."""

    current: float
    previous: float
    growth: float


class GrowthMetrics(BaseModel):
    """Growth figures for one period."""

    period: GrowthPeriod
    users: GrowthFigure
    appointments: GrowthFigure
    revenue: GrowthFigure


class ActivityItem(BaseModel):
    """One entry in the recent activity feed."""

    type: str
    id: str
    description: str
    timestamp: datetime


class TimeSeriesPoint(BaseModel):
    """Value for one UTC day."""

    day: date
    value: float


class TopDoctor(BaseModel):
    """Doctor ranked by appointment volume."""

    doctor_id: str
    name: str
    appointments: int
    revenue: float
    average_rating: float
