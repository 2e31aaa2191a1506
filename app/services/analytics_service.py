"""Platform analytics for the admin dashboard."""

from datetime import UTC, datetime, timedelta

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.utils import as_utc, utc_now
from app.models.appointments import appointments
from app.models.content import articles
from app.models.doctors import doctors
from app.models.patients import patients
from app.models.payments import payments
from app.models.users import users
from app.schemas.analytics import (
    ActivityItem,
    GrowthFigure,
    GrowthMetrics,
    GrowthPeriod,
    PlatformMetrics,
    TimeSeriesMetric,
    TimeSeriesPoint,
    TopDoctor,
)

COMPLETED_PAYMENT = payments.c.status == "completed"


def growth_rate(current: float, previous: float) -> float:
    """Percentage change; 100 when growing from nothing."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return float(round((current - previous) / previous * 100))


def period_bounds(period: GrowthPeriod, now: datetime) -> tuple[datetime, datetime]:
    """Start of the current and of the previous comparison window."""
    if period == GrowthPeriod.WEEK:
        return now - timedelta(days=7), now - timedelta(days=14)
    current_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    previous_start = (current_start - timedelta(days=1)).replace(day=1)
    return current_start, previous_start


class AnalyticsService:
    """Read-only aggregate queries."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _count(self, table, *conditions) -> int:
        stmt = select(func.count()).select_from(table)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        return (await self.db.execute(stmt)).scalar() or 0

    async def _revenue(self, *conditions) -> float:
        stmt = select(func.coalesce(func.sum(payments.c.amount), 0)).where(
            and_(COMPLETED_PAYMENT, *conditions)
        )
        return float((await self.db.execute(stmt)).scalar() or 0)

    async def get_metrics(self, now: datetime | None = None) -> PlatformMetrics:
        """Headline counters."""
        now = now or utc_now()
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        month_start = today_start.replace(day=1)

        return PlatformMetrics(
            total_users=await self._count(users),
            total_doctors=await self._count(doctors),
            total_patients=await self._count(patients),
            verified_doctors=await self._count(doctors, doctors.c.verification_status == "verified"),
            pending_verifications=await self._count(
                doctors, doctors.c.verification_status == "pending"
            ),
            total_appointments=await self._count(appointments),
            completed_appointments=await self._count(
                appointments, appointments.c.status == "completed"
            ),
            in_progress_appointments=await self._count(
                appointments, appointments.c.status == "in_progress"
            ),
            today_appointments=await self._count(
                appointments,
                appointments.c.scheduled_at >= today_start,
                appointments.c.scheduled_at < today_start + timedelta(days=1),
            ),
            total_revenue=await self._revenue(),
            month_revenue=await self._revenue(payments.c.created_at >= month_start),
            total_articles=await self._count(articles),
            published_articles=await self._count(articles, articles.c.status == "published"),
        )

    async def get_growth(
        self, period: GrowthPeriod = GrowthPeriod.MONTH, now: datetime | None = None
    ) -> GrowthMetrics:
        """Compare the current window with the one before it."""
        now = now or utc_now()
        current_start, previous_start = period_bounds(period, now)

        def window(column, current: bool):
            if current:
                return (column >= current_start,)
            return (column >= previous_start, column < current_start)

        figures = {}
        for name, table in (("users", users), ("appointments", appointments)):
            current = await self._count(table, *window(table.c.created_at, True))
            previous = await self._count(table, *window(table.c.created_at, False))
            figures[name] = GrowthFigure(
                current=current, previous=previous, growth=growth_rate(current, previous)
            )

        current = await self._revenue(*window(payments.c.created_at, True))
        previous = await self._revenue(*window(payments.c.created_at, False))
        figures["revenue"] = GrowthFigure(
            current=current, previous=previous, growth=growth_rate(current, previous)
        )

        return GrowthMetrics(period=period, **figures)

    async def get_activity(self, limit: int = 20) -> list[ActivityItem]:
        """Recent registrations, bookings and payments, newest first."""
        items: list[ActivityItem] = []

        rows = (
            await self.db.execute(
                select(users.c.id, users.c.email, users.c.created_at)
                .order_by(users.c.created_at.desc())
                .limit(limit)
            )
        ).fetchall()
        items += [
            ActivityItem(
                type="registration",
                id=row.id,
                description=f"New user registered: {row.email}",
                timestamp=as_utc(row.created_at),
            )
            for row in rows
        ]

        rows = (
            await self.db.execute(
                select(appointments.c.id, appointments.c.status, appointments.c.created_at)
                .order_by(appointments.c.created_at.desc())
                .limit(limit)
            )
        ).fetchall()
        items += [
            ActivityItem(
                type="appointment",
                id=row.id,
                description=f"Appointment {row.status}: {row.id[-6:]}",
                timestamp=as_utc(row.created_at),
            )
            for row in rows
        ]

        rows = (
            await self.db.execute(
                select(payments.c.id, payments.c.amount, payments.c.currency, payments.c.created_at)
                .where(COMPLETED_PAYMENT)
                .order_by(payments.c.created_at.desc())
                .limit(limit)
            )
        ).fetchall()
        items += [
            ActivityItem(
                type="payment",
                id=row.id,
                description=f"Payment received: {row.currency} {float(row.amount):,.2f}",
                timestamp=as_utc(row.created_at),
            )
            for row in rows
        ]

        items.sort(key=lambda item: item.timestamp, reverse=True)
        return items[:limit]

    async def get_timeseries(
        self, metric: TimeSeriesMetric, days: int = 30, now: datetime | None = None
    ) -> list[TimeSeriesPoint]:
        """One value per UTC day, oldest first, ending today."""
        now = now or utc_now()
        today = datetime(now.year, now.month, now.day, tzinfo=UTC)

        points = []
        for offset in range(days - 1, -1, -1):
            day_start = today - timedelta(days=offset)
            day_end = day_start + timedelta(days=1)
            if metric == TimeSeriesMetric.REVENUE:
                value = await self._revenue(
                    payments.c.created_at >= day_start, payments.c.created_at < day_end
                )
            else:
                table = users if metric == TimeSeriesMetric.USERS else appointments
                value = await self._count(
                    table, table.c.created_at >= day_start, table.c.created_at < day_end
                )
            points.append(TimeSeriesPoint(day=day_start.date(), value=value))
        return points

    async def get_top_doctors(self, limit: int = 10) -> list[TopDoctor]:
        """Doctors ranked by number of appointments."""
        appointment_counts = (
            select(
                appointments.c.doctor_id,
                func.count(appointments.c.id).label("appointment_count"),
            )
            .group_by(appointments.c.doctor_id)
            .subquery()
        )
        revenue = (
            select(
                appointments.c.doctor_id,
                func.sum(payments.c.amount).label("revenue"),
            )
            .join(payments, payments.c.appointment_id == appointments.c.id)
            .where(COMPLETED_PAYMENT)
            .group_by(appointments.c.doctor_id)
            .subquery()
        )

        stmt = (
            select(
                doctors.c.id,
                doctors.c.first_name,
                doctors.c.last_name,
                doctors.c.average_rating,
                func.coalesce(appointment_counts.c.appointment_count, 0).label("appointments"),
                func.coalesce(revenue.c.revenue, 0).label("revenue"),
            )
            .select_from(
                doctors.outerjoin(
                    appointment_counts, appointment_counts.c.doctor_id == doctors.c.id
                ).outerjoin(revenue, revenue.c.doctor_id == doctors.c.id)
            )
            .order_by(
                func.coalesce(appointment_counts.c.appointment_count, 0).desc(),
                doctors.c.last_name,
            )
            .limit(limit)
        )
        rows = (await self.db.execute(stmt)).fetchall()
        return [
            TopDoctor(
                doctor_id=row.id,
                name=f"Dr. {row.first_name} {row.last_name}",
                appointments=row.appointments,
                revenue=float(row.revenue or 0),
                average_rating=float(row.average_rating or 0),
            )
            for row in rows
        ]
