"""Bookable slot generation.

Slots are derived on demand from a doctor's weekly windows and existing
bookings; nothing here touches the database.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from app.schemas.appointments import ConsultationType, TimeSlot


@dataclass(frozen=True)
class Window:
    """A weekly availability window in clinic-local time."""

    day_of_week: int
    start_time: time
    end_time: time
    consultation_mode: str = ConsultationType.IN_PERSON.value


@dataclass(frozen=True)
class Booking:
    """An active appointment occupying part of the day."""

    scheduled_at: datetime
    duration_minutes: int


def weekday_index(day: date) -> int:
    """Day of week counting from Sunday = 0."""
    return (day.weekday() + 1) % 7


def generate_slots(
    day: date,
    windows: Iterable[Window],
    duration_minutes: int,
    bookings: Iterable[Booking],
    tz: ZoneInfo,
    now: datetime,
    buffer_minutes: int = 0,
    max_advance_days: int = 30,
    allow_online_booking: bool = True,
    consultation_type: str | None = None,
) -> list[TimeSlot]:
    """
    Build the free slots of one local day.

    Args:
        day: Local calendar date in ``tz``
        windows: Weekly windows; those for other weekdays are ignored
        duration_minutes: Length of one consultation
        bookings: Active appointments that block time
        tz: Clinic time zone the windows are expressed in
        now: Current instant (aware)
        buffer_minutes: Gap kept after each slot and around each booking
        max_advance_days: How far ahead booking is allowed
        allow_online_booking: Clinic switch; False yields no slots
        consultation_type: Keep only slots offering this mode

    Returns:
        Slots sorted by start, times in UTC
    """
    if not allow_online_booking or duration_minutes <= 0:
        return []

    duration = timedelta(minutes=duration_minutes)
    buffer = timedelta(minutes=max(buffer_minutes, 0))
    step = duration + buffer
    horizon = now + timedelta(days=max_advance_days)
    weekday = weekday_index(day)

    busy = [
        (
            b.scheduled_at - buffer,
            b.scheduled_at + timedelta(minutes=b.duration_minutes) + buffer,
        )
        for b in bookings
    ]

    by_start: dict[datetime, set[str]] = {}
    for window in windows:
        if window.day_of_week != weekday:
            continue

        # Bounds are localized once; stepping happens in UTC across DST changes
        cursor = datetime.combine(day, window.start_time, tzinfo=tz).astimezone(UTC)
        window_end = datetime.combine(day, window.end_time, tzinfo=tz).astimezone(UTC)
        while cursor + duration <= window_end:
            start = cursor
            end = start + duration
            cursor += step

            if start <= now or start > horizon:
                continue
            if any(start < busy_end and end > busy_start for busy_start, busy_end in busy):
                continue
            by_start.setdefault(start, set()).add(window.consultation_mode)

    slots = []
    for start in sorted(by_start):
        modes = by_start[start]
        if consultation_type and consultation_type not in modes:
            continue
        slots.append(
            TimeSlot(
                start=start,
                end=start + duration,
                modes=[ConsultationType(mode) for mode in sorted(modes)],
            )
        )
    return slots
