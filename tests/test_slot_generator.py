"""Tests for bookable slot generation."""

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

from app.schemas.appointments import ConsultationType
from app.services.slot_generator import Booking, Window, generate_slots, weekday_index

NAIROBI = ZoneInfo("Africa/Nairobi")
MONDAY = date(2030, 1, 7)
NOW = datetime(2030, 1, 1, tzinfo=UTC)
MORNING = Window(day_of_week=1, start_time=time(9, 0), end_time=time(12, 0))


def starts(slots) -> list[str]:
    return [slot.start.strftime("%H:%M") for slot in slots]


def test_weekday_index_counts_from_sunday() -> None:
    assert weekday_index(date(2030, 1, 6)) == 0
    assert weekday_index(MONDAY) == 1
    assert weekday_index(date(2030, 1, 12)) == 6


def test_window_is_split_into_consecutive_slots() -> None:
    slots = generate_slots(MONDAY, [MORNING], 30, [], NAIROBI, NOW)

    # 09:00-12:00 in Nairobi is 06:00-09:00 UTC
    assert starts(slots) == ["06:00", "06:30", "07:00", "07:30", "08:00", "08:30"]
    assert slots[0].end.strftime("%H:%M") == "06:30"
    assert slots[0].modes == [ConsultationType.IN_PERSON]


def test_windows_for_other_days_are_ignored() -> None:
    tuesday = Window(day_of_week=2, start_time=time(9, 0), end_time=time(12, 0))
    assert generate_slots(MONDAY, [tuesday], 30, [], NAIROBI, NOW) == []


def test_existing_booking_removes_overlapping_slot() -> None:
    booking = Booking(scheduled_at=datetime(2030, 1, 7, 7, 0, tzinfo=UTC), duration_minutes=30)
    slots = generate_slots(MONDAY, [MORNING], 30, [booking], NAIROBI, NOW)

    assert "07:00" not in starts(slots)
    assert len(slots) == 5


def test_buffer_spaces_slots_and_pads_bookings() -> None:
    assert starts(generate_slots(MONDAY, [MORNING], 30, [], NAIROBI, NOW, buffer_minutes=10)) == [
        "06:00",
        "06:40",
        "07:20",
        "08:00",
    ]

    booking = Booking(scheduled_at=datetime(2030, 1, 7, 7, 0, tzinfo=UTC), duration_minutes=30)
    slots = generate_slots(MONDAY, [MORNING], 30, [booking], NAIROBI, NOW, buffer_minutes=10)
    assert starts(slots) == ["06:00", "08:00"]


def test_past_slots_are_dropped() -> None:
    now = datetime(2030, 1, 7, 7, 15, tzinfo=UTC)
    assert starts(generate_slots(MONDAY, [MORNING], 30, [], NAIROBI, now)) == [
        "07:30",
        "08:00",
        "08:30",
    ]


def test_slots_beyond_advance_window_are_dropped() -> None:
    now = datetime(2029, 12, 1, tzinfo=UTC)
    assert generate_slots(MONDAY, [MORNING], 30, [], NAIROBI, now, max_advance_days=30) == []


def test_online_booking_switch() -> None:
    assert generate_slots(MONDAY, [MORNING], 30, [], NAIROBI, NOW, allow_online_booking=False) == []


def test_modes_merge_and_filter() -> None:
    video = Window(
        day_of_week=1,
        start_time=time(10, 0),
        end_time=time(11, 0),
        consultation_mode=ConsultationType.VIDEO.value,
    )
    slots = generate_slots(MONDAY, [MORNING, video], 30, [], NAIROBI, NOW)
    assert len(slots) == 6
    assert slots[2].modes == [ConsultationType.IN_PERSON, ConsultationType.VIDEO]

    video_only = generate_slots(MONDAY, [MORNING, video], 30, [], NAIROBI, NOW, consultation_type="video")
    assert starts(video_only) == ["07:00", "07:30"]


NEW_YORK = ZoneInfo("America/New_York")


def test_spring_forward_window_has_no_duplicate_slots() -> None:
    # 2030-03-10: clocks jump from 02:00 EST to 03:00 EDT
    day = date(2030, 3, 10)
    window = Window(day_of_week=weekday_index(day), start_time=time(1, 0), end_time=time(4, 0))
    slots = generate_slots(day, [window], 30, [], NEW_YORK, NOW, max_advance_days=400)

    # 01:00 EST to 04:00 EDT is two real hours, 06:00-08:00 UTC
    assert starts(slots) == ["06:00", "06:30", "07:00", "07:30"]
    assert slots[-1].end == datetime(2030, 3, 10, 8, 0, tzinfo=UTC)


def test_fall_back_window_keeps_the_repeated_hour() -> None:
    # 2030-11-03: clocks fall back from 02:00 EDT to 01:00 EST
    day = date(2030, 11, 3)
    window = Window(day_of_week=weekday_index(day), start_time=time(0, 0), end_time=time(3, 0))
    slots = generate_slots(day, [window], 60, [], NEW_YORK, NOW, max_advance_days=400)

    # 00:00 EDT to 03:00 EST is four real hours, 04:00-08:00 UTC
    assert starts(slots) == ["04:00", "05:00", "06:00", "07:00"]
