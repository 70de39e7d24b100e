from datetime import date, time, timedelta

import pytest

from conftest import MONDAY, NOW, utc
from dockslot.core.errors import NotFoundError, UnavailableError, ValidationError
from dockslot.core.timezones import local_clock
from dockslot.models.availability import BlackoutDate
from dockslot.models.booking import BookingStatus
from dockslot.services.conflicts import ConflictChecker
from dockslot.services.slots import SlotGenerator

SUN, MON = 0, 1


def starts(result):
    return [s.start for s in result.slots]


def test_buffer_around_confirmed_booking_blocks_whole_window(db, captain, add_window, make_trip, add_booking):
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain, duration_hours=4)
    # 08:00-12:00 local
    add_booking(captain, utc(2026, 6, 1, 12, 0), utc(2026, 6, 1, 16, 0))

    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY)

    assert res.slots == []
    assert res.captain_timezone == "America/New_York"
    assert res.date_info.has_active_window
    assert not res.date_info.has_availability


def test_departure_times_inside_window(db, captain, add_window, make_trip):
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain, duration_hours=3, departure_times=["6:00 AM", "10:00 AM", "12:00 PM"])

    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY)

    assert starts(res) == [utc(2026, 6, 1, 10, 0), utc(2026, 6, 1, 14, 0)]
    assert all(s.end - s.start == timedelta(hours=3) for s in res.slots)


def test_same_day_cutoff_respects_buffer(db, captain, add_window, make_trip):
    add_window(captain, MON, time(6, 0), time(21, 0))
    trip = make_trip(captain, duration_hours=2)
    now = utc(2026, 6, 1, 17, 0)  # 13:00 local

    res = SlotGenerator(db, now=now).get_available_slots(captain.id, trip.id, MONDAY)

    # nothing before 14:00 local; last start 19:00 so the trip ends by 21:00
    assert starts(res)[0] == utc(2026, 6, 1, 18, 0)
    assert starts(res)[-1] == utc(2026, 6, 1, 23, 0)
    assert len(res.slots) == 11


def test_zero_buffer_is_honoured(db, make_captain, add_window, make_trip, add_booking):
    captain = make_captain(booking_buffer_minutes=0)
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain, duration_hours=4)
    add_booking(captain, utc(2026, 6, 1, 10, 0), utc(2026, 6, 1, 14, 0))  # 06:00-10:00 local

    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY)

    assert starts(res) == [utc(2026, 6, 1, 14, 0)]  # 10:00 local, back to back


def test_missing_buffer_and_horizon_fall_back_to_defaults(db, make_captain, add_window, make_trip, add_booking):
    captain = make_captain(booking_buffer_minutes=None, advance_booking_days=None)
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain, duration_hours=4)
    add_booking(captain, utc(2026, 6, 1, 10, 0), utc(2026, 6, 1, 14, 0))

    gen = SlotGenerator(db, now=NOW)
    assert gen.get_available_slots(captain.id, trip.id, MONDAY).slots == []
    assert gen.get_available_slots(captain.id, trip.id, "2026-07-24").date_info.is_beyond_advance_window is False
    assert gen.get_available_slots(captain.id, trip.id, "2026-07-25").date_info.is_beyond_advance_window


def test_inactive_bookings_do_not_block(db, captain, add_window, make_trip, add_booking):
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain, duration_hours=4)
    for status in (BookingStatus.CANCELLED, BookingStatus.EXPIRED, BookingStatus.NO_SHOW):
        add_booking(captain, utc(2026, 6, 1, 12, 0), utc(2026, 6, 1, 16, 0), status=status)

    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY)

    assert starts(res)[0] == utc(2026, 6, 1, 10, 0)
    assert len(res.slots) == 9


def test_weather_hold_still_blocks(db, captain, add_window, make_trip, add_booking):
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain, duration_hours=4)
    add_booking(captain, utc(2026, 6, 1, 12, 0), utc(2026, 6, 1, 16, 0), status=BookingStatus.WEATHER_HOLD)

    assert SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY).slots == []


def test_vessel_booked_by_another_captain_blocks(db, make_captain, add_window, make_trip, make_vessel, add_booking):
    owner = make_captain()
    partner = make_captain(business_name="Shared Boat Co")
    boat = make_vessel(owner)
    add_window(owner, MON, time(6, 0), time(14, 0))
    trip = make_trip(owner, duration_hours=4, vessel=boat)
    add_booking(partner, utc(2026, 6, 1, 12, 0), utc(2026, 6, 1, 16, 0), vessel=boat)

    assert SlotGenerator(db, now=NOW).get_available_slots(owner.id, trip.id, MONDAY).slots == []


def test_overlapping_windows_are_unioned(db, captain, add_window, make_trip):
    add_window(captain, MON, time(6, 0), time(10, 0))
    add_window(captain, MON, time(8, 0), time(12, 0))
    trip = make_trip(captain, duration_hours=4)

    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY)

    assert starts(res) == [utc(2026, 6, 1, 10, 0), utc(2026, 6, 1, 12, 0)]
    assert res.slots == sorted(res.slots)


def test_past_and_closed_days(db, captain, add_window, make_trip):
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain)
    gen = SlotGenerator(db, now=NOW)

    past = gen.get_available_slots(captain.id, trip.id, "2026-05-24")
    assert past.date_info.is_past and past.slots == []

    tuesday = gen.get_available_slots(captain.id, trip.id, "2026-06-02")
    assert tuesday.slots == []
    assert not tuesday.date_info.has_active_window


def test_inactive_window_is_ignored(db, captain, add_window, make_trip):
    add_window(captain, MON, time(6, 0), time(14, 0), is_active=False)
    trip = make_trip(captain)

    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY)
    assert res.slots == [] and not res.date_info.has_active_window


def test_blackout_reason_is_echoed(db, captain, add_window, make_trip):
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain)
    db.add(BlackoutDate(owner_id=captain.id, blackout_date=date(2026, 6, 1), reason="Tournament"))
    db.commit()

    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY)

    assert res.slots == []
    assert res.date_info.is_blackout
    assert res.date_info.blackout_reason == "Tournament"


def test_hibernating_captain_is_unavailable(db, make_captain, add_window, make_trip):
    captain = make_captain(is_hibernating=True)
    add_window(captain, MON)
    trip = make_trip(captain)
    gen = SlotGenerator(db, now=NOW)

    with pytest.raises(UnavailableError) as exc:
        gen.get_available_slots(captain.id, trip.id, MONDAY)
    assert exc.value.kind == "hibernating"
    with pytest.raises(UnavailableError):
        gen.get_date_range_availability(captain.id)


def test_lookup_errors(db, captain, make_captain, make_trip):
    other = make_captain()
    foreign_trip = make_trip(other)
    gen = SlotGenerator(db, now=NOW)

    with pytest.raises(ValidationError):
        gen.get_available_slots("nope", foreign_trip.id, MONDAY)
    with pytest.raises(ValidationError):
        gen.get_available_slots(captain.id, foreign_trip.id, "06/01/2026")
    with pytest.raises(NotFoundError):
        gen.get_available_slots(captain.id, foreign_trip.id, MONDAY)
    with pytest.raises(NotFoundError):
        gen.get_available_slots("00000000-0000-0000-0000-000000000000", foreign_trip.id, MONDAY)


def test_repeated_calls_agree(db, captain, add_window, make_trip, add_booking):
    add_window(captain, MON, time(6, 0), time(21, 0))
    trip = make_trip(captain, duration_hours=2)
    add_booking(captain, utc(2026, 6, 1, 14, 0), utc(2026, 6, 1, 16, 0))
    gen = SlotGenerator(db, now=NOW)

    first = gen.get_available_slots(captain.id, trip.id, MONDAY)
    second = gen.get_available_slots(captain.id, trip.id, MONDAY)
    assert first.slots == second.slots


def test_date_range_is_clamped_to_horizon(db, make_captain, add_window):
    captain = make_captain(advance_booking_days=10)
    add_window(captain, MON)
    gen = SlotGenerator(db, now=NOW)

    res = gen.get_date_range_availability(captain.id, days=90)
    assert len(res.dates) == 11
    assert res.dates[0].date == date(2026, 5, 25)
    assert res.dates[-1].date == date(2026, 6, 4)

    assert len(gen.get_date_range_availability(captain.id, days=0).dates) == 1
    assert len(gen.get_date_range_availability(captain.id, days=-5).dates) == 1


def test_date_range_marks_windows_and_blackouts(db, captain, add_window):
    add_window(captain, MON)
    db.add(BlackoutDate(owner_id=captain.id, blackout_date=date(2026, 6, 1), reason="Haul-out"))
    db.commit()

    res = SlotGenerator(db, now=NOW).get_date_range_availability(captain.id, days=14)
    by_date = {d.date: d for d in res.dates}

    assert by_date[date(2026, 5, 25)].has_availability
    assert not by_date[date(2026, 5, 26)].has_availability
    june1 = by_date[date(2026, 6, 1)]
    assert june1.is_blackout and june1.blackout_reason == "Haul-out"
    assert not june1.has_availability


def test_month_lists_days_with_windows(db, captain, add_window, make_trip):
    add_window(captain, MON, time(6, 0), time(14, 0))
    trip = make_trip(captain, duration_hours=4)

    res = SlotGenerator(db, now=NOW).get_month_availability(captain.id, trip.id, "2026-06")

    assert sorted(res.availability) == [date(2026, 6, d) for d in (1, 8, 15, 22, 29)]
    assert len(res.availability[date(2026, 6, 1)]) == 9


def test_every_offered_slot_passes_the_conflict_check(db, captain, add_window, make_trip, make_vessel, add_booking):
    boat = make_vessel(captain)
    add_window(captain, MON, time(6, 0), time(21, 0))
    trip = make_trip(captain, duration_hours=2, vessel=boat)
    add_booking(captain, utc(2026, 6, 1, 14, 0), utc(2026, 6, 1, 16, 0), vessel=boat)  # 10:00-12:00 local

    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, MONDAY)

    assert res.slots
    checker = ConflictChecker(db)
    for s in res.slots:
        check = checker.check_all_conflicts(captain.id, s.start, s.end, 60, vessel_id=trip.vessel_id)
        assert check.has_conflict is False, s
    # the buffer keeps 09:00-13:00 local clear
    assert all(s.end <= utc(2026, 6, 1, 13, 0) or s.start >= utc(2026, 6, 1, 17, 0) for s in res.slots)


def test_spring_forward_keeps_slots_inside_the_window(db, make_captain, add_window, make_trip):
    captain = make_captain(booking_buffer_minutes=0, advance_booking_days=365)
    add_window(captain, SUN, time(0, 0), time(6, 30))
    trip = make_trip(captain, duration_hours=4)

    # 2027-03-14: 02:00-03:00 does not exist in New York
    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, "2027-03-14")

    assert [local_clock(s.start, "America/New_York") for s in res.slots] == [(0, 0), (0, 30), (1, 0), (1, 30)]
    window_end = utc(2027, 3, 14, 10, 30)  # 06:30 EDT
    assert all(s.end <= window_end for s in res.slots)
    assert all(s.end - s.start == timedelta(hours=4) for s in res.slots)


def test_fall_back_slots_keep_their_real_duration(db, make_captain, add_window, make_trip):
    captain = make_captain(booking_buffer_minutes=0, advance_booking_days=365)
    add_window(captain, SUN, time(0, 0), time(4, 0))
    trip = make_trip(captain, duration_hours=2)

    # 2026-11-01: 01:00-02:00 happens twice in New York
    res = SlotGenerator(db, now=NOW).get_available_slots(captain.id, trip.id, "2026-11-01")

    assert starts(res) == [
        utc(2026, 11, 1, 4, 0),
        utc(2026, 11, 1, 4, 30),
        utc(2026, 11, 1, 5, 0),
        utc(2026, 11, 1, 5, 30),
        utc(2026, 11, 1, 7, 0),
    ]
    assert all(s.end - s.start == timedelta(hours=2) for s in res.slots)
    assert all(s.end <= utc(2026, 11, 1, 9, 0) for s in res.slots)
