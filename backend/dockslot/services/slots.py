"""
Bookable slot computation.

get_available_slots
    Exact answer for one date: every start time of a trip type that fits an
    active weekly window, is not blacked out, past or beyond the horizon,
    starts at least `buffer` minutes from now and keeps `buffer` minutes
    away from every active booking.

get_date_range_availability
    Cheap calendar overview: only weekday windows and blackout dates are
    consulted (no bookings, no same-day cutoff).

get_month_availability
    One call per bookable day of a month, for month-at-a-glance pickers.

Results are advisory and recomputed on every call. The booking writer
re-checks conflicts inside its own transaction.
"""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from ..config import settings
from ..core.errors import NotFoundError, UnavailableError
from ..core.overlap import intervals_conflict
from ..core.timewindow import candidate_starts
from ..core.timezones import js_weekday, local_clock, local_today, to_instant
from ..core.validation import parse_date_str, parse_month_str, require_uuid
from ..models.trip_type import TripType
from .availability_policy import AvailabilityPolicy, CaptainPolicy
from .conflicts import active_bookings_near

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Slot:
    start: datetime
    end: datetime


@dataclass
class DateAvailabilitySummary:
    date: date
    day_of_week: int
    has_availability: bool = False
    is_blackout: bool = False
    blackout_reason: str | None = None
    is_past: bool = False
    is_beyond_advance_window: bool = False
    has_active_window: bool = False


@dataclass
class SlotsResult:
    date: date
    captain_timezone: str
    slots: list[Slot]
    date_info: DateAvailabilitySummary


@dataclass
class DateRangeResult:
    captain_timezone: str
    dates: list[DateAvailabilitySummary] = field(default_factory=list)


@dataclass
class MonthResult:
    month: str
    captain_timezone: str
    availability: dict[date, list[Slot]] = field(default_factory=dict)


class SlotGenerator:
    def __init__(self, db: Session, now: datetime | None = None):
        self.db = db
        self.policies = AvailabilityPolicy(db)
        self.now = now or datetime.now(timezone.utc)

    # -----------------------------------------------------------------
    # helpers
    # -----------------------------------------------------------------
    def _open_policy(self, captain_id: str) -> CaptainPolicy:
        policy = self.policies.policy(captain_id)
        if policy.hibernating:
            raise UnavailableError(kind="hibernating")
        return policy

    def _trip_type(self, captain_id: str, trip_type_id: str) -> TripType:
        trip = (
            self.db.query(TripType)
            .filter(TripType.id == trip_type_id, TripType.owner_id == captain_id, TripType.is_active == True)
            .first()
        )
        if not trip:
            raise NotFoundError("Trip type not found")
        return trip

    def _compute(self, policy: CaptainPolicy, trip: TripType, day: date) -> SlotsResult:
        tz = policy.timezone
        today = local_today(tz, self.now)
        info = DateAvailabilitySummary(date=day, day_of_week=js_weekday(day))
        result = SlotsResult(date=day, captain_timezone=tz, slots=[], date_info=info)

        if day < today:
            info.is_past = True
            return result
        if day > today + timedelta(days=policy.advance_days):
            info.is_beyond_advance_window = True
            return result

        blackout = self.policies.blackout_for(policy.captain_id, day)
        if blackout:
            info.is_blackout = True
            info.blackout_reason = blackout.reason
            return result

        windows = self.policies.windows_for(policy.captain_id, info.day_of_week)
        if not windows:
            return result
        info.has_active_window = True

        day_start = to_instant(day, (0, 0), tz)
        day_end = to_instant(day + timedelta(days=1), (0, 0), tz)
        bookings = active_bookings_near(
            self.db, policy.captain_id, day_start, day_end, policy.buffer_minutes, vessel_id=trip.vessel_id
        )

        earliest = self.now + timedelta(minutes=policy.buffer_minutes)
        duration = timedelta(hours=trip.duration_hours)
        found: set[Slot] = set()
        for w in windows:
            window_end = to_instant(day, w.end_time, tz)
            for clock in candidate_starts(
                w.start_time, w.end_time, trip.duration_hours,
                departure_times=trip.departure_times,
                step_minutes=settings.SLOT_STEP_MINUTES,
            ):
                start = to_instant(day, clock, tz)
                # local times inside a spring-forward gap do not exist that day
                if local_clock(start, tz) != clock:
                    continue
                end = start + duration
                if end > window_end or start < earliest:
                    continue
                if any(
                    intervals_conflict(start, end, b.scheduled_start, b.scheduled_end, policy.buffer_minutes)
                    for b in bookings
                ):
                    continue
                found.add(Slot(start=start, end=end))

        result.slots = sorted(found)
        info.has_availability = bool(result.slots)
        return result

    # -----------------------------------------------------------------
    # public operations
    # -----------------------------------------------------------------
    def get_available_slots(self, captain_id: str, trip_type_id: str, day: str | date) -> SlotsResult:
        captain_id = require_uuid(captain_id, "captain ID")
        trip_type_id = require_uuid(trip_type_id, "trip type ID")
        requested = parse_date_str(day)

        policy = self._open_policy(captain_id)
        trip = self._trip_type(captain_id, trip_type_id)
        return self._compute(policy, trip, requested)

    def get_date_range_availability(self, captain_id: str, days: int = 60) -> DateRangeResult:
        captain_id = require_uuid(captain_id, "captain ID")
        policy = self._open_policy(captain_id)

        max_days = max(0, min(int(days), policy.advance_days))
        today = local_today(policy.timezone, self.now)
        last = today + timedelta(days=max_days)
        weekdays = self.policies.active_weekdays(captain_id)
        blackouts = self.policies.blackouts_between(captain_id, today, last)

        out = DateRangeResult(captain_timezone=policy.timezone)
        for offset in range(max_days + 1):
            d = today + timedelta(days=offset)
            dow = js_weekday(d)
            is_blackout = d in blackouts
            has_window = dow in weekdays
            out.dates.append(
                DateAvailabilitySummary(
                    date=d,
                    day_of_week=dow,
                    has_availability=has_window and not is_blackout,
                    is_blackout=is_blackout,
                    blackout_reason=blackouts.get(d),
                    has_active_window=has_window,
                )
            )
        return out

    def get_month_availability(self, captain_id: str, trip_type_id: str, month: str) -> MonthResult:
        captain_id = require_uuid(captain_id, "captain ID")
        trip_type_id = require_uuid(trip_type_id, "trip type ID")
        first = parse_month_str(month)

        policy = self._open_policy(captain_id)
        trip = self._trip_type(captain_id, trip_type_id)

        out = MonthResult(month=month, captain_timezone=policy.timezone)
        _, n_days = calendar.monthrange(first.year, first.month)
        for i in range(n_days):
            res = self._compute(policy, trip, first + timedelta(days=i))
            if res.date_info.has_active_window:
                out.availability[res.date] = res.slots
        return out
