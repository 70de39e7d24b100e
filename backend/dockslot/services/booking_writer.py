"""
The only code path that persists or moves a booking.

Every write follows the same shape inside one transaction:

    lock the captain row  ->  re-run check_all_conflicts  ->  insert/update  ->  commit

so two guests racing for the same interval are serialized by the store and
the loser gets a ConflictError. On Postgres the exclusion constraint on
`bookings` is a second line; its IntegrityError is mapped to ConflictError
as well.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..core.errors import ConflictError, ForbiddenError, NotFoundError, UnavailableError, ValidationError
from ..core.timewindow import parse_clock
from ..core.timezones import local_clock, to_instant
from ..core.validation import parse_date_str, require_uuid, sanitize
from ..models.booking import Booking, BookingStatus
from ..models.captain import CaptainProfile
from ..models.trip_type import TripType
from .availability_policy import CaptainPolicy, policy_from_profile
from .conflicts import ConflictChecker
from .slots import SlotGenerator

logger = logging.getLogger(__name__)

RESCHEDULABLE = frozenset({BookingStatus.CONFIRMED, BookingStatus.WEATHER_HOLD, BookingStatus.RESCHEDULED})


@dataclass
class NewBooking:
    captain_id: str
    trip_type_id: str
    scheduled_date: str
    scheduled_time: str  # HH:MM, captain-local
    guest_name: str
    guest_email: str
    party_size: int = 1
    guest_phone: str | None = None
    special_requests: str | None = None


class BookingWriter:
    def __init__(self, db: Session, now: datetime | None = None):
        self.db = db
        self.now = now or datetime.now(timezone.utc)

    # -----------------------------------------------------------------
    # transaction plumbing
    # -----------------------------------------------------------------
    def _lock_captain(self, captain_id: str) -> CaptainProfile:
        # FOR UPDATE on Postgres; SQLite serializes writers on its own
        profile = (
            self.db.query(CaptainProfile)
            .filter(CaptainProfile.id == captain_id)
            .with_for_update()
            .first()
        )
        if not profile:
            raise NotFoundError("Captain not found")
        return profile

    def _assert_free(
        self,
        policy: CaptainPolicy,
        start: datetime,
        end: datetime,
        vessel_id: str | None,
        exclude_booking_id: str | None = None,
    ) -> None:
        check = ConflictChecker(self.db).check_all_conflicts(
            policy.captain_id, start, end, policy.buffer_minutes,
            vessel_id=vessel_id, exclude_booking_id=exclude_booking_id,
        )
        if check.has_conflict:
            raise ConflictError(conflicting_ids=[b.id for b in check.conflicting_bookings])

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Store rejected overlapping booking: %s", e.orig)
            raise ConflictError() from e

    # -----------------------------------------------------------------
    # create
    # -----------------------------------------------------------------
    def create_booking(self, data: NewBooking) -> Booking:
        captain_id = require_uuid(data.captain_id, "captain ID")
        trip_type_id = require_uuid(data.trip_type_id, "trip type ID")
        day = parse_date_str(data.scheduled_date)
        clock = parse_clock(data.scheduled_time)
        if clock is None:
            raise ValidationError("Invalid time format")
        guest_name = sanitize(data.guest_name, 100)
        if not guest_name:
            raise ValidationError("Guest name is required")
        if not (1 <= data.party_size <= settings.MAX_PARTY_SIZE):
            raise ValidationError(f"Party size must be between 1 and {settings.MAX_PARTY_SIZE}")

        # Advisory pass: the requested start must be one of the slots a
        # guest would be offered right now (windows, horizon, blackouts).
        offered = SlotGenerator(self.db, now=self.now).get_available_slots(captain_id, trip_type_id, day)
        trip = self.db.get(TripType, trip_type_id)
        start = to_instant(day, clock, offered.captain_timezone)
        if local_clock(start, offered.captain_timezone) != clock:
            raise ValidationError("That local time does not exist on this date")
        end = start + timedelta(hours=trip.duration_hours)
        if not any(s.start == start for s in offered.slots):
            logger.info("Requested start %s for captain %s is not offered", start, captain_id)
            raise ConflictError("Selected time slot is no longer available")

        try:
            profile = self._lock_captain(captain_id)
            policy = policy_from_profile(profile)
            if policy.hibernating:
                raise UnavailableError(kind="hibernating")
            self._assert_free(policy, start, end, trip.vessel_id)

            booking = Booking(
                captain_id=captain_id,
                trip_type_id=trip.id,
                vessel_id=trip.vessel_id,
                guest_name=guest_name,
                guest_email=data.guest_email.strip().lower(),
                guest_phone=(data.guest_phone or "").strip() or None,
                party_size=data.party_size,
                special_requests=sanitize(data.special_requests, 2000),
                scheduled_start=start,
                scheduled_end=end,
                status=BookingStatus.PENDING_DEPOSIT,
            )
            self.db.add(booking)
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Store rejected overlapping booking: %s", e.orig)
            raise ConflictError() from e
        except Exception:
            self.db.rollback()
            raise
        self._commit()
        self.db.refresh(booking)
        logger.info("Booking %s created for captain %s at %s", booking.id, captain_id, start.isoformat())
        return booking

    # -----------------------------------------------------------------
    # captain-side changes
    # -----------------------------------------------------------------
    def _owned_booking(self, captain_id: str, booking_id: str) -> Booking:
        booking = self.db.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.captain_id != captain_id:
            raise ForbiddenError("Not your booking")
        return booking

    def change_status(self, captain_id: str, booking_id: str, new_status: BookingStatus) -> Booking:
        booking = self._owned_booking(captain_id, booking_id)
        current = BookingStatus(booking.status)
        if current.is_terminal:
            raise ValidationError(f"A {current.value} booking can no longer change status")
        if not current.can_transition_to(new_status):
            raise ValidationError(f"Cannot change status from {current.value} to {new_status.value}")

        booking.status = new_status
        self._commit()
        self.db.refresh(booking)
        logger.info("Booking %s: %s -> %s", booking.id, current.value, new_status.value)
        return booking

    def reschedule_booking(self, captain_id: str, booking_id: str, new_date: str | date, new_time: str) -> Booking:
        booking = self._owned_booking(captain_id, booking_id)
        current = BookingStatus(booking.status)
        if current not in RESCHEDULABLE:
            raise ValidationError(f"A {current.value} booking cannot be rescheduled")
        day = parse_date_str(new_date)
        clock = parse_clock(new_time)
        if clock is None:
            raise ValidationError("Invalid time format")

        try:
            profile = self._lock_captain(captain_id)
            policy = policy_from_profile(profile)
            start = to_instant(day, clock, policy.timezone)
            if start < self.now:
                raise ValidationError("Cannot reschedule into the past")
            end = start + (booking.scheduled_end - booking.scheduled_start)
            self._assert_free(policy, start, end, booking.vessel_id, exclude_booking_id=booking.id)

            old_start = booking.scheduled_start
            booking.scheduled_start = start
            booking.scheduled_end = end
            booking.status = BookingStatus.RESCHEDULED
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Store rejected overlapping booking: %s", e.orig)
            raise ConflictError() from e
        except Exception:
            self.db.rollback()
            raise
        self._commit()
        self.db.refresh(booking)
        logger.info("Booking %s rescheduled %s -> %s", booking.id, old_start.isoformat(), start.isoformat())
        return booking
