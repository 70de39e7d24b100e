"""
Captain-side schedule management: weekly windows, blackout dates, trip
types and the booking-relevant profile settings.

Every method acts on the captain the service was built for; rows owned by
another captain are reported as missing or forbidden, never touched.
"""
from __future__ import annotations

import logging
from datetime import date, time, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..core.errors import DuplicateError, ForbiddenError, NotFoundError, ValidationError
from ..core.timewindow import invalid_departure_times
from ..core.timezones import zone
from ..core.validation import sanitize
from ..models.availability import AvailabilityWindow, BlackoutDate
from ..models.captain import CaptainProfile
from ..models.trip_type import TripType
from ..models.vessel import Vessel

logger = logging.getLogger(__name__)

# Sunday and Tuesday-Saturday, Monday off
DEFAULT_WEEKDAYS = (0, 2, 3, 4, 5, 6)
DEFAULT_OPEN = time(6, 0)
DEFAULT_CLOSE = time(21, 0)

MAX_BUFFER_MINUTES = 24 * 60
MAX_ADVANCE_DAYS = 365
MAX_DURATION_HOURS = 24


class CaptainSchedule:
    def __init__(self, db: Session, captain: CaptainProfile):
        self.db = db
        self.captain = captain

    # -----------------------------------------------------------------
    # profile settings
    # -----------------------------------------------------------------
    def update_settings(self, **fields) -> CaptainProfile:
        """Partial update of timezone, buffer, horizon and hibernation fields."""
        c = self.captain
        # reject bad values before touching the row
        tz = fields.get("timezone")
        if tz is not None:
            tz = tz.strip()
            zone(tz)
        buffer = fields.get("booking_buffer_minutes")
        if buffer is not None and not (0 <= buffer <= MAX_BUFFER_MINUTES):
            raise ValidationError(f"Buffer must be between 0 and {MAX_BUFFER_MINUTES} minutes")
        days = fields.get("advance_booking_days")
        if days is not None and not (1 <= days <= MAX_ADVANCE_DAYS):
            raise ValidationError(f"Advance booking days must be between 1 and {MAX_ADVANCE_DAYS}")

        if tz is not None:
            c.timezone = tz
        if buffer is not None:
            c.booking_buffer_minutes = buffer
        if days is not None:
            c.advance_booking_days = days
        if "is_hibernating" in fields and fields["is_hibernating"] is not None:
            c.is_hibernating = bool(fields["is_hibernating"])
            if not c.is_hibernating:
                c.hibernation_end_date = None
                c.hibernation_resume_time = None
        for key in ("hibernation_end_date", "hibernation_resume_time"):
            if key in fields:
                setattr(c, key, fields[key])
        if "hibernation_message" in fields:
            c.hibernation_message = sanitize(fields["hibernation_message"]) or None

        self.db.commit()
        self.db.refresh(c)
        logger.info("Captain %s settings updated: %s", c.id, sorted(fields))
        return c

    # -----------------------------------------------------------------
    # weekly windows
    # -----------------------------------------------------------------
    def list_windows(self) -> list[AvailabilityWindow]:
        return (
            self.db.query(AvailabilityWindow)
            .filter(AvailabilityWindow.owner_id == self.captain.id)
            .order_by(AvailabilityWindow.day_of_week.asc(), AvailabilityWindow.start_time.asc())
            .all()
        )

    def replace_windows(self, windows) -> list[AvailabilityWindow]:
        """Swap the whole weekly template. Overlapping active windows on
        one weekday are kept; slot generation unions them."""
        rows = []
        for w in windows:
            if not (0 <= w.day_of_week <= 6):
                raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
            if w.is_active and w.end_time <= w.start_time:
                raise ValidationError("Window end must be after start")
            rows.append(
                AvailabilityWindow(
                    owner_id=self.captain.id,
                    day_of_week=w.day_of_week,
                    start_time=w.start_time,
                    end_time=w.end_time,
                    is_active=w.is_active,
                )
            )

        self.db.query(AvailabilityWindow).filter(AvailabilityWindow.owner_id == self.captain.id).delete(
            synchronize_session=False
        )
        self.db.add_all(rows)
        self.db.commit()
        logger.info("Captain %s weekly windows replaced (%d rows)", self.captain.id, len(rows))
        return self.list_windows()

    def create_default_availability(self) -> list[AvailabilityWindow]:
        existing = self.list_windows()
        if existing:
            return existing
        for dow in range(7):
            self.db.add(
                AvailabilityWindow(
                    owner_id=self.captain.id,
                    day_of_week=dow,
                    start_time=DEFAULT_OPEN,
                    end_time=DEFAULT_CLOSE,
                    is_active=dow in DEFAULT_WEEKDAYS,
                )
            )
        self.db.commit()
        logger.info("Default availability created for captain %s", self.captain.id)
        return self.list_windows()

    # -----------------------------------------------------------------
    # blackouts
    # -----------------------------------------------------------------
    def list_blackouts(self, start: date | None = None, end: date | None = None) -> list[BlackoutDate]:
        q = self.db.query(BlackoutDate).filter(BlackoutDate.owner_id == self.captain.id)
        if start:
            q = q.filter(BlackoutDate.blackout_date >= start)
        if end:
            q = q.filter(BlackoutDate.blackout_date <= end)
        return q.order_by(BlackoutDate.blackout_date.asc()).all()

    def create_blackout(self, day: date, reason: str | None = None) -> BlackoutDate:
        row = BlackoutDate(owner_id=self.captain.id, blackout_date=day, reason=sanitize(reason) or None)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError("This date is already blocked") from e
        self.db.refresh(row)
        logger.info("Captain %s blocked %s", self.captain.id, day.isoformat())
        return row

    def create_blackout_range(self, start: date, end: date, reason: str | None = None) -> tuple[list[BlackoutDate], int]:
        """Block every date in [start, end]. Returns (created rows, skipped count)."""
        if end < start:
            raise ValidationError("End date must be on or after start date")
        span = (end - start).days + 1
        if span > settings.MAX_BLACKOUT_RANGE_DAYS:
            raise ValidationError(f"Date range cannot exceed {settings.MAX_BLACKOUT_RANGE_DAYS} days")

        already = {b.blackout_date for b in self.list_blackouts(start, end)}
        clean_reason = sanitize(reason) or None
        rows = [
            BlackoutDate(owner_id=self.captain.id, blackout_date=d, reason=clean_reason)
            for d in (start + timedelta(days=i) for i in range(span))
            if d not in already
        ]
        if not rows:
            raise DuplicateError("All dates in this range are already blocked")

        self.db.add_all(rows)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError("Some dates in this range were blocked concurrently") from e
        logger.info(
            "Captain %s blocked %s..%s (%d new, %d skipped)",
            self.captain.id, start.isoformat(), end.isoformat(), len(rows), len(already),
        )
        return rows, len(already)

    def delete_blackout(self, blackout_id: str) -> None:
        row = self.db.get(BlackoutDate, blackout_id)
        if not row:
            raise NotFoundError("Blackout not found")
        if row.owner_id != self.captain.id:
            raise ForbiddenError("Not your blackout")
        self.db.delete(row)
        self.db.commit()

    # -----------------------------------------------------------------
    # trip types
    # -----------------------------------------------------------------
    def list_trip_types(self, include_inactive: bool = True) -> list[TripType]:
        q = self.db.query(TripType).filter(TripType.owner_id == self.captain.id)
        if not include_inactive:
            q = q.filter(TripType.is_active == True)
        return q.order_by(TripType.title.asc()).all()

    def _check_vessel(self, vessel_id: str | None) -> None:
        if vessel_id is None:
            return
        vessel = self.db.get(Vessel, vessel_id)
        if not vessel or vessel.owner_id != self.captain.id:
            raise ValidationError("Vessel not found")

    @staticmethod
    def _clean_departures(departure_times):
        if not departure_times:
            return None
        bad = invalid_departure_times(departure_times)
        if bad:
            raise ValidationError(f"Invalid departure time(s): {', '.join(bad)}")
        return [d.strip() for d in departure_times]

    @staticmethod
    def _check_duration(hours) -> None:
        if hours is None or not (1 <= hours <= MAX_DURATION_HOURS):
            raise ValidationError(f"Duration must be between 1 and {MAX_DURATION_HOURS} hours")

    def create_trip_type(
        self,
        title: str,
        duration_hours: int,
        departure_times: list[str] | None = None,
        vessel_id: str | None = None,
        description: str | None = None,
        price_total_cents: int = 0,
        deposit_cents: int = 0,
    ) -> TripType:
        title = sanitize(title, 200)
        if not title:
            raise ValidationError("Title is required")
        self._check_duration(duration_hours)
        self._check_vessel(vessel_id)
        if deposit_cents > price_total_cents:
            raise ValidationError("Deposit cannot exceed the total price")

        trip = TripType(
            owner_id=self.captain.id,
            vessel_id=vessel_id,
            title=title,
            description=sanitize(description, 2000) or None,
            duration_hours=duration_hours,
            departure_times=self._clean_departures(departure_times),
            price_total_cents=price_total_cents,
            deposit_cents=deposit_cents,
        )
        self.db.add(trip)
        self.db.commit()
        self.db.refresh(trip)
        logger.info("Captain %s created trip type %s", self.captain.id, trip.id)
        return trip

    def update_trip_type(self, trip_type_id: str, **fields) -> TripType:
        trip = self.db.get(TripType, trip_type_id)
        if not trip:
            raise NotFoundError("Trip type not found")
        if trip.owner_id != self.captain.id:
            raise ForbiddenError("Not your trip type")
        try:
            self._apply_trip_fields(trip, fields)
        except ValidationError:
            self.db.rollback()
            raise

        self.db.commit()
        self.db.refresh(trip)
        return trip

    def _apply_trip_fields(self, trip: TripType, fields: dict) -> None:
        if "title" in fields and fields["title"] is not None:
            title = sanitize(fields["title"], 200)
            if not title:
                raise ValidationError("Title is required")
            trip.title = title
        if "duration_hours" in fields and fields["duration_hours"] is not None:
            self._check_duration(fields["duration_hours"])
            trip.duration_hours = fields["duration_hours"]
        if "departure_times" in fields:
            trip.departure_times = self._clean_departures(fields["departure_times"])
        if "vessel_id" in fields:
            self._check_vessel(fields["vessel_id"])
            trip.vessel_id = fields["vessel_id"]
        if "description" in fields:
            trip.description = sanitize(fields["description"], 2000) or None
        for key in ("price_total_cents", "deposit_cents", "is_active"):
            if key in fields and fields[key] is not None:
                setattr(trip, key, fields[key])
        if trip.deposit_cents > trip.price_total_cents:
            raise ValidationError("Deposit cannot exceed the total price")
