"""
Booking conflict detection.

The same query (`active_bookings_near`) and the same predicate
(`core.overlap.intervals_conflict`) back both the advisory read path and
the authoritative check the booking writer runs inside its transaction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..core.errors import ValidationError
from ..core.overlap import buffered_bounds, intervals_conflict
from ..core.timezones import ensure_utc
from ..models.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)


@dataclass
class ConflictResult:
    has_conflict: bool
    reason: str | None = None
    conflicting_bookings: list[Booking] = field(default_factory=list)


def active_bookings_near(
    db: Session,
    captain_id: str,
    start: datetime,
    end: datetime,
    buffer_minutes: int,
    vessel_id: str | None = None,
    exclude_booking_id: str | None = None,
) -> list[Booking]:
    """Active bookings of the captain (or on the vessel) that could touch
    [start - buffer, end + buffer]. Coarse filter only: callers still apply
    the predicate."""
    lo, hi = buffered_bounds(ensure_utc(start), ensure_utc(end), buffer_minutes)
    scope = Booking.captain_id == captain_id
    if vessel_id:
        scope = or_(scope, Booking.vessel_id == vessel_id)
    q = db.query(Booking).filter(
        scope,
        Booking.status.in_([s for s in BookingStatus if s.is_active]),
        Booking.scheduled_start < hi,
        Booking.scheduled_end > lo,
    )
    if exclude_booking_id:
        q = q.filter(Booking.id != exclude_booking_id)
    return q.order_by(Booking.scheduled_start.asc(), Booking.id.asc()).all()


class ConflictChecker:
    def __init__(self, db: Session):
        self.db = db

    def check_all_conflicts(
        self,
        captain_id: str,
        start: datetime,
        end: datetime,
        buffer_minutes: int,
        vessel_id: str | None = None,
        exclude_booking_id: str | None = None,
    ) -> ConflictResult:
        """Every active booking that collides with [start, end] under the buffer."""
        start, end = ensure_utc(start), ensure_utc(end)
        if end <= start:
            raise ValidationError("End must be after start")
        if buffer_minutes < 0:
            raise ValidationError("Buffer must not be negative")

        candidates = active_bookings_near(
            self.db, captain_id, start, end, buffer_minutes,
            vessel_id=vessel_id, exclude_booking_id=exclude_booking_id,
        )
        conflicting = [
            b for b in candidates
            if intervals_conflict(start, end, b.scheduled_start, b.scheduled_end, buffer_minutes)
        ]
        if not conflicting:
            return ConflictResult(has_conflict=False)

        n = len(conflicting)
        reason = f"Conflicts with {n} existing booking{'s' if n > 1 else ''}"
        if buffer_minutes:
            reason += f" ({buffer_minutes} min buffer required)"
        logger.info("Conflict for captain %s at %s-%s: %s", captain_id, start, end, [b.id for b in conflicting])
        return ConflictResult(has_conflict=True, reason=reason, conflicting_bookings=conflicting)
