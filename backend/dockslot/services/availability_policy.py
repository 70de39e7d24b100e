"""
Per-captain availability configuration, read-only.

Wraps the queries the slot generator needs so that it never touches the
ORM directly. Every method is a fresh read: nothing is cached between calls.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from ..config import settings
from ..core.errors import NotFoundError
from ..models.availability import AvailabilityWindow, BlackoutDate
from ..models.captain import CaptainProfile


@dataclass(frozen=True)
class CaptainPolicy:
    captain_id: str
    timezone: str
    buffer_minutes: int
    advance_days: int
    hibernating: bool


def policy_from_profile(profile: CaptainProfile) -> CaptainPolicy:
    # An explicit 0 buffer is honoured; only a missing value falls back.
    buffer = profile.booking_buffer_minutes
    advance = profile.advance_booking_days
    return CaptainPolicy(
        captain_id=profile.id,
        timezone=(profile.timezone or "").strip() or settings.DEFAULT_TIMEZONE,
        buffer_minutes=settings.DEFAULT_BUFFER_MINUTES if buffer is None else max(0, buffer),
        advance_days=settings.DEFAULT_ADVANCE_DAYS if not advance else advance,
        hibernating=bool(profile.is_hibernating),
    )


class AvailabilityPolicy:
    def __init__(self, db: Session):
        self.db = db

    def _profile(self, captain_id: str) -> CaptainProfile:
        profile = self.db.get(CaptainProfile, captain_id)
        if not profile:
            raise NotFoundError("Captain not found")
        return profile

    def policy(self, captain_id: str) -> CaptainPolicy:
        return policy_from_profile(self._profile(captain_id))

    def windows_for(self, captain_id: str, weekday: int) -> list[AvailabilityWindow]:
        """Active windows for a weekday (0 = Sunday). Empty means closed."""
        return (
            self.db.query(AvailabilityWindow)
            .filter(
                AvailabilityWindow.owner_id == captain_id,
                AvailabilityWindow.day_of_week == weekday,
                AvailabilityWindow.is_active == True,
            )
            .order_by(AvailabilityWindow.start_time.asc(), AvailabilityWindow.end_time.asc())
            .all()
        )

    def active_weekdays(self, captain_id: str) -> set[int]:
        rows = (
            self.db.query(AvailabilityWindow.day_of_week)
            .filter(AvailabilityWindow.owner_id == captain_id, AvailabilityWindow.is_active == True)
            .distinct()
            .all()
        )
        return {row[0] for row in rows}

    def blackout_for(self, captain_id: str, day: date) -> BlackoutDate | None:
        return (
            self.db.query(BlackoutDate)
            .filter(BlackoutDate.owner_id == captain_id, BlackoutDate.blackout_date == day)
            .first()
        )

    def blackouts_between(self, captain_id: str, start: date, end: date) -> dict[date, str | None]:
        rows = (
            self.db.query(BlackoutDate.blackout_date, BlackoutDate.reason)
            .filter(
                BlackoutDate.owner_id == captain_id,
                BlackoutDate.blackout_date >= start,
                BlackoutDate.blackout_date <= end,
            )
            .all()
        )
        return {row[0]: row[1] for row in rows}
