"""Periodic jobs, triggered from /ops by an external scheduler."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ..core.errors import TimestampConstructionError
from ..core.timewindow import to_minutes
from ..core.timezones import local_clock, local_today
from ..models.booking import Booking, BookingStatus
from ..models.captain import CaptainProfile
from .availability_policy import policy_from_profile

logger = logging.getLogger(__name__)


def expire_overdue_bookings(db: Session, now: datetime) -> list[str]:
    """Unpaid bookings whose trip has already started free their slot."""
    overdue = (
        db.query(Booking)
        .filter(Booking.status == BookingStatus.PENDING_DEPOSIT, Booking.scheduled_start < now)
        .all()
    )
    for b in overdue:
        b.status = BookingStatus.EXPIRED
    db.commit()

    ids = [b.id for b in overdue]
    if ids:
        logger.info("Expired %d unpaid booking(s): %s", len(ids), ids)
    return ids


def _resume_due(profile: CaptainProfile, now: datetime) -> bool:
    tz = policy_from_profile(profile).timezone
    today = local_today(tz, now)
    if profile.hibernation_end_date > today:
        return False
    if profile.hibernation_end_date < today or profile.hibernation_resume_time is None:
        return True
    return to_minutes(local_clock(now, tz)) >= to_minutes(profile.hibernation_resume_time)


def resume_hibernation(db: Session, now: datetime) -> list[str]:
    """Wake captains whose hibernation end date (and resume time) has passed
    in their own timezone."""
    candidates = (
        db.query(CaptainProfile)
        .filter(CaptainProfile.is_hibernating == True, CaptainProfile.hibernation_end_date.isnot(None))
        .all()
    )
    resumed = []
    for profile in candidates:
        try:
            due = _resume_due(profile, now)
        except TimestampConstructionError:
            logger.warning("Captain %s has an invalid timezone %r, skipping", profile.id, profile.timezone)
            continue
        if not due:
            continue
        profile.is_hibernating = False
        profile.hibernation_end_date = None
        profile.hibernation_resume_time = None
        resumed.append(profile.id)
    db.commit()

    if resumed:
        logger.info("Resumed %d captain(s) from hibernation: %s", len(resumed), resumed)
    return resumed
