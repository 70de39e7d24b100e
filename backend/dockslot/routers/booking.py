from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.errors import ValidationError
from ..core.validation import require_uuid
from ..database import get_db
from ..deps import get_current_captain, get_now
from ..models.booking import Booking
from ..models.captain import CaptainProfile
from ..models.vessel import Vessel
from ..schemas.booking import (
    BookingCreatedOut,
    BookingCreateIn,
    BookingOut,
    ConflictCheckIn,
    ConflictCheckOut,
    ConflictingBookingOut,
    RescheduleIn,
    StatusChangeIn,
)
from ..services.availability_policy import AvailabilityPolicy
from ..services.booking_writer import BookingWriter, NewBooking
from ..services.conflicts import ConflictChecker

router = APIRouter(prefix="/bookings", tags=["bookings"])


# -----------------------------------------------------------------------------
# GUEST
# -----------------------------------------------------------------------------
@router.post("", response_model=BookingCreatedOut, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreateIn,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    booking = BookingWriter(db, now=now).create_booking(NewBooking(**payload.model_dump()))
    return BookingCreatedOut(
        booking_id=booking.id,
        scheduled_start=booking.scheduled_start,
        scheduled_end=booking.scheduled_end,
        status=booking.status,
    )


@router.post("/check-conflicts", response_model=ConflictCheckOut)
def check_conflicts(payload: ConflictCheckIn, db: Session = Depends(get_db)):
    captain_id = require_uuid(payload.captain_id, "captain ID")
    buffer = payload.buffer_minutes
    if buffer is None:
        buffer = AvailabilityPolicy(db).policy(captain_id).buffer_minutes
    if payload.vessel_id is not None:
        vessel = db.get(Vessel, payload.vessel_id)
        if not vessel or vessel.owner_id != captain_id:
            raise ValidationError("Vessel not found")
    result = ConflictChecker(db).check_all_conflicts(
        captain_id,
        payload.start,
        payload.end,
        buffer,
        vessel_id=payload.vessel_id,
        exclude_booking_id=payload.exclude_booking_id,
    )
    return ConflictCheckOut(
        has_conflict=result.has_conflict,
        reason=result.reason,
        conflicting_bookings=[ConflictingBookingOut.model_validate(b) for b in result.conflicting_bookings],
    )


# -----------------------------------------------------------------------------
# CAPTAIN
# -----------------------------------------------------------------------------
@router.get("", response_model=list[BookingOut])
def my_bookings(
    upcoming: bool = True,
    db: Session = Depends(get_db),
    me: CaptainProfile = Depends(get_current_captain),
    now: datetime = Depends(get_now),
):
    q = db.query(Booking).filter(Booking.captain_id == me.id)
    if upcoming:
        q = q.filter(Booking.scheduled_end >= now)
    return q.order_by(Booking.scheduled_start.asc()).all()


@router.post("/{booking_id}/status", response_model=BookingOut)
def change_status(
    booking_id: str,
    payload: StatusChangeIn,
    db: Session = Depends(get_db),
    me: CaptainProfile = Depends(get_current_captain),
    now: datetime = Depends(get_now),
):
    return BookingWriter(db, now=now).change_status(me.id, booking_id, payload.status)


@router.post("/{booking_id}/reschedule", response_model=BookingOut)
def reschedule(
    booking_id: str,
    payload: RescheduleIn,
    db: Session = Depends(get_db),
    me: CaptainProfile = Depends(get_current_captain),
    now: datetime = Depends(get_now),
):
    return BookingWriter(db, now=now).reschedule_booking(
        me.id, booking_id, payload.scheduled_date, payload.scheduled_time
    )
