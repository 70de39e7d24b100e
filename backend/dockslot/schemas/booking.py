from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

from ..models.booking import BookingStatus

# -----------------------------
# GUEST: create / check
# -----------------------------

class BookingCreateIn(BaseModel):
    captain_id: str
    trip_type_id: str
    scheduled_date: str  # YYYY-MM-DD, captain-local
    scheduled_time: str  # HH:MM, captain-local
    guest_name: str
    guest_email: EmailStr
    guest_phone: Optional[str] = None
    party_size: int = Field(1, ge=1)
    special_requests: Optional[str] = None

class BookingCreatedOut(BaseModel):
    booking_id: str
    scheduled_start: datetime
    scheduled_end: datetime
    status: BookingStatus

class ConflictCheckIn(BaseModel):
    captain_id: str
    start: datetime
    end: datetime
    vessel_id: Optional[str] = None
    exclude_booking_id: Optional[str] = None
    # None -> the captain's own buffer
    buffer_minutes: Optional[int] = Field(None, ge=0)

class ConflictingBookingOut(BaseModel):
    """No guest details: the check endpoint is public."""
    id: str
    scheduled_start: datetime
    scheduled_end: datetime
    status: BookingStatus
    class Config:
        from_attributes = True

class ConflictCheckOut(BaseModel):
    has_conflict: bool
    reason: Optional[str] = None
    conflicting_bookings: list[ConflictingBookingOut] = []
    class Config:
        from_attributes = True

# -----------------------------
# CAPTAIN: manage
# -----------------------------

class StatusChangeIn(BaseModel):
    status: BookingStatus

class RescheduleIn(BaseModel):
    scheduled_date: str
    scheduled_time: str

class BookingOut(BaseModel):
    id: str
    captain_id: str
    trip_type_id: Optional[str] = None
    vessel_id: Optional[str] = None
    guest_name: str
    guest_email: str
    guest_phone: Optional[str] = None
    party_size: int
    special_requests: Optional[str] = None
    scheduled_start: datetime
    scheduled_end: datetime
    status: BookingStatus
    class Config:
        from_attributes = True
