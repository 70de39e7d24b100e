from __future__ import annotations
from pydantic import BaseModel, Field
from datetime import date, time
from typing import Optional

# -----------------------------
# CAPTAIN SETTINGS
# -----------------------------

class CaptainSettingsIn(BaseModel):
    timezone: Optional[str] = None
    booking_buffer_minutes: Optional[int] = None
    advance_booking_days: Optional[int] = None
    is_hibernating: Optional[bool] = None
    hibernation_message: Optional[str] = None
    hibernation_end_date: Optional[date] = None
    hibernation_resume_time: Optional[time] = None

class CaptainSettingsOut(BaseModel):
    id: str
    business_name: Optional[str] = None
    timezone: Optional[str] = None
    booking_buffer_minutes: Optional[int] = None
    advance_booking_days: Optional[int] = None
    is_hibernating: bool
    hibernation_message: Optional[str] = None
    hibernation_end_date: Optional[date] = None
    hibernation_resume_time: Optional[time] = None
    class Config:
        from_attributes = True

# -----------------------------
# WEEKLY WINDOWS
# -----------------------------

class WindowIn(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6)  # 0 = Sunday
    start_time: time
    end_time: time
    is_active: bool = True

class WindowOut(BaseModel):
    id: str
    day_of_week: int
    start_time: time
    end_time: time
    is_active: bool
    class Config:
        from_attributes = True

# -----------------------------
# BLACKOUTS
# -----------------------------

class BlackoutIn(BaseModel):
    blackout_date: date
    reason: Optional[str] = None

class BlackoutRangeIn(BaseModel):
    start_date: date
    end_date: date
    reason: Optional[str] = None

class BlackoutOut(BaseModel):
    id: str
    blackout_date: date
    reason: Optional[str] = None
    class Config:
        from_attributes = True

class BlackoutRangeOut(BaseModel):
    created: int
    skipped: int
    blackouts: list[BlackoutOut]

# -----------------------------
# TRIP TYPES
# -----------------------------

class TripTypeIn(BaseModel):
    title: str
    duration_hours: int
    departure_times: Optional[list[str]] = None  # ["6:00 AM", "12:30 PM"]
    vessel_id: Optional[str] = None
    description: Optional[str] = None
    price_total_cents: int = Field(0, ge=0)
    deposit_cents: int = Field(0, ge=0)

class TripTypeUpdate(BaseModel):
    """PATCH body: only the fields actually sent are applied."""
    title: Optional[str] = None
    duration_hours: Optional[int] = None
    departure_times: Optional[list[str]] = None
    vessel_id: Optional[str] = None
    description: Optional[str] = None
    price_total_cents: Optional[int] = Field(None, ge=0)
    deposit_cents: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

class TripTypeOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    duration_hours: int
    departure_times: Optional[list[str]] = None
    vessel_id: Optional[str] = None
    price_total_cents: int
    deposit_cents: int
    is_active: bool
    class Config:
        from_attributes = True
