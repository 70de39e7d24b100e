from __future__ import annotations
from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional

# -----------------------------
# SLOTS (read side, guest facing)
# -----------------------------

class SlotOut(BaseModel):
    start: datetime
    end: datetime
    class Config:
        from_attributes = True

class DateInfoOut(BaseModel):
    date: date
    day_of_week: int  # 0 = Sunday
    has_availability: bool
    is_blackout: bool
    blackout_reason: Optional[str] = None
    is_past: bool = False
    is_beyond_advance_window: bool = False
    has_active_window: bool = False
    class Config:
        from_attributes = True

class SlotsOut(BaseModel):
    date: date
    captain_timezone: str
    slots: list[SlotOut]
    date_info: DateInfoOut
    class Config:
        from_attributes = True

class DateRangeOut(BaseModel):
    captain_timezone: str
    dates: list[DateInfoOut]
    class Config:
        from_attributes = True

class MonthOut(BaseModel):
    month: str
    captain_timezone: str
    availability: dict[date, list[SlotOut]]
    class Config:
        from_attributes = True

class CaptainPublicOut(BaseModel):
    """What a guest sees before picking a trip (hibernation banner included)."""
    id: str
    business_name: Optional[str] = None
    timezone: Optional[str] = None
    is_hibernating: bool
    hibernation_message: Optional[str] = None
    hibernation_end_date: Optional[date] = None
    class Config:
        from_attributes = True
