from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import get_now
from ..schemas.availability import DateRangeOut, MonthOut, SlotsOut
from ..services.slots import SlotGenerator

# Public: guests browse without an account. Nothing here writes.
router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("/{captain_id}/dates", response_model=DateRangeOut)
def date_range(
    captain_id: str,
    days: int = Query(60, ge=0, le=365),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return SlotGenerator(db, now=now).get_date_range_availability(captain_id, days)


@router.get("/{captain_id}/{trip_type_id}/slots", response_model=SlotsOut)
def slots_for_date(
    captain_id: str,
    trip_type_id: str,
    date: str = Query(..., description="YYYY-MM-DD in the captain's timezone"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return SlotGenerator(db, now=now).get_available_slots(captain_id, trip_type_id, date)


@router.get("/{captain_id}/{trip_type_id}/month", response_model=MonthOut)
def slots_for_month(
    captain_id: str,
    trip_type_id: str,
    month: str = Query(..., description="YYYY-MM"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return SlotGenerator(db, now=now).get_month_availability(captain_id, trip_type_id, month)
