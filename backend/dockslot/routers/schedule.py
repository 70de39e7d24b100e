from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import get_current_captain
from ..models.captain import CaptainProfile
from ..schemas.schedule import (
    BlackoutIn,
    BlackoutOut,
    BlackoutRangeIn,
    BlackoutRangeOut,
    CaptainSettingsIn,
    CaptainSettingsOut,
    TripTypeIn,
    TripTypeOut,
    TripTypeUpdate,
    WindowIn,
    WindowOut,
)
from ..services.captain_settings import CaptainSchedule

router = APIRouter(prefix="/schedule", tags=["schedule"])


def get_schedule(
    db: Session = Depends(get_db),
    me: CaptainProfile = Depends(get_current_captain),
) -> CaptainSchedule:
    return CaptainSchedule(db, me)


# -----------------------------------------------------------------------------
# SETTINGS
# -----------------------------------------------------------------------------
@router.get("/settings", response_model=CaptainSettingsOut)
def read_settings(sched: CaptainSchedule = Depends(get_schedule)):
    return sched.captain


@router.patch("/settings", response_model=CaptainSettingsOut)
def update_settings(payload: CaptainSettingsIn, sched: CaptainSchedule = Depends(get_schedule)):
    return sched.update_settings(**payload.model_dump(exclude_unset=True))


# -----------------------------------------------------------------------------
# WEEKLY WINDOWS
# -----------------------------------------------------------------------------
@router.get("/windows", response_model=list[WindowOut])
def list_windows(sched: CaptainSchedule = Depends(get_schedule)):
    return sched.list_windows()


@router.put("/windows", response_model=list[WindowOut])
def replace_windows(payload: list[WindowIn], sched: CaptainSchedule = Depends(get_schedule)):
    return sched.replace_windows(payload)


@router.post("/windows/defaults", response_model=list[WindowOut])
def default_windows(sched: CaptainSchedule = Depends(get_schedule)):
    return sched.create_default_availability()


# -----------------------------------------------------------------------------
# BLACKOUTS
# -----------------------------------------------------------------------------
@router.get("/blackouts", response_model=list[BlackoutOut])
def list_blackouts(
    start: date | None = None,
    end: date | None = None,
    sched: CaptainSchedule = Depends(get_schedule),
):
    return sched.list_blackouts(start, end)


@router.post("/blackouts", response_model=BlackoutOut, status_code=status.HTTP_201_CREATED)
def create_blackout(payload: BlackoutIn, sched: CaptainSchedule = Depends(get_schedule)):
    return sched.create_blackout(payload.blackout_date, payload.reason)


@router.post("/blackouts/range", response_model=BlackoutRangeOut, status_code=status.HTTP_201_CREATED)
def create_blackout_range(payload: BlackoutRangeIn, sched: CaptainSchedule = Depends(get_schedule)):
    rows, skipped = sched.create_blackout_range(payload.start_date, payload.end_date, payload.reason)
    return {"created": len(rows), "skipped": skipped, "blackouts": rows}


@router.delete("/blackouts/{blackout_id}")
def delete_blackout(blackout_id: str, sched: CaptainSchedule = Depends(get_schedule)):
    sched.delete_blackout(blackout_id)
    return {"ok": True}


# -----------------------------------------------------------------------------
# TRIP TYPES
# -----------------------------------------------------------------------------
@router.get("/trip-types", response_model=list[TripTypeOut])
def list_trip_types(sched: CaptainSchedule = Depends(get_schedule)):
    return sched.list_trip_types()


@router.post("/trip-types", response_model=TripTypeOut, status_code=status.HTTP_201_CREATED)
def create_trip_type(payload: TripTypeIn, sched: CaptainSchedule = Depends(get_schedule)):
    return sched.create_trip_type(**payload.model_dump())


@router.patch("/trip-types/{trip_type_id}", response_model=TripTypeOut)
def update_trip_type(trip_type_id: str, payload: TripTypeUpdate, sched: CaptainSchedule = Depends(get_schedule)):
    return sched.update_trip_type(trip_type_id, **payload.model_dump(exclude_unset=True))
