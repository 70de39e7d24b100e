from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import get_now, require_cron_secret
from ..services.maintenance import expire_overdue_bookings, resume_hibernation

router = APIRouter(prefix="/ops", tags=["ops"], dependencies=[Depends(require_cron_secret)])


class JobOut(BaseModel):
    ok: bool
    count: int
    ids: list[str]
    ran_at: str


def _job_result(ids: list[str], now: datetime) -> JobOut:
    return JobOut(ok=True, count=len(ids), ids=ids, ran_at=now.isoformat())


@router.post("/expire-bookings", response_model=JobOut)
def expire_bookings(db: Session = Depends(get_db), now: datetime = Depends(get_now)):
    return _job_result(expire_overdue_bookings(db, now), now)


@router.post("/resume-hibernation", response_model=JobOut)
def wake_captains(db: Session = Depends(get_db), now: datetime = Depends(get_now)):
    return _job_result(resume_hibernation(db, now), now)
