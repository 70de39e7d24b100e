from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError
from ..core.validation import require_uuid
from ..database import get_db
from ..models.captain import CaptainProfile
from ..models.trip_type import TripType
from ..schemas.availability import CaptainPublicOut
from ..schemas.schedule import TripTypeOut

router = APIRouter(prefix="/captains", tags=["captains"])


def _captain(db: Session, captain_id: str) -> CaptainProfile:
    captain = db.get(CaptainProfile, require_uuid(captain_id, "captain ID"))
    if not captain:
        raise NotFoundError("Captain not found")
    return captain


@router.get("/{captain_id}", response_model=CaptainPublicOut)
def public_profile(captain_id: str, db: Session = Depends(get_db)):
    return _captain(db, captain_id)


@router.get("/{captain_id}/trip-types", response_model=list[TripTypeOut])
def public_trip_types(captain_id: str, db: Session = Depends(get_db)):
    captain = _captain(db, captain_id)
    return (
        db.query(TripType)
        .filter(TripType.owner_id == captain.id, TripType.is_active == True)
        .order_by(TripType.title.asc())
        .all()
    )
