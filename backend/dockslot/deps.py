from datetime import datetime, timezone

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .config import settings
from .core.security import captain_id_from_token
from .database import get_db
from .models.captain import CaptainProfile

# Tokens are minted by the identity provider; tokenUrl only feeds the OpenAPI docs.
oauth2 = OAuth2PasswordBearer(tokenUrl="/auth/token")


def get_now() -> datetime:
    """Request-scoped clock. Tests override this dependency."""
    return datetime.now(timezone.utc)


def get_current_captain(token: str = Depends(oauth2), db: Session = Depends(get_db)) -> CaptainProfile:
    captain_id = captain_id_from_token(token)
    if not captain_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    captain = db.get(CaptainProfile, captain_id)
    if not captain:
        raise HTTPException(status_code=401, detail="Captain not found")
    return captain


def require_cron_secret(authorization: str | None = Header(None)) -> None:
    if not settings.CRON_SECRET:
        return
    if authorization != f"Bearer {settings.CRON_SECRET}":
        raise HTTPException(status_code=401, detail="Unauthorized")
