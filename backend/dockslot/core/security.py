from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from ..config import settings

# Captain tokens come from the identity provider; `sub` carries the captain
# profile id. create_access_token is only used by tooling and tests.

def create_access_token(captain_id: str, expires_min: int = 60) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=expires_min)
    payload = {"sub": captain_id, "exp": exp}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def decode_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None

def captain_id_from_token(token: str) -> str | None:
    data = decode_token(token)
    sub = (data or {}).get("sub")
    if not sub or not isinstance(sub, str):
        return None
    return sub.strip().lower()
