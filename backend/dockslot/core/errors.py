"""
Typed failures for availability and booking operations.

Services raise these; a single FastAPI handler (see main.py) turns them into
JSON responses so routes stay thin.
"""
from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Status codes and machine-readable codes
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_LOCKED = 423

MSG_SLOT_UNAVAILABLE = "This time is no longer available. Please pick another slot."
MSG_HIBERNATING = "Captain is not accepting bookings"


class DockslotError(Exception):
    status_code: int = STATUS_BAD_REQUEST
    code: str = "error"

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, **self.extra}


class ValidationError(DockslotError):
    """Malformed input: the caller's fault, never retried."""

    status_code = STATUS_BAD_REQUEST
    code = "validation"


class TimestampConstructionError(ValidationError):
    """A (date, local time, timezone) triple could not become an instant."""

    code = "invalid_timestamp"


class NotFoundError(DockslotError):
    status_code = STATUS_NOT_FOUND
    code = "not_found"


class ForbiddenError(DockslotError):
    status_code = STATUS_FORBIDDEN
    code = "forbidden"


class UnavailableError(DockslotError):
    """The captain is intentionally closed. Distinct from "no slots"."""

    status_code = STATUS_LOCKED

    def __init__(self, message: str = MSG_HIBERNATING, kind: str = "hibernating", **extra):
        super().__init__(message, **extra)
        self.kind = kind
        self.code = kind


class ConflictError(DockslotError):
    """Raised at write time when the requested interval is already taken.

    Expected and user-facing: the client should re-fetch slots.
    """

    status_code = STATUS_CONFLICT
    code = "slot_unavailable"

    def __init__(self, message: str = MSG_SLOT_UNAVAILABLE, conflicting_ids: list[str] | None = None, **extra):
        super().__init__(message, conflicting_booking_ids=list(conflicting_ids or []), **extra)
        self.conflicting_ids = list(conflicting_ids or [])


class DuplicateError(DockslotError):
    status_code = STATUS_CONFLICT
    code = "duplicate"


async def dockslot_error_handler(request: Request, exc: DockslotError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
