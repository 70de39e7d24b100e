"""Input shape checks shared by services."""
from __future__ import annotations

import re
from datetime import date

from .errors import ValidationError

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def is_valid_uuid(value) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def require_uuid(value, label: str) -> str:
    if not is_valid_uuid(value):
        raise ValidationError(f"Invalid {label}")
    return value.lower()


def parse_date_str(value) -> date:
    """Strict YYYY-MM-DD."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValidationError("Invalid date format")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError("Invalid date") from e


def parse_month_str(value) -> date:
    """YYYY-MM -> first day of that month."""
    m = _MONTH_RE.match(value or "") if isinstance(value, str) else None
    if not m:
        raise ValidationError("Month parameter required (format: YYYY-MM)")
    try:
        return date(int(m.group(1)), int(m.group(2)), 1)
    except ValueError as e:
        raise ValidationError("Invalid month") from e


def sanitize(value: str | None, max_length: int = 500) -> str:
    if not value or not isinstance(value, str):
        return ""
    return value.strip()[:max_length]
