"""
Local clock <-> absolute instant.

The only module that knows about UTC offsets. Upstream code speaks local
dates and (hour, minute) pairs; downstream code compares aware datetimes.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import TimestampConstructionError
from .timewindow import Clock


def zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise TimestampConstructionError(f"Unknown timezone: {tz_name!r}") from e


def to_instant(day: date, clock: Clock | time, tz_name: str) -> datetime:
    """Local (date, clock) in ``tz_name`` -> aware UTC datetime.

    Local times inside a spring-forward gap land after the gap; times
    repeated by a fall-back change resolve to their first occurrence.
    """
    tz = zone(tz_name)
    try:
        if isinstance(clock, time):
            local_time = clock.replace(tzinfo=None, fold=0)
        else:
            local_time = time(clock[0], clock[1])
        local = datetime.combine(day, local_time, tzinfo=tz)
        return local.astimezone(timezone.utc)
    except (ValueError, TypeError, OverflowError) as e:
        raise TimestampConstructionError(
            f"Cannot build timestamp from {day!r} {clock!r} in {tz_name}"
        ) from e


def local_today(tz_name: str, now: datetime) -> date:
    return now.astimezone(zone(tz_name)).date()


def local_clock(instant: datetime, tz_name: str) -> Clock:
    local = instant.astimezone(zone(tz_name))
    return local.hour, local.minute


def js_weekday(day: date) -> int:
    """0 = Sunday ... 6 = Saturday, the convention windows are stored in."""
    return (day.weekday() + 1) % 7


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
