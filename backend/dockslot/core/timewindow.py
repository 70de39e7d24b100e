"""
Clock arithmetic for availability windows.

Everything here works on local wall-clock (hour, minute) pairs. No timezone,
no bookings: callers turn the candidates into instants afterwards.
"""
from __future__ import annotations

import re
from datetime import time
from typing import Iterable

Clock = tuple[int, int]

LAST_MINUTE_OF_DAY = 23 * 60 + 59
DEFAULT_STEP_MINUTES = 30

_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(:([0-5]\d))?$")
_DEPARTURE_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$", re.IGNORECASE)


def parse_clock(value: str) -> Clock | None:
    """'HH:MM' or 'HH:MM:SS' -> (hour, minute). Seconds are dropped."""
    if not isinstance(value, str):
        return None
    m = _CLOCK_RE.match(value.strip())
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def parse_departure_time(value: str) -> Clock | None:
    """'6:00 AM' / '2:30 pm' -> (hour, minute) on a 24h clock."""
    if not isinstance(value, str):
        return None
    m = _DEPARTURE_RE.match(value.strip())
    if not m:
        return None
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours < 1 or hours > 12 or minutes > 59:
        return None
    period = m.group(3).upper()
    if period == "AM" and hours == 12:
        hours = 0
    elif period == "PM" and hours != 12:
        hours += 12
    return hours, minutes


def to_minutes(clock: Clock | time) -> int:
    if isinstance(clock, time):
        return clock.hour * 60 + clock.minute
    return clock[0] * 60 + clock[1]


def _from_minutes(minutes: int) -> Clock:
    return minutes // 60, minutes % 60


def candidate_starts(
    window_start: Clock | time,
    window_end: Clock | time,
    duration_hours: int,
    departure_times: Iterable[str] | None = None,
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> list[Clock]:
    """Local start times of trips that fit entirely inside one window.

    With a departure list, each departure is admitted iff it starts at or
    after the window start and its implied end is at or before the window
    end (inclusive). Without one, a cursor steps from the window start in
    ``step_minutes`` increments while the trip still fits.
    """
    if duration_hours <= 0:
        return []
    start_m = to_minutes(window_start)
    end_m = to_minutes(window_end)
    duration_m = duration_hours * 60

    departures = list(departure_times or [])
    if departures:
        admitted: set[int] = set()
        for raw in departures:
            parsed = parse_departure_time(raw)
            if parsed is None:
                continue
            dep_m = to_minutes(parsed)
            if dep_m >= start_m and dep_m + duration_m <= end_m:
                admitted.add(dep_m)
        return [_from_minutes(m) for m in sorted(admitted)]

    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")

    out: list[Clock] = []
    cursor = start_m
    while cursor <= LAST_MINUTE_OF_DAY:
        if cursor + duration_m > end_m:
            break
        out.append(_from_minutes(cursor))
        cursor += step_minutes
    return out


def invalid_departure_times(departure_times: Iterable[str]) -> list[str]:
    return [d for d in departure_times if parse_departure_time(d) is None]
