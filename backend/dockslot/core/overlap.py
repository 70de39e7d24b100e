"""The buffered overlap predicate.

Both the read path (slot generation) and the write path (conflict checks
inside the booking transaction) call this function and nothing else.
"""
from __future__ import annotations

from datetime import datetime, timedelta


def intervals_conflict(
    start1: datetime,
    end1: datetime,
    start2: datetime,
    end2: datetime,
    buffer_minutes: int = 0,
) -> bool:
    """True iff the intervals overlap once ``buffer_minutes`` separates them.

    ``start1 < end2 + buffer and end1 + buffer > start2``. Swapping the two
    intervals gives the same answer. Touching intervals with no buffer do
    not conflict.
    """
    buffer = timedelta(minutes=buffer_minutes)
    return start1 < end2 + buffer and end1 + buffer > start2


def buffered_bounds(start: datetime, end: datetime, buffer_minutes: int) -> tuple[datetime, datetime]:
    """Widest range an interval can reach with its buffer, for coarse DB filters."""
    buffer = timedelta(minutes=buffer_minutes)
    return start - buffer, end + buffer
