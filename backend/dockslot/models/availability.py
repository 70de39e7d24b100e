from sqlalchemy import Column, String, Integer, Date, Time, Boolean, Text, ForeignKey, UniqueConstraint, CheckConstraint, Index
from ..database import Base
from .types import uuid_pk


class AvailabilityWindow(Base):
    """Recurring weekly opening, in the captain's local clock.

    day_of_week: 0 = Sunday ... 6 = Saturday. Several rows per weekday are
    allowed; they are unioned when slots are generated.
    """

    __tablename__ = "availability_windows"

    id = uuid_pk()
    owner_id = Column(String(36), ForeignKey("captain_profiles.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_window_weekday"),
        Index("ix_windows_owner_day", "owner_id", "day_of_week"),
    )


class BlackoutDate(Base):
    __tablename__ = "blackout_dates"

    id = uuid_pk()
    owner_id = Column(String(36), ForeignKey("captain_profiles.id", ondelete="CASCADE"), nullable=False)
    blackout_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("owner_id", "blackout_date", name="uniq_blackout_owner_date"),)
