from sqlalchemy import Column, String, Integer, Boolean, Date, Time, Text, func
from ..database import Base
from .types import UTCDateTime, uuid_pk


class CaptainProfile(Base):
    """The scheduling-relevant subset of a captain's profile."""

    __tablename__ = "captain_profiles"

    id = uuid_pk()
    business_name = Column(String(200), nullable=True)
    email = Column(String(320), nullable=True)

    timezone = Column(String(64), nullable=True)  # IANA; empty -> settings.DEFAULT_TIMEZONE
    booking_buffer_minutes = Column(Integer, nullable=True)  # None -> default 60
    advance_booking_days = Column(Integer, nullable=True)  # None -> default 60

    is_hibernating = Column(Boolean, nullable=False, default=False)
    hibernation_message = Column(Text, nullable=True)
    hibernation_end_date = Column(Date, nullable=True)
    hibernation_resume_time = Column(Time, nullable=True)  # captain-local

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())
