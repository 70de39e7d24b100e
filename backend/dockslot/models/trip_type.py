from sqlalchemy import Column, String, Integer, Boolean, JSON, Text, ForeignKey
from ..database import Base
from .types import uuid_pk


class TripType(Base):
    __tablename__ = "trip_types"

    id = uuid_pk()
    owner_id = Column(String(36), ForeignKey("captain_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    vessel_id = Column(String(36), ForeignKey("vessels.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    duration_hours = Column(Integer, nullable=False)
    # ["6:00 AM", "10:00 AM"]; None -> 30-minute stepping inside each window
    departure_times = Column(JSON, nullable=True)
    price_total_cents = Column(Integer, nullable=False, default=0)
    deposit_cents = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
