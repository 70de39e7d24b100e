from sqlalchemy import Column, String, Integer, ForeignKey
from ..database import Base
from .types import uuid_pk


class Vessel(Base):
    __tablename__ = "vessels"

    id = uuid_pk()
    owner_id = Column(String(36), ForeignKey("captain_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    capacity = Column(Integer, nullable=False, default=6)
