import os

# Settings are read at import time; point them at an in-memory database first.
os.environ["DB_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.pop("CRON_SECRET", None)
os.environ.pop("MAINTENANCE_MODE", None)

from datetime import datetime, time, timezone

import pytest
from fastapi.testclient import TestClient

from dockslot.core.security import create_access_token
from dockslot.database import Base, SessionLocal, engine
from dockslot.deps import get_now
from dockslot.main import app
from dockslot.models.availability import AvailabilityWindow
from dockslot.models.booking import Booking, BookingStatus
from dockslot.models.captain import CaptainProfile
from dockslot.models.trip_type import TripType
from dockslot.models.vessel import Vessel

# Monday 2026-05-25, 08:00 in New York. 2026-06-01 is the following Monday.
NOW = datetime(2026, 5, 25, 12, 0, tzinfo=timezone.utc)
MONDAY = "2026-06-01"
TZ = "America/New_York"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_now] = lambda: NOW
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_captain(db):
    def _make(**kw):
        fields = dict(
            business_name="Reel Time Charters",
            timezone=TZ,
            booking_buffer_minutes=60,
            advance_booking_days=60,
            is_hibernating=False,
        )
        fields.update(kw)
        captain = CaptainProfile(**fields)
        db.add(captain)
        db.commit()
        return captain
    return _make


@pytest.fixture
def captain(make_captain):
    return make_captain()


@pytest.fixture
def add_window(db):
    def _add(captain, day_of_week, start=time(6, 0), end=time(14, 0), is_active=True):
        w = AvailabilityWindow(
            owner_id=captain.id, day_of_week=day_of_week, start_time=start, end_time=end, is_active=is_active
        )
        db.add(w)
        db.commit()
        return w
    return _add


@pytest.fixture
def make_trip(db):
    def _make(captain, duration_hours=4, departure_times=None, vessel=None, **kw):
        trip = TripType(
            owner_id=captain.id,
            vessel_id=vessel.id if vessel else None,
            title=kw.pop("title", f"{duration_hours}h inshore"),
            duration_hours=duration_hours,
            departure_times=departure_times,
            **kw,
        )
        db.add(trip)
        db.commit()
        return trip
    return _make


@pytest.fixture
def make_vessel(db):
    def _make(captain, name="Miss Behavin"):
        v = Vessel(owner_id=captain.id, name=name, capacity=6)
        db.add(v)
        db.commit()
        return v
    return _make


@pytest.fixture
def add_booking(db):
    def _add(captain, start, end, status=BookingStatus.CONFIRMED, vessel=None, trip=None):
        b = Booking(
            captain_id=captain.id,
            trip_type_id=trip.id if trip else None,
            vessel_id=vessel.id if vessel else None,
            guest_name="Pat Angler",
            guest_email="pat@example.com",
            party_size=2,
            scheduled_start=start,
            scheduled_end=end,
            status=status,
        )
        db.add(b)
        db.commit()
        return b
    return _add


@pytest.fixture
def auth():
    def _headers(captain):
        return {"Authorization": f"Bearer {create_access_token(captain.id)}"}
    return _headers
