# Import every model so Base.metadata knows all tables before create_all.
from .captain import CaptainProfile
from .vessel import Vessel
from .availability import AvailabilityWindow, BlackoutDate
from .trip_type import TripType
from .booking import Booking, BookingStatus

__all__ = ["CaptainProfile", "Vessel", "AvailabilityWindow", "BlackoutDate", "TripType", "Booking", "BookingStatus"]
