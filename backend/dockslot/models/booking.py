from sqlalchemy import Column, String, Integer, Enum, Text, ForeignKey, CheckConstraint, Index, DDL, event, func
import enum
from ..database import Base
from .types import UTCDateTime, uuid_pk


class BookingStatus(str, enum.Enum):
    PENDING_DEPOSIT = "pending_deposit"
    CONFIRMED = "confirmed"
    WEATHER_HOLD = "weather_hold"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    EXPIRED = "expired"

    @property
    def is_active(self) -> bool:
        """Whether a booking in this status still occupies its time slot."""
        return self in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self]

    def can_transition_to(self, other: "BookingStatus") -> bool:
        return other in VALID_TRANSITIONS[self]


ACTIVE_STATUSES = frozenset(
    {
        BookingStatus.PENDING_DEPOSIT,
        BookingStatus.CONFIRMED,
        BookingStatus.WEATHER_HOLD,
        BookingStatus.RESCHEDULED,
    }
)

VALID_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING_DEPOSIT: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.EXPIRED}),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.WEATHER_HOLD, BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
    ),
    BookingStatus.WEATHER_HOLD: frozenset({BookingStatus.CONFIRMED, BookingStatus.RESCHEDULED, BookingStatus.CANCELLED}),
    BookingStatus.RESCHEDULED: frozenset(
        {
            BookingStatus.CONFIRMED,
            BookingStatus.WEATHER_HOLD,
            BookingStatus.COMPLETED,
            BookingStatus.CANCELLED,
            BookingStatus.NO_SHOW,
        }
    ),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
    BookingStatus.EXPIRED: frozenset(),
}


class Booking(Base):
    __tablename__ = "bookings"

    id = uuid_pk()
    captain_id = Column(String(36), ForeignKey("captain_profiles.id", ondelete="CASCADE"), nullable=False)
    trip_type_id = Column(String(36), ForeignKey("trip_types.id", ondelete="SET NULL"), nullable=True)
    vessel_id = Column(String(36), ForeignKey("vessels.id", ondelete="SET NULL"), nullable=True)

    guest_name = Column(String(100), nullable=False)
    guest_email = Column(String(320), nullable=False)
    guest_phone = Column(String(32), nullable=True)
    party_size = Column(Integer, nullable=False, default=1)
    special_requests = Column(Text, default="")

    scheduled_start = Column(UTCDateTime, nullable=False)
    scheduled_end = Column(UTCDateTime, nullable=False)

    status = Column(
        Enum(BookingStatus, name="booking_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BookingStatus.PENDING_DEPOSIT,
    )

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("scheduled_end > scheduled_start", name="ck_booking_valid_range"),
        Index("ix_bookings_captain_start", "captain_id", "scheduled_start"),
        Index("ix_bookings_vessel_start", "vessel_id", "scheduled_start"),
    )


# Postgres backstop for the booking transaction: active bookings of one
# captain may not overlap. The buffer itself is enforced under the row lock.
_active_values = ", ".join(f"'{s.value}'" for s in sorted(ACTIVE_STATUSES, key=lambda s: s.value))

event.listen(
    Booking.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        "ALTER TABLE bookings ADD CONSTRAINT no_overlapping_active_bookings "
        "EXCLUDE USING gist (captain_id WITH =, tstzrange(scheduled_start, scheduled_end) WITH &&) "
        f"WHERE (status IN ({_active_values}))"
    ).execute_if(dialect="postgresql"),
)
