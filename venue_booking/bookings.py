import logging

from sqlalchemy import select

from .errors import BookingAlreadyCancelledError, NotFoundError, ValidationError
from .lifecycle import StatusLifecycle, as_record
from .models import BOOKING_STATUSES, Booking, TableType, Venue
from .validation import (
    PASSED,
    check_date,
    check_email,
    check_positive_int,
    check_required,
    check_time,
    ensure,
    is_blank,
    parse_identifier,
)

logger = logging.getLogger(__name__)


def _optional(value):
    if is_blank(value):
        return None
    return value.strip() if isinstance(value, str) else value


class BookingLifecycle(StatusLifecycle):
    """Table reservations at a venue, optionally for a specific table type."""

    model = Booking
    label = "Booking"
    statuses = BOOKING_STATUSES
    initial_status = "pending"
    required_fields = ("venue_id", "full_name", "email", "date", "time")
    total_key = "total_bookings"

    def validate(self, data):
        guests = data.get("guests")
        ensure(
            check_required(data, self.required_fields),
            check_email(data.get("email")),
            check_date(data.get("date")),
            check_time(data.get("time")),
            PASSED if is_blank(guests) else check_positive_int(guests, "guests"),
        )

    def _venue_missing(self, data):
        return NotFoundError(f"Venue with id '{data.get('venue_id')}' not found")

    def _table_type_missing(self, data):
        return NotFoundError(f"Table type with id '{data.get('table_type_id')}' not found")

    def check_references(self, data):
        venue_id = parse_identifier(data.get("venue_id"))
        if venue_id is None or self._session.get(Venue, venue_id) is None:
            raise self._venue_missing(data)

        if not is_blank(data.get("table_type_id")):
            table_type_id = parse_identifier(data.get("table_type_id"))
            if table_type_id is None or self._session.get(TableType, table_type_id) is None:
                raise self._table_type_missing(data)

    def integrity_references(self, data):
        return {
            "venue_id": self._venue_missing(data),
            "table_type_id": self._table_type_missing(data),
        }

    def values(self, data):
        guests = data.get("guests")
        return {
            "venue_id": parse_identifier(data["venue_id"]),
            "table_type_id": parse_identifier(data.get("table_type_id")),
            "full_name": str(data["full_name"]).strip(),
            "email": data["email"].strip(),
            "phone": _optional(data.get("phone")),
            "date": data["date"],
            "time": data["time"],
            "guests": None if is_blank(guests) else int(guests),
            "special_requests": _optional(data.get("special_requests")),
        }

    def filters(self, params):
        clauses = []
        if params.get("venue_id"):
            venue_id = parse_identifier(params["venue_id"])
            if venue_id is None:
                raise ValidationError("Invalid venue_id filter")
            clauses.append(Booking.venue_id == venue_id)
        if params.get("date"):
            clauses.append(Booking.date == params["date"])
        return clauses

    def status_ordering(self):
        return (Booking.date.desc(), Booking.time.desc(), Booking.id.desc())

    def for_customer(self, email):
        """Every booking made with ``email``, newest first.

        Public: the email address is the only credential.
        """
        return self._select(Booking.email == email)

    def cancel(self, booking_id, data):
        """Customer-initiated cancellation, gated on the email on file.

        A wrong id and a wrong email produce the same not-found error.
        """
        email = as_record(data).get("email")
        if is_blank(email) or not isinstance(email, str):
            raise ValidationError("Email is required to cancel booking")

        row_id = parse_identifier(booking_id)
        booking = None if row_id is None else self._session.execute(
            select(Booking).where(Booking.id == row_id, Booking.email == email.strip())
        ).unique().scalar_one_or_none()
        if booking is None:
            raise NotFoundError("Booking not found or email does not match")
        if booking.status == "cancelled":
            raise BookingAlreadyCancelledError()

        booking.status = "cancelled"
        self._commit()
        logger.info("Booking %s cancelled by customer", booking_id)
        return booking
