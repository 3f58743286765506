from .lifecycle import StatusLifecycle
from .models import VENUE_REQUEST_STATUSES, VenueRequest
from .validation import PASSED, check_email, check_positive_int, check_required, ensure, is_blank


def _text(value):
    if is_blank(value):
        return None
    return value.strip() if isinstance(value, str) else value


class VenueRequestLifecycle(StatusLifecycle):
    """Customer submissions asking for a venue to be listed or arranged."""

    model = VenueRequest
    label = "Request"
    statuses = VENUE_REQUEST_STATUSES
    initial_status = "pending"
    required_fields = ("customer_name", "venue_name", "contact_email")
    total_key = "total_requests"

    def validate(self, data):
        num_guests = data.get("num_guests")
        ensure(
            check_required(data, self.required_fields),
            check_email(data.get("contact_email")),
            PASSED if is_blank(num_guests) else check_positive_int(num_guests, "num_guests"),
        )

    def values(self, data):
        num_guests = data.get("num_guests")
        return {
            "customer_name": str(data["customer_name"]).strip(),
            "venue_name": str(data["venue_name"]).strip(),
            "contact_email": data["contact_email"].strip(),
            "customer_phone": _text(data.get("customer_phone")),
            "description": _text(data.get("description")),
            "location": _text(data.get("location")),
            "booking_datetime": _text(data.get("booking_datetime")),
            "num_guests": None if is_blank(num_guests) else int(num_guests),
            "budget_range": _text(data.get("budget_range")),
            "special_preferences": _text(data.get("special_preferences")),
        }
