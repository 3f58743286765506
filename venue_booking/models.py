# models.py
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint

from .database import db

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")
VENUE_REQUEST_STATUSES = ("pending", "approved", "rejected")


def utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


def _status_constraint(statuses, name):
    allowed = ", ".join(f"'{status}'" for status in statuses)
    return CheckConstraint(f"status IN ({allowed})", name=name)


class Admin(db.Model):
    __tablename__ = 'admin'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        return {"id": self.id, "email": self.email}


class Venue(db.Model):
    __tablename__ = 'venue'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    location = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    capacity = db.Column(db.Integer, nullable=True)
    amenities = db.Column(db.JSON, nullable=True)  # list of strings
    price_range = db.Column(db.String(50), nullable=True)
    images = db.Column(db.JSON, nullable=True)  # list of image references
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "description": self.description,
            "capacity": self.capacity,
            "amenities": self.amenities or [],
            "price_range": self.price_range,
            "images": self.images or [],
            "created_at": _iso(self.created_at),
        }


class TableType(db.Model):
    __tablename__ = 'table_type'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    capacity = db.Column(db.Integer, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "capacity": self.capacity,
            "price": f"{self.price:.2f}" if self.price is not None else None,
            "created_at": _iso(self.created_at),
        }


class Booking(db.Model):
    __tablename__ = 'booking'
    __table_args__ = (_status_constraint(BOOKING_STATUSES, "ck_booking_status"),)
    id = db.Column(db.Integer, primary_key=True)
    venue_id = db.Column(db.Integer, db.ForeignKey("venue.id"), nullable=False, index=True)
    table_type_id = db.Column(db.Integer, db.ForeignKey("table_type.id"), nullable=True, index=True)
    full_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(50), nullable=True)
    date = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD, shape-checked only
    time = db.Column(db.String(5), nullable=False)  # HH:MM
    guests = db.Column(db.Integer, nullable=True)
    special_requests = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default="pending")  # pending / confirmed / cancelled
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    venue = db.relationship("Venue", lazy="joined")
    table_type = db.relationship("TableType", lazy="joined")

    def to_dict(self, with_references=False):
        data = {
            "id": self.id,
            "venue_id": self.venue_id,
            "table_type_id": self.table_type_id,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "date": self.date,
            "time": self.time,
            "guests": self.guests,
            "special_requests": self.special_requests,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        if with_references:
            venue, table_type = self.venue, self.table_type
            data.update({
                "venue_name": venue.name if venue else None,
                "venue_location": venue.location if venue else None,
                "venue_description": venue.description if venue else None,
                "table_type_name": table_type.name if table_type else None,
                "table_type_description": table_type.description if table_type else None,
                "table_capacity": table_type.capacity if table_type else None,
                "table_price": f"{table_type.price:.2f}" if table_type and table_type.price is not None else None,
            })
        return data


class VenueRequest(db.Model):
    __tablename__ = 'venue_request'
    __table_args__ = (_status_constraint(VENUE_REQUEST_STATUSES, "ck_venue_request_status"),)
    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(100), nullable=False)
    venue_name = db.Column(db.String(100), nullable=False)
    contact_email = db.Column(db.String(255), nullable=False)
    customer_phone = db.Column(db.String(50), nullable=True)
    description = db.Column(db.Text, nullable=True)
    location = db.Column(db.String(255), nullable=True)
    booking_datetime = db.Column(db.String(32), nullable=True)
    num_guests = db.Column(db.Integer, nullable=True)
    budget_range = db.Column(db.String(50), nullable=True)
    special_preferences = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default="pending")  # pending / approved / rejected
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self, with_references=False):
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "venue_name": self.venue_name,
            "contact_email": self.contact_email,
            "customer_phone": self.customer_phone,
            "description": self.description,
            "location": self.location,
            "booking_datetime": self.booking_datetime,
            "num_guests": self.num_guests,
            "budget_range": self.budget_range,
            "special_preferences": self.special_preferences,
            "status": self.status,
            "created_at": _iso(self.created_at),
        }
