from flask import Blueprint, jsonify, request

from ..auth import admin_required
from . import payload, services

bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


def _bookings():
    return services().bookings


def _listing(bookings):
    return [booking.to_dict(with_references=True) for booking in bookings]


# Create booking (public)
@bp.route("", methods=["POST"])
def create_booking():
    booking = _bookings().create(payload())
    return jsonify({
        "message": "Booking created successfully with pending status",
        "booking": booking.to_dict(),
    }), 201


@bp.route("", methods=["GET"])
@admin_required
def list_bookings(admin):
    bookings = _bookings().list(admin, request.args.to_dict())
    return jsonify({"bookings": _listing(bookings), "total": len(bookings)})


@bp.route("/status/<status>", methods=["GET"])
@admin_required
def bookings_by_status(admin, status):
    bookings = _bookings().list_by_status(admin, status)
    return jsonify({"bookings": _listing(bookings), "status": status, "count": len(bookings)})


@bp.route("/stats/summary", methods=["GET"])
@admin_required
def booking_statistics(admin):
    return jsonify({"statistics": _bookings().statistics(admin)})


# Customers check their own bookings by email (public)
@bp.route("/customer/<email>", methods=["GET"])
def customer_bookings(email):
    bookings = _bookings().for_customer(email)
    return jsonify({"bookings": _listing(bookings), "total": len(bookings)})


@bp.route("/<int:booking_id>", methods=["GET"])
@admin_required
def get_booking(admin, booking_id):
    booking = _bookings().get(admin, booking_id)
    return jsonify({"booking": booking.to_dict(with_references=True)})


@bp.route("/<int:booking_id>/status", methods=["PATCH"])
@admin_required
def update_booking_status(admin, booking_id):
    status = payload().get("status")
    booking, previous_status = _bookings().update_status(admin, booking_id, status)
    return jsonify({
        "message": f"Booking status updated from '{previous_status}' to '{status}'",
        "booking": booking.to_dict(),
        "previous_status": previous_status,
        "new_status": status,
    })


@bp.route("/<int:booking_id>", methods=["PUT"])
@admin_required
def replace_booking(admin, booking_id):
    booking = _bookings().replace(admin, booking_id, payload())
    return jsonify({"message": "Booking updated successfully", "booking": booking.to_dict()})


# Customers cancel their own bookings (public, email must match)
@bp.route("/cancel/<int:booking_id>", methods=["PATCH"])
def cancel_booking(booking_id):
    booking = _bookings().cancel(booking_id, payload())
    return jsonify({"message": "Booking cancelled successfully", "booking": booking.to_dict()})


@bp.route("/<int:booking_id>", methods=["DELETE"])
@admin_required
def delete_booking(admin, booking_id):
    deleted = _bookings().delete(admin, booking_id)
    return jsonify({"message": "Booking deleted successfully", "deleted_booking": deleted})
