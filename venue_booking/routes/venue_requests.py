from flask import Blueprint, jsonify, request

from ..auth import admin_required
from . import payload, services

bp = Blueprint("venue_requests", __name__, url_prefix="/api/venue-requests")


def _requests():
    return services().venue_requests


def _listing(venue_requests):
    return [venue_request.to_dict() for venue_request in venue_requests]


# Submit venue request (public)
@bp.route("", methods=["POST"])
def submit_request():
    venue_request = _requests().create(payload())
    return jsonify({
        "message": "Venue request submitted successfully",
        "request": venue_request.to_dict(),
    }), 201


@bp.route("", methods=["GET"])
@admin_required
def list_requests(admin):
    venue_requests = _requests().list(admin, request.args.to_dict())
    return jsonify({"requests": _listing(venue_requests), "total": len(venue_requests)})


@bp.route("/status/<status>", methods=["GET"])
@admin_required
def requests_by_status(admin, status):
    venue_requests = _requests().list_by_status(admin, status)
    return jsonify({"requests": _listing(venue_requests), "status": status, "count": len(venue_requests)})


@bp.route("/stats/summary", methods=["GET"])
@admin_required
def request_statistics(admin):
    return jsonify({"statistics": _requests().statistics(admin)})


@bp.route("/<int:request_id>", methods=["GET"])
@admin_required
def get_request(admin, request_id):
    return jsonify({"request": _requests().get(admin, request_id).to_dict()})


@bp.route("/<int:request_id>/status", methods=["PATCH"])
@admin_required
def update_request_status(admin, request_id):
    status = payload().get("status")
    venue_request, previous_status = _requests().update_status(admin, request_id, status)
    return jsonify({
        "message": "Request status updated",
        "request": venue_request.to_dict(),
        "previous_status": previous_status,
        "new_status": status,
    })


@bp.route("/<int:request_id>", methods=["PUT"])
@admin_required
def replace_request(admin, request_id):
    venue_request = _requests().replace(admin, request_id, payload())
    return jsonify({"message": "Request updated successfully", "request": venue_request.to_dict()})


@bp.route("/<int:request_id>", methods=["DELETE"])
@admin_required
def delete_request(admin, request_id):
    deleted = _requests().delete(admin, request_id)
    return jsonify({"message": "Request deleted successfully", "deleted_request": deleted})
