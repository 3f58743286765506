from flask import Blueprint, jsonify

from ..auth import admin_required
from . import payload, services

venues_bp = Blueprint("venues", __name__, url_prefix="/api/venues")
table_types_bp = Blueprint("table_types", __name__, url_prefix="/api/table-types")


# Venues: public reads, admin writes
@venues_bp.route("", methods=["GET"])
def list_venues():
    return jsonify({"venues": [venue.to_dict() for venue in services().venues.list()]})


@venues_bp.route("/<int:venue_id>", methods=["GET"])
def get_venue(venue_id):
    return jsonify({"venue": services().venues.get(venue_id).to_dict()})


@venues_bp.route("", methods=["POST"])
@admin_required
def add_venue(admin):
    venue = services().venues.create(admin, payload())
    return jsonify({"message": "Venue added successfully", "venue": venue.to_dict()}), 201


@venues_bp.route("/<int:venue_id>", methods=["PUT"])
@admin_required
def update_venue(admin, venue_id):
    venue = services().venues.update(admin, venue_id, payload())
    return jsonify({"message": "Venue updated successfully", "venue": venue.to_dict()})


@venues_bp.route("/<int:venue_id>", methods=["DELETE"])
@admin_required
def delete_venue(admin, venue_id):
    services().venues.delete(admin, venue_id)
    return jsonify({"message": "Venue deleted successfully"})


# Table types: same pattern
@table_types_bp.route("", methods=["GET"])
def list_table_types():
    table_types = services().table_types.list()
    return jsonify({"table_types": [table_type.to_dict() for table_type in table_types]})


@table_types_bp.route("/<int:table_type_id>", methods=["GET"])
def get_table_type(table_type_id):
    return jsonify({"table_type": services().table_types.get(table_type_id).to_dict()})


@table_types_bp.route("", methods=["POST"])
@admin_required
def add_table_type(admin):
    table_type = services().table_types.create(admin, payload())
    return jsonify({"message": "Table type added successfully", "table_type": table_type.to_dict()}), 201


@table_types_bp.route("/<int:table_type_id>", methods=["PUT"])
@admin_required
def update_table_type(admin, table_type_id):
    table_type = services().table_types.update(admin, table_type_id, payload())
    return jsonify({"message": "Table type updated successfully", "table_type": table_type.to_dict()})


@table_types_bp.route("/<int:table_type_id>", methods=["DELETE"])
@admin_required
def delete_table_type(admin, table_type_id):
    services().table_types.delete(admin, table_type_id)
    return jsonify({"message": "Table type deleted successfully"})
