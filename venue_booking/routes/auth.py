from flask import Blueprint, current_app, jsonify

from ..errors import NotFoundError
from . import payload, services

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# Bootstrap registration; open unless the deployment switches it off
@bp.route("/register", methods=["POST"])
def register():
    if not current_app.config.get("ADMIN_REGISTRATION_ENABLED", True):
        raise NotFoundError("Registration is disabled")
    admin = services().auth.register(payload())
    return jsonify({"message": "Superadmin created successfully", "admin": admin.to_dict()}), 201


@bp.route("/login", methods=["POST"])
def login():
    token, admin = services().auth.login(payload())
    return jsonify({"message": "Login successful", "token": token, "admin": admin.to_dict()})
