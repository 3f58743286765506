"""Venue booking REST API."""

import logging
from dataclasses import dataclass

from flask import Flask, jsonify
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .auth import AuthService, TokenSigner
from .bookings import BookingLifecycle
from .catalog import TableTypeCatalog, VenueCatalog
from .config import configure, is_production
from .database import db, init_db
from .errors import ApiError
from .venue_requests import VenueRequestLifecycle

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Components bound to the request-scoped database session."""

    auth: AuthService
    bookings: BookingLifecycle
    venue_requests: VenueRequestLifecycle
    venues: VenueCatalog
    table_types: TableTypeCatalog


def build_services(app) -> Services:
    session = db.session
    signer = TokenSigner(app.config["SECRET_KEY"], ttl=app.config["TOKEN_TTL_SECONDS"])
    return Services(
        auth=AuthService(session, signer),
        bookings=BookingLifecycle(session),
        venue_requests=VenueRequestLifecycle(session),
        venues=VenueCatalog(session),
        table_types=TableTypeCatalog(session),
    )


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error("Request failed: %s (%s)", error, error.debug)
        return jsonify(error.to_dict(include_debug=not is_production(app))), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"error": error.description, "code": error.name.upper().replace(" ", "_")}), error.code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        logger.exception("Unexpected store error")
        body = {"error": "Server error", "code": "STORE_ERROR"}
        if not is_production(app):
            body["debug"] = str(error)
        return jsonify(body), 500

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        return jsonify({"error": "Something went wrong!"}), 500


def create_app(config=None):
    app = Flask(__name__)
    configure(app, config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    CORS(app, origins=app.config["CORS_ORIGINS"])
    init_db(app)
    app.extensions["venue_booking"] = build_services(app)

    from .routes import auth, bookings, catalog, venue_requests

    app.register_blueprint(auth.bp)
    app.register_blueprint(bookings.bp)
    app.register_blueprint(venue_requests.bp)
    app.register_blueprint(catalog.venues_bp)
    app.register_blueprint(catalog.table_types_bp)
    register_error_handlers(app)

    from .cli import register_commands

    register_commands(app)

    @app.route("/health")
    def health():
        return jsonify({"status": "OK", "message": "Server is running"})

    return app
