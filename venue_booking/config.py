import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-secret-key-CHANGE-ME-IN-PROD"


def _flag(name, default):
    return os.environ.get(name, default) in [True, "True", "true", "1"]


def _origins(value):
    if value.strip() == "*":
        return "*"
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def configure(app, overrides=None):
    """Populate ``app.config`` from the environment (and a .env file, if any).

    ``overrides`` wins over the environment; tests use it to point at an
    in-memory database.
    """
    load_dotenv()
    app.config.update(overrides or {})

    # Ensure instance folder exists for the default SQLite file
    instance_path = Path(app.instance_path)
    instance_path.mkdir(parents=True, exist_ok=True)

    # Flask ships SECRET_KEY=None, so setdefault would never apply here
    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY")
    app.config.setdefault(
        "SQLALCHEMY_DATABASE_URI",
        os.environ.get("DATABASE_URL", f"sqlite:///{instance_path / 'venue_booking.db'}"),
    )
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    app.config.setdefault("APP_ENV", os.environ.get("APP_ENV", "development"))
    app.config.setdefault("TOKEN_TTL_SECONDS", int(os.environ.get("TOKEN_TTL_SECONDS", 24 * 60 * 60)))
    app.config.setdefault("ADMIN_REGISTRATION_ENABLED", _flag("ADMIN_REGISTRATION_ENABLED", "true"))
    app.config.setdefault("AUTO_CREATE_TABLES", _flag("AUTO_CREATE_TABLES", "true"))
    app.config.setdefault("LOG_LEVEL", os.environ.get("LOG_LEVEL", "INFO"))
    app.config.setdefault("PORT", int(os.environ.get("PORT", 3000)))
    app.config.setdefault("CORS_ORIGINS", _origins(os.environ.get("CORS_ORIGINS", "*")))

    if not app.config["SECRET_KEY"]:
        # It is highly recommended to set a strong, long, random key in production
        logger.warning("SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION")
        app.config["SECRET_KEY"] = DEV_SECRET_KEY


def is_production(app) -> bool:
    return app.config.get("APP_ENV") == "production"
