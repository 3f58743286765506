# database.py
import logging
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

db = SQLAlchemy()


# SQLite leaves foreign keys off unless asked per connection
@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(app):
    """Bind the db singleton to the app and optionally create the tables."""
    db.init_app(app)
    if app.config.get("AUTO_CREATE_TABLES", True):
        with app.app_context():
            db.create_all()
            logger.info("Database tables ready")
