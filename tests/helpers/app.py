"""Minimal Flask application used as the system under test."""

from __future__ import annotations

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData, event
from sqlalchemy.engine import Engine

convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    session_options={"autoflush": False},
    metadata=MetaData(naming_convention=convention),
)


class TestConfig:
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PROPAGATE_EXCEPTIONS = True


def _enable_sqlite_savepoints(engine: Engine) -> None:
    """Let pysqlite honour SAVEPOINTs by emitting BEGIN ourselves."""

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, _record):  # pragma: no cover - driver glue
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):  # pragma: no cover - driver glue
        conn.exec_driver_sql("BEGIN")


def create_app(config: type | object = TestConfig) -> Flask:
    """Build the Flask application with the SQLAlchemy extension bound."""

    app = Flask(__name__)
    app.config.from_object(config)
    db.init_app(app)

    # Ensure models are imported so metadata knows every table
    from tests.helpers import models as _models  # noqa: F401

    with app.app_context():
        _enable_sqlite_savepoints(db.engine)
    return app
