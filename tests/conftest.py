"""Global pytest fixtures for the foundry test suite."""

from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

import pytest
from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from fixture_foundry.container import AppContainer
from fixture_foundry.factories import SessionBinding
from tests.helpers.app import TestConfig, create_app
from tests.helpers.app import db as _db

pytest_plugins = ["pytester", "fixture_foundry.pytest_plugin"]


@pytest.fixture(scope="session")
def app() -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    Returns
    -------
    Generator[Flask, None, None]
        Application instance with :class:`TestConfig` applied and its
        context pushed for the whole session.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("FOUNDRY_CLEANUP", None)
    os.environ.pop("FOUNDRY_FAKER_SEED", None)
    application = create_app(TestConfig)
    application.logger.setLevel("WARNING")
    with application.app_context():
        yield application


@pytest.fixture()
def db(app: Flask) -> Generator[SQLAlchemy, None, None]:
    """Create tables for one test and drop them afterwards.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    _db.create_all()
    yield _db
    _db.session.remove()
    _db.drop_all()


@pytest.fixture()
def session(db: SQLAlchemy) -> Any:
    """Return the scoped session the factories persist through."""
    return db.session


@pytest.fixture()
def container(app: Flask) -> AppContainer:
    return AppContainer(app)


@pytest.fixture()
def binding() -> SessionBinding:
    """A private session binding so unit tests never touch the shared one."""
    return SessionBinding()


# -- Hook up the foundry plugin to the test application ------------------------
@pytest.fixture(scope="session")
def foundry_app(app: Flask) -> Flask:
    return app


@pytest.fixture(scope="session")
def foundry_db(app: Flask) -> SQLAlchemy:
    return _db
