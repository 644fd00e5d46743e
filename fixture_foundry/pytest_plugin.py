"""pytest integration: one foundry per test session.

Enable it from a ``conftest.py``::

    pytest_plugins = ["fixture_foundry.pytest_plugin"]

and configure it in ``pyproject.toml``::

    [tool.pytest.ini_options]
    foundry_factories = [
        "tests.factories.user:UserFactory",
    ]
    foundry_cleanup = "true"
    foundry_orm_cleanup = "true"

The project provides the Flask app and its Flask-SQLAlchemy extension by
overriding the ``foundry_app`` and ``foundry_db`` fixtures.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest

from .container import AppContainer
from .core.errors import ConfigurationError
from .core.logger import configure_logging
from .foundry import Foundry, create_foundry
from .orm import SQLAlchemyModule

TRUTHY = {"1", "true", "yes", "y", "on"}


def _as_bool(value: str) -> bool | None:
    """Parse an ini flag; blank means unset."""
    value = (value or "").strip().lower()
    if not value:
        return None
    return value in TRUTHY


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        "foundry_factories",
        "Factory references (module:Class) registered in the foundry catalog.",
        type="linelist",
        default=[],
    )
    parser.addini(
        "foundry_cleanup",
        "Reset the schema at session end (also needs foundry_orm_cleanup).",
        default="",
    )
    parser.addini(
        "foundry_orm_cleanup",
        "ORM-side cleanup flag; schema reset needs this and foundry_cleanup.",
        default="",
    )
    parser.addini("foundry_faker_seed", "Seed for Faker and factory_boy random.", default="")
    parser.addini("foundry_log_level", "Emit JSON foundry logs at this level.", default="")


def pytest_configure(config: pytest.Config) -> None:
    level = str(config.getini("foundry_log_level") or "").strip()
    if level:
        configure_logging(level)


def settings_from_ini(config: pytest.Config) -> dict[str, Any]:
    """Collect foundry settings from the ini file; unset keys are omitted."""
    settings: dict[str, Any] = {"factories": list(config.getini("foundry_factories"))}
    cleanup = _as_bool(config.getini("foundry_cleanup"))
    if cleanup is not None:
        settings["cleanup"] = cleanup
    seed = str(config.getini("foundry_faker_seed") or "").strip()
    if seed:
        settings["faker_seed"] = seed
    return settings


@pytest.fixture(scope="session")
def foundry_app() -> Any:
    """Flask application under test; override in the project's conftest."""
    pytest.fail("Define a session-scoped 'foundry_app' fixture returning the Flask app.")


@pytest.fixture(scope="session")
def foundry_db() -> Any:
    """Flask-SQLAlchemy extension; override in the project's conftest."""
    pytest.fail("Define a session-scoped 'foundry_db' fixture returning the SQLAlchemy extension.")


@pytest.fixture(scope="session")
def foundry_settings(pytestconfig: pytest.Config) -> dict[str, Any]:
    """Raw foundry settings; override to configure from Python instead of ini."""
    return settings_from_ini(pytestconfig)


@pytest.fixture(scope="session")
def foundry_orm(pytestconfig: pytest.Config, foundry_db: Any) -> SQLAlchemyModule:
    cleanup = _as_bool(pytestconfig.getini("foundry_orm_cleanup"))
    return SQLAlchemyModule(foundry_db, cleanup=bool(cleanup))


@pytest.fixture(scope="session")
def foundry(
    foundry_app: Any, foundry_settings: dict[str, Any], foundry_orm: SQLAlchemyModule
) -> Generator[Foundry, None, None]:
    """Suite-scoped registry: booted before the first use, torn down at session end."""
    try:
        registry = create_foundry(foundry_settings, orm=foundry_orm)
    except ConfigurationError as exc:
        pytest.fail(f"Foundry configuration error: {exc} {exc.messages or ''}".strip(), pytrace=False)
    with registry.suite(AppContainer(foundry_app)):
        yield registry
