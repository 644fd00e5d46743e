"""Persistence layer capability backed by Flask-SQLAlchemy."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Any, Protocol

from flask import Flask, current_app, has_app_context
from flask_sqlalchemy import SQLAlchemy

if TYPE_CHECKING:
    from .container import AppContainer

log = logging.getLogger(__name__)


class OrmModule(Protocol):
    def get_config(self, key: str) -> Any: ...
    def reset_schema(self, container: AppContainer) -> None: ...


class SQLAlchemyModule:
    """
    Expose a Flask-SQLAlchemy extension to the lifecycle hooks.

    Parameters
    ----------
    db : flask_sqlalchemy.SQLAlchemy
        Extension whose metadata is dropped and recreated on reset.
    cleanup : bool, optional
        The ORM-side cleanup flag. Schema reset only happens when both this
        flag and the registry's own ``cleanup`` setting are ``True``.
    config : Mapping[str, Any] | None, optional
        Extra module options readable through :meth:`get_config`.
    """

    def __init__(
        self,
        db: SQLAlchemy,
        *,
        cleanup: bool = False,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        self.db = db
        self._config: dict[str, Any] = {**dict(config or {}), "cleanup": bool(cleanup)}

    def get_config(self, key: str) -> Any:
        """Return a module option, ``None`` when unset."""
        return self._config.get(key)

    def reset_schema(self, container: AppContainer) -> None:
        """Drop all tables and recreate the schema inside the app context.

        The active session is removed first so the drop never runs against
        an open transaction.
        """
        with _app_context(container.app):
            log.info("Dropping database schema...")
            self.db.session.remove()
            self.db.drop_all()
            log.info("Recreating database schema...")
            self.db.create_all()


def _app_context(app: Flask) -> AbstractContextManager[Any]:
    """Reuse the active context of ``app``; push a new one otherwise."""
    if has_app_context() and current_app._get_current_object() is app:  # type: ignore[attr-defined]
        return nullcontext()
    return app.app_context()


__all__ = ["OrmModule", "SQLAlchemyModule"]
