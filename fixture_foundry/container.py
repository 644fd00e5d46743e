"""Dependency container over a Flask application's extensions."""

from __future__ import annotations

from typing import Any

from flask import Flask

from .core.errors import ServiceNotFound

SESSION_SERVICE = "sqlalchemy"


class AppContainer:
    """Resolve services registered in ``app.extensions``.

    Flask extensions register themselves under a well-known key
    (Flask-SQLAlchemy uses ``"sqlalchemy"``), which serves as the service id.
    """

    def __init__(self, app: Flask) -> None:
        self.app = app

    def get(self, service_id: str) -> Any:
        """Return the service registered as ``service_id``.

        :raises ServiceNotFound: When the app has no such extension.
        """
        try:
            return self.app.extensions[service_id]
        except KeyError as exc:
            raise ServiceNotFound(service_id) from exc

    def has(self, service_id: str) -> bool:
        return service_id in self.app.extensions

    def session(self) -> Any:
        """Return the SQLAlchemy session of the Flask-SQLAlchemy extension."""
        return self.get(SESSION_SERVICE).session

    def __repr__(self) -> str:
        return f"<AppContainer app={self.app.name!r}>"


__all__ = ["AppContainer", "SESSION_SERVICE"]
