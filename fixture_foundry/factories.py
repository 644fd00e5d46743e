"""Factory Boy helpers wired to the session bound at suite start."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import factory

from .core.errors import FoundryNotBooted


class SessionBinding:
    """Store the session provider installed by the lifecycle hooks.

    The provider is called on every access so a session swapped by the host
    runner (a per-test scoped session, for instance) is picked up.
    """

    def __init__(self) -> None:
        self._provider: Callable[[], Any] | None = None

    @property
    def is_bound(self) -> bool:
        return self._provider is not None

    def bind(self, provider: Callable[[], Any]) -> None:
        """Register the callable returning the SQLAlchemy session."""
        self._provider = provider

    def unbind(self) -> None:
        self._provider = None

    def get(self) -> Any:
        """Return the current SQLAlchemy session.

        Returns
        -------
        sqlalchemy.orm.scoping.scoped_session
            Session the factories persist through.

        Raises
        ------
        FoundryNotBooted
            If factories are used before ``on_suite_start`` ran.
        """
        if self._provider is None:
            raise FoundryNotBooted(
                "Factories session not set. Did the suite start (foundry fixture)?"
            )
        return self._provider()


# One binding per process; pytest-xdist workers each get their own.
session_binding = SessionBinding()


class FoundryFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class for factories persisting through the booted foundry session."""

    class Meta:
        abstract = True
        # A callable keeps Factory Boy lazy: the session is looked up on each
        # create, after the suite has booted.
        sqlalchemy_session_factory = session_binding.get
        sqlalchemy_session_persistence = "flush"


__all__ = ["FoundryFactory", "SessionBinding", "session_binding"]
