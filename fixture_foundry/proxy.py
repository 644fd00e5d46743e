"""Handle returned by factories around the instance they built."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Session

T = TypeVar("T")


class Proxy(Generic[T]):
    """
    Wrap a built instance together with the session that persisted it.

    Parameters
    ----------
    instance : T
        Object produced by the factory.
    session : sqlalchemy.orm.Session | None, optional
        Session the instance was flushed through; ``None`` for transient
        instances or non-ORM factories.

    Notes
    -----
    Callers of the registry never see a proxy: the builder always unwraps.
    """

    __slots__ = ("_instance", "_session")

    def __init__(self, instance: T, session: Session | None = None) -> None:
        self._instance = instance
        self._session = session

    def unwrap(self) -> T:
        """Return the plain instance."""
        return self._instance

    @property
    def is_persisted(self) -> bool:
        """``True`` when the instance has an identity in the backing store."""
        try:
            state = inspect(self._instance)
        except NoInspectionAvailable:
            return False
        return bool(state.persistent or state.detached)

    def refresh(self) -> T:
        """Reload the instance's attributes from the store and return it."""
        if self._session is None or not self.is_persisted:
            return self._instance
        self._session.refresh(self._instance)
        return self._instance

    def __repr__(self) -> str:
        return f"<Proxy {self._instance!r}>"


def unwrap_all(handles: Any) -> list[Any]:
    """Unwrap every handle of a batch result, preserving order."""
    return [handle.unwrap() for handle in handles]


__all__ = ["Proxy", "unwrap_all"]
