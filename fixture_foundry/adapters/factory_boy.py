"""Factory capability over factory_boy factory classes."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from factory.base import BaseFactory
from werkzeug.utils import import_string

from ..core.errors import IntrospectionError, describe
from ..proxy import Proxy
from .base import CAPABILITY

log = logging.getLogger(__name__)


def _session_of(factory_cls: type[BaseFactory]) -> Any:
    """Return the SQLAlchemy session a factory persists through, if any."""
    meta = factory_cls._meta
    session_factory = getattr(meta, "sqlalchemy_session_factory", None)
    if session_factory is not None:
        return session_factory()
    return getattr(meta, "sqlalchemy_session", None)


class FactoryBoyFactory:
    """
    Adapt a factory_boy class to the registry's factory capability.

    Parameters
    ----------
    factory_cls : type[factory.base.BaseFactory]
        Concrete (non-abstract) factory class.
    persist : bool, optional
        ``True`` uses factory_boy's create strategy, ``False`` its build
        strategy (no session, no I/O). Defaults to ``True``.
    defaults : Mapping[str, Any] | None, optional
        Overrides captured by :meth:`new`, applied under call-time overrides.

    Notes
    -----
    - Instances are immutable; :meth:`new` and :meth:`without_persisting`
      return copies.
    - Persisted creates run inside ``session.begin_nested()``: a failing
      flush rolls back to the savepoint only, and in a batch one failing
      element rolls back the whole batch.
    """

    __slots__ = ("_factory_cls", "_persist", "_defaults")

    def __init__(
        self,
        factory_cls: type[BaseFactory],
        *,
        persist: bool = True,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self._factory_cls = factory_cls
        self._persist = persist
        self._defaults = dict(defaults or {})

    @property
    def factory_class(self) -> type[BaseFactory]:
        return self._factory_cls

    @property
    def persisting(self) -> bool:
        return self._persist

    def target_type(self) -> Any:
        """Return the model declared in the factory's ``Meta``.

        :raises IntrospectionError: When the factory is abstract or declares
            no model.
        """
        meta = getattr(self._factory_cls, "_meta", None)
        if meta is None:
            raise IntrospectionError(self._factory_cls, "no factory_boy Meta options found")
        model = getattr(meta, "model", None)
        if getattr(meta, "abstract", False) or model is None:
            raise IntrospectionError(
                self._factory_cls, "factory is abstract or declares no Meta.model"
            )
        return model

    def new(self, overrides: Mapping[str, Any] | None = None) -> FactoryBoyFactory:
        return FactoryBoyFactory(
            self._factory_cls,
            persist=self._persist,
            defaults={**self._defaults, **dict(overrides or {})},
        )

    def without_persisting(self) -> FactoryBoyFactory:
        return FactoryBoyFactory(self._factory_cls, persist=False, defaults=self._defaults)

    def create(self, overrides: Mapping[str, Any] | None = None) -> Proxy:
        """Build one instance; flush it unless in transient mode."""
        attrs = self._attributes(overrides)
        if not self._persist:
            return Proxy(self._factory_cls.build(**attrs))
        session = _session_of(self._factory_cls)
        if session is None:
            return Proxy(self._factory_cls.create(**attrs))
        with session.begin_nested():
            instance = self._factory_cls.create(**attrs)
        return Proxy(instance, session)

    def create_many(self, count: int, overrides: Mapping[str, Any] | None = None) -> list[Proxy]:
        """Build ``count`` instances sharing the same overrides."""
        attrs = self._attributes(overrides)
        if not self._persist:
            return [Proxy(obj) for obj in self._factory_cls.build_batch(count, **attrs)]

        session = _session_of(self._factory_cls)
        if session is None:
            instances = self._factory_cls.create_batch(count, **attrs)
        else:
            with session.begin_nested():
                instances = self._factory_cls.create_batch(count, **attrs)
        return [Proxy(obj, session) for obj in instances]

    def _attributes(self, overrides: Mapping[str, Any] | None) -> dict[str, Any]:
        return {**self._defaults, **dict(overrides or {})}

    def __repr__(self) -> str:
        mode = "persist" if self._persist else "transient"
        return f"<FactoryBoyFactory {describe(self._factory_cls)} ({mode})>"


def load_reference(reference: str) -> Any:
    """Import a factory from ``"package.module:Factory"`` or ``"package.module.Factory"``.

    :raises IntrospectionError: With the import error message attached.
    """
    try:
        return import_string(reference)
    except ImportError as exc:
        raise IntrospectionError(reference, str(exc)) from exc


def as_factory(reference: Any) -> Any:
    """Turn a configured factory reference into a factory capability object.

    Accepts dotted import strings, factory_boy classes, and objects already
    implementing the capability.
    """
    if isinstance(reference, str):
        log.debug("Loading factory %s", reference)
        reference = load_reference(reference)
    if isinstance(reference, type) and issubclass(reference, BaseFactory):
        return FactoryBoyFactory(reference)
    missing = [name for name in CAPABILITY if not callable(getattr(reference, name, None))]
    if missing:
        raise IntrospectionError(
            reference,
            "not a factory_boy factory and missing " + ", ".join(f"{m}()" for m in missing),
        )
    return reference


__all__ = ["FactoryBoyFactory", "as_factory", "load_reference"]
