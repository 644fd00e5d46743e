"""Materialize entities through the factories bound in a catalog."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .catalog import FactoryCatalog
from .core.errors import FactoryInvocationError, FoundryError, InvalidCount, describe
from .proxy import unwrap_all

log = logging.getLogger(__name__)

Overrides = Mapping[str, Any] | None


def _check_count(count: Any) -> int:
    # bool is an int subclass; ``True`` is not a batch size
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise InvalidCount(count)
    return count


class InstanceBuilder:
    """
    Build single instances or batches, persisted or transient.

    +--------+---------------------+-----------------------+
    |        | persisted           | transient             |
    +========+=====================+=======================+
    | single | :meth:`create`      | :meth:`make`          |
    | batch  | :meth:`create_many` | :meth:`make_many`     |
    +--------+---------------------+-----------------------+

    Every result is unwrapped: callers receive plain model instances, never
    factory handles. Overrides are passed to the factory unvalidated and the
    same overrides apply to every item of a batch.
    """

    def __init__(self, catalog: FactoryCatalog) -> None:
        self.catalog = catalog

    def create(self, entity_type: Any, overrides: Overrides = None) -> Any:
        """Generate and persist one instance.

        .. code-block:: python

            user = builder.create(User)
            admin = builder.create(User, {"is_admin": True})
        """
        factory = self.catalog.resolve(entity_type)
        return self._invoke(
            entity_type, "create", lambda: factory.new(overrides).create().unwrap()
        )

    def create_many(self, entity_type: Any, count: int, overrides: Overrides = None) -> list[Any]:
        """Generate and persist ``count`` instances.

        ``count == 0`` returns ``[]`` without invoking the factory.
        """
        count = _check_count(count)
        factory = self.catalog.resolve(entity_type)
        if count == 0:
            return []
        return self._invoke(
            entity_type,
            "create_many",
            lambda: unwrap_all(factory.create_many(count, overrides)),
            count=count,
        )

    def make(self, entity_type: Any, overrides: Overrides = None) -> Any:
        """Generate one instance without saving it."""
        factory = self.catalog.resolve(entity_type)
        return self._invoke(
            entity_type,
            "make",
            lambda: factory.without_persisting().create(overrides).unwrap(),
        )

    def make_many(self, entity_type: Any, count: int, overrides: Overrides = None) -> list[Any]:
        count = _check_count(count)
        factory = self.catalog.resolve(entity_type)
        if count == 0:
            return []
        return self._invoke(
            entity_type,
            "make_many",
            lambda: unwrap_all(factory.without_persisting().create_many(count, overrides)),
            count=count,
        )

    def _invoke(
        self, entity_type: Any, operation: str, call: Callable[[], Any], count: int = 1
    ) -> Any:
        log.debug(
            "%s %s x%d",
            operation,
            describe(entity_type),
            count,
            extra={"entity": describe(entity_type), "count": count},
        )
        try:
            return call()
        except FoundryError:
            raise
        except Exception as exc:
            log.error("%s(%s) failed", operation, describe(entity_type), exc_info=True)
            raise FactoryInvocationError(entity_type, operation, exc) from exc


__all__ = ["InstanceBuilder"]
