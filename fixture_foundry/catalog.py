"""Mapping from entity types to the factories that build them."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .adapters import Factory, as_factory
from .core.errors import (
    AmbiguousEntityType,
    DuplicateBinding,
    FoundryError,
    IntrospectionError,
    UnknownEntityType,
    describe,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FactoryBinding:
    """
    Pair an entity type with the factory declaring it as its target.

    :param entity_type: Model class built by ``factory``.
    :param factory: Factory capability object.
    :param reference: Reference the binding was configured from.
    """

    entity_type: Any
    factory: Factory
    reference: Any = None


class FactoryCatalog:
    """
    Resolve the factory registered for an entity type.

    Parameters
    ----------
    factories : Iterable[Any]
        Factory references in registration order: factory_boy classes,
        dotted import strings, or capability objects.

    Raises
    ------
    DuplicateBinding
        When two factories declare the same target type.
    IntrospectionError
        When a reference cannot be loaded or its target type queried.

    Notes
    -----
    The binding set is fixed at construction; no method mutates it.
    """

    def __init__(self, factories: Iterable[Any]) -> None:
        bindings: dict[Any, FactoryBinding] = {}
        for reference in factories:
            factory = as_factory(reference)
            entity_type = self._target_of(factory, reference)
            if entity_type in bindings:
                raise DuplicateBinding(entity_type, bindings[entity_type].reference, reference)
            bindings[entity_type] = FactoryBinding(entity_type, factory, reference)
            log.debug("Bound %s -> %s", describe(entity_type), describe(reference))

        self._bindings = MappingProxyType(bindings)
        self._names = self._index_names(bindings)

    @staticmethod
    def _target_of(factory: Factory, reference: Any) -> Any:
        try:
            return factory.target_type()
        except FoundryError:
            raise
        except Exception as exc:
            raise IntrospectionError(reference, str(exc)) from exc

    @staticmethod
    def _index_names(bindings: Iterable[Any]) -> dict[str, list[Any]]:
        names: dict[str, list[Any]] = {}
        for entity_type in bindings:
            if isinstance(entity_type, str):
                names.setdefault(entity_type, []).append(entity_type)
                continue
            for key in {getattr(entity_type, "__name__", None), describe(entity_type)}:
                if key:
                    names.setdefault(key, []).append(entity_type)
        return names

    # ------------------------------------------------------------------ lookup

    def resolve(self, entity_type: Any) -> Factory:
        """Return the factory bound to ``entity_type``.

        ``entity_type`` may be the model class itself, its class name
        (``"User"``) or its dotted path (``"app.models.User"``).

        :raises UnknownEntityType: When nothing is bound to it.
        :raises AmbiguousEntityType: When a bare name matches several models.
        """
        return self.binding_for(entity_type).factory

    def binding_for(self, entity_type: Any) -> FactoryBinding:
        binding = self._lookup(entity_type)
        if binding is not None:
            return binding
        log.warning("No factory registered for %s", describe(entity_type))
        raise UnknownEntityType(entity_type)

    # ------------------------------------------------------------- read-only

    @property
    def bindings(self) -> tuple[FactoryBinding, ...]:
        return tuple(self._bindings.values())

    @property
    def entity_types(self) -> tuple[Any, ...]:
        return tuple(self._bindings)

    def _lookup(self, entity_type: Any) -> FactoryBinding | None:
        binding = self._bindings.get(entity_type) if _hashable(entity_type) else None
        if binding is not None or not isinstance(entity_type, str):
            return binding
        candidates = self._names.get(entity_type, [])
        if len(candidates) > 1:
            log.warning("Ambiguous entity name %r", entity_type)
            raise AmbiguousEntityType(entity_type, tuple(candidates))
        return self._bindings[candidates[0]] if candidates else None

    def __contains__(self, entity_type: Any) -> bool:
        try:
            return self._lookup(entity_type) is not None
        except AmbiguousEntityType:
            return True

    def __iter__(self) -> Iterator[FactoryBinding]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        names = ", ".join(describe(t) for t in self._bindings)
        return f"<FactoryCatalog [{names}]>"


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


__all__ = ["FactoryBinding", "FactoryCatalog"]
