"""
Foundry-level exceptions raised by the registry.

These exceptions are **framework-agnostic**: they never depend on pytest,
Flask, or SQLAlchemy. The pytest plugin surfaces them as test failures or
errors; nothing here is retried.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


def describe(entity_type: Any) -> str:
    """Return a readable name for an entity type or factory reference."""
    if isinstance(entity_type, str):
        return entity_type
    module = getattr(entity_type, "__module__", None)
    qualname = getattr(entity_type, "__qualname__", None)
    if module and qualname:
        return f"{module}.{qualname}"
    return repr(entity_type)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class FoundryError(Exception):
    """
    Base class for all registry errors.

    Notes
    -----
    - Raised synchronously to the caller; the registry never retries.
    - Batch operations never return partial results when one is raised.
    """

    pass


class ConfigurationError(FoundryError, ValueError):
    """
    Raised when the registry settings are invalid.

    :param message: Human-readable summary.
    :type message: str
    :param messages: Structured validation messages (field -> errors).
    :type messages: dict[str, Any] | None
    """

    def __init__(self, message: str, messages: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.messages = messages or {}


class ResolutionError(FoundryError):
    """Raised when an entity type cannot be mapped to a factory."""

    pass


# --------------------------------------------------------------------------- #
# Construction-time errors
# --------------------------------------------------------------------------- #


class DuplicateBinding(ConfigurationError):
    """
    Raised when two factories declare the same target entity type.

    :param entity_type: Entity type declared twice.
    :param existing: Factory registered first.
    :param duplicate: Factory that collided with it.
    """

    def __init__(self, entity_type: Any, existing: Any, duplicate: Any) -> None:
        self.entity_type = entity_type
        self.existing = existing
        self.duplicate = duplicate
        super().__init__(
            f"Factories {describe(existing)} and {describe(duplicate)} "
            f"both target {describe(entity_type)}"
        )


class IntrospectionError(ConfigurationError):
    """
    Raised when a factory's declared target type cannot be queried.

    The original diagnostic message is kept verbatim in ``detail`` and the
    underlying exception is chained as ``__cause__`` by the raiser.
    """

    def __init__(self, factory: Any, detail: str) -> None:
        self.factory = factory
        self.detail = detail
        super().__init__(f"Cannot introspect factory {describe(factory)}: {detail}")


# --------------------------------------------------------------------------- #
# Call-time errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class UnknownEntityType(ResolutionError):
    """
    Raised when no factory is registered for the requested entity type.

    :param entity_type: Requested entity type (class or name).
    """

    entity_type: Any

    def __str__(self) -> str:
        return f"No factory registered for {describe(self.entity_type)}"


@dataclass(slots=True)
class AmbiguousEntityType(ResolutionError):
    """
    Raised when a bare class name matches more than one bound entity type.

    :param name: Requested name.
    :param candidates: Bound entity types sharing that name.
    """

    name: str
    candidates: Sequence[Any] = field(default_factory=tuple)

    def __str__(self) -> str:
        choices = ", ".join(describe(c) for c in self.candidates)
        return f"Entity name {self.name!r} is ambiguous; use one of: {choices}"


class FactoryInvocationError(FoundryError):
    """
    Wrap any failure raised while building or persisting an instance.

    :param entity_type: Entity type requested by the caller.
    :param operation: Builder operation (``create``, ``make_many``...).
    :param cause: Original exception, also chained as ``__cause__``.
    """

    def __init__(self, entity_type: Any, operation: str, cause: BaseException) -> None:
        self.entity_type = entity_type
        self.operation = operation
        self.cause = cause
        super().__init__(
            f"{operation}({describe(entity_type)}) failed: "
            f"{type(cause).__name__}: {cause}"
        )


class InvalidCount(FoundryError, ValueError):
    """Raised when a batch size is not a non-negative integer."""

    def __init__(self, count: Any) -> None:
        self.count = count
        super().__init__(f"count must be a non-negative integer, got {count!r}")


class ServiceNotFound(FoundryError, LookupError):
    """Raised when the dependency container has no such service."""

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__(f"Service {service_id!r} is not registered in the container")


class FoundryNotBooted(FoundryError, RuntimeError):
    """Raised when factories or hooks run before ``on_suite_start``."""

    def __init__(self, message: str = "Foundry not booted. Did the suite start?") -> None:
        super().__init__(message)


__all__ = [
    "AmbiguousEntityType",
    "ConfigurationError",
    "DuplicateBinding",
    "FactoryInvocationError",
    "FoundryError",
    "FoundryNotBooted",
    "IntrospectionError",
    "InvalidCount",
    "ResolutionError",
    "ServiceNotFound",
    "UnknownEntityType",
    "describe",
]
