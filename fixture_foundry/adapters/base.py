"""Factory and handle protocols shared by the catalog, builder and adapters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Handle(Protocol):
    def unwrap(self) -> Any: ...


@runtime_checkable
class Factory(Protocol):
    """
    Build (and optionally persist) instances of one entity type.

    Responsibilities:
    - Declare the entity type it builds via ``target_type()``.
    - Return handles; the builder unwraps them.
    - ``without_persisting()`` returns a transient-mode variant of itself.
    """

    def target_type(self) -> Any: ...
    def new(self, overrides: Mapping[str, Any] | None = None) -> Factory: ...
    def create(self, overrides: Mapping[str, Any] | None = None) -> Handle: ...
    def create_many(
        self, count: int, overrides: Mapping[str, Any] | None = None
    ) -> Sequence[Handle]: ...
    def without_persisting(self) -> Factory: ...


CAPABILITY = ("target_type", "new", "create", "create_many", "without_persisting")

__all__ = ["CAPABILITY", "Factory", "Handle"]
