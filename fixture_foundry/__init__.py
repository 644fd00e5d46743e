"""Expose the foundry registry at package level.

Provide convenient access to :func:`fixture_foundry.foundry.create_foundry`
and the error taxonomy so callers can ``from fixture_foundry import ...``
without traversing the package structure.
"""

from __future__ import annotations

from .builder import InstanceBuilder
from .catalog import FactoryBinding, FactoryCatalog
from .container import AppContainer
from .core.config import FoundryConfig
from .core.errors import (
    AmbiguousEntityType,
    ConfigurationError,
    DuplicateBinding,
    FactoryInvocationError,
    FoundryError,
    FoundryNotBooted,
    IntrospectionError,
    InvalidCount,
    ResolutionError,
    ServiceNotFound,
    UnknownEntityType,
)
from .factories import FoundryFactory, session_binding
from .foundry import Foundry, create_foundry
from .lifecycle import LifecycleHooks
from .orm import SQLAlchemyModule
from .proxy import Proxy

__version__ = "0.1.0"

__all__ = [
    "AmbiguousEntityType",
    "AppContainer",
    "ConfigurationError",
    "DuplicateBinding",
    "FactoryBinding",
    "FactoryCatalog",
    "FactoryInvocationError",
    "Foundry",
    "FoundryConfig",
    "FoundryError",
    "FoundryFactory",
    "FoundryNotBooted",
    "InstanceBuilder",
    "IntrospectionError",
    "InvalidCount",
    "LifecycleHooks",
    "Proxy",
    "ResolutionError",
    "SQLAlchemyModule",
    "ServiceNotFound",
    "UnknownEntityType",
    "create_foundry",
    "session_binding",
]
