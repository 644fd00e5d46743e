"""
Factory capability contracts.

Any object satisfying :class:`Factory` can be registered in the catalog;
factory_boy classes are adapted by :mod:`fixture_foundry.adapters.factory_boy`.
"""

from __future__ import annotations

from .base import CAPABILITY, Factory, Handle
from .factory_boy import FactoryBoyFactory, as_factory, load_reference

__all__ = [
    "CAPABILITY",
    "Factory",
    "FactoryBoyFactory",
    "Handle",
    "as_factory",
    "load_reference",
]
