"""Registry object tying the catalog, builder and lifecycle hooks together."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from flask import Flask

from .builder import InstanceBuilder, Overrides
from .catalog import FactoryCatalog
from .container import AppContainer
from .core.config import FoundryConfig
from .factories import SessionBinding, session_binding
from .lifecycle import LifecycleHooks
from .orm import OrmModule

log = logging.getLogger(__name__)


class Foundry:
    """
    Generate and persist test data through registered factories.

    One instance is built per suite and handed to test code (the pytest
    plugin exposes it as the ``foundry`` fixture).

    .. code-block:: python

        user = foundry.create(User)                       # persisted
        admins = foundry.create_many(User, 3, {"is_admin": True})
        draft = foundry.make(User)                        # not saved
        drafts = foundry.make_many("User", 2)

    Parameters
    ----------
    config : FoundryConfig
        Validated settings; ``config.factories`` seeds the catalog.
    orm : OrmModule
        Persistence layer used by the lifecycle hooks.
    state : SessionBinding, optional
        Session binding shared with the factories.
    """

    def __init__(
        self,
        config: FoundryConfig,
        orm: OrmModule,
        *,
        state: SessionBinding = session_binding,
    ) -> None:
        self.catalog = FactoryCatalog(config.factories)
        self.builder = InstanceBuilder(self.catalog)
        self.hooks = LifecycleHooks(config, orm, state=state)

    @property
    def config(self) -> FoundryConfig:
        return self.hooks.config

    # ------------------------------------------------------------- building

    def create(self, entity_type: Any, overrides: Overrides = None) -> Any:
        return self.builder.create(entity_type, overrides)

    def create_many(self, entity_type: Any, count: int, overrides: Overrides = None) -> list[Any]:
        return self.builder.create_many(entity_type, count, overrides)

    def make(self, entity_type: Any, overrides: Overrides = None) -> Any:
        return self.builder.make(entity_type, overrides)

    def make_many(self, entity_type: Any, count: int, overrides: Overrides = None) -> list[Any]:
        return self.builder.make_many(entity_type, count, overrides)

    def resolve(self, entity_type: Any) -> Any:
        return self.catalog.resolve(entity_type)

    # ------------------------------------------------------------ lifecycle

    def on_suite_start(self, container: AppContainer) -> None:
        self.hooks.on_suite_start(container)

    def on_suite_end(self) -> None:
        self.hooks.on_suite_end()

    def on_reconfigure(
        self,
        settings: Mapping[str, Any] | None = None,
        container: AppContainer | None = None,
    ) -> None:
        """Apply new settings mid-run.

        A changed ``factories`` list builds a fresh catalog; the previous
        catalog is left untouched.
        """
        previous = self.hooks.config.factories
        self.hooks.on_reconfigure(settings, container)
        if self.hooks.config.factories != previous:
            log.info("Factory list changed, rebuilding catalog")
            self.catalog = FactoryCatalog(self.hooks.config.factories)
            self.builder = InstanceBuilder(self.catalog)

    def close(self) -> None:
        self.hooks.close()

    @contextmanager
    def suite(self, container: AppContainer | Flask) -> Iterator[Foundry]:
        """Run ``on_suite_start`` / ``on_suite_end`` around a block."""
        if isinstance(container, Flask):
            container = AppContainer(container)
        self.on_suite_start(container)
        try:
            yield self
        finally:
            try:
                self.on_suite_end()
            finally:
                self.close()


def create_foundry(
    settings: Mapping[str, Any] | FoundryConfig,
    *,
    orm: OrmModule,
    container: AppContainer | Flask | None = None,
    state: SessionBinding = session_binding,
) -> Foundry:
    """Build a :class:`Foundry` from raw settings.

    Parameters
    ----------
    settings:
        Mapping with ``factories`` (required), ``cleanup`` and ``faker_seed``,
        or an already validated :class:`FoundryConfig`.
    orm:
        Persistence layer, usually :class:`~fixture_foundry.orm.SQLAlchemyModule`.
    container:
        When given, the suite is started immediately.
    """
    config = settings if isinstance(settings, FoundryConfig) else FoundryConfig.from_mapping(settings)
    foundry = Foundry(config, orm, state=state)
    if container is not None:
        if isinstance(container, Flask):
            container = AppContainer(container)
        foundry.on_suite_start(container)
    return foundry


__all__ = ["Foundry", "create_foundry"]
