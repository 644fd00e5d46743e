"""Suite-scoped setup and teardown invoked by the host test runner."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import factory.random
from faker import Faker

from .container import AppContainer
from .core.config import FoundryConfig
from .core.errors import FoundryNotBooted
from .core.logger import debug_section, end_suite, start_suite
from .factories import SessionBinding, session_binding
from .orm import OrmModule

log = logging.getLogger(__name__)

SECTION = "Foundry"


class LifecycleHooks:
    """
    Bracket a test suite: boot factories at start, reset the schema at end.

    Parameters
    ----------
    config : FoundryConfig
        Validated registry settings.
    orm : OrmModule
        Persistence layer consulted for its own ``cleanup`` flag and used to
        reset the schema.
    state : SessionBinding, optional
        Where the factory session provider is installed. Defaults to the
        process-wide binding used by :class:`~fixture_foundry.factories.FoundryFactory`.

    Notes
    -----
    Schema reset requires *both* ``config.cleanup`` and
    ``orm.get_config("cleanup")``; enabling only one is a no-op.
    """

    def __init__(
        self,
        config: FoundryConfig,
        orm: OrmModule,
        *,
        state: SessionBinding = session_binding,
    ) -> None:
        self.config = config
        self.orm = orm
        self.state = state
        self.container: AppContainer | None = None
        self.suite_id: str | None = None

    @property
    def cleanup_enabled(self) -> bool:
        return bool(self.config.cleanup) and bool(self.orm.get_config("cleanup"))

    @property
    def booted(self) -> bool:
        return self.container is not None

    def on_suite_start(self, container: AppContainer) -> None:
        """Bind the registry to ``container`` for the suite."""
        debug_section(SECTION, "Booting foundry.")
        self.container = container
        self.suite_id = start_suite()
        self.state.bind(container.session)
        if self.config.faker_seed is not None:
            self._seed(self.config.faker_seed)
        log.info("Foundry booted for app %r", container.app.name)

    def on_suite_end(self) -> None:
        """Reset the schema when cleanup is enabled on both sides."""
        if not self.cleanup_enabled:
            return
        debug_section(SECTION, "Resetting database schema.")
        self.orm.reset_schema(self._require_container())

    def on_reconfigure(
        self,
        settings: Mapping[str, Any] | None = None,
        container: AppContainer | None = None,
    ) -> None:
        """Reset if enabled, apply ``settings``, then boot again."""
        target = container or self._require_container()
        if self.cleanup_enabled:
            debug_section(SECTION, "Resetting database schema.")
            self.orm.reset_schema(target)
        self.config = self.config.merged(settings)
        self.on_suite_start(target)

    def close(self) -> None:
        """Release the container and unbind the factory session."""
        self.state.unbind()
        self.container = None
        self.suite_id = None
        end_suite()

    def _require_container(self) -> AppContainer:
        if self.container is None:
            raise FoundryNotBooted()
        return self.container

    @staticmethod
    def _seed(seed: int) -> None:
        log.debug("Seeding Faker and factory_boy random with %s", seed)
        Faker.seed(seed)
        factory.random.reseed_random(seed)


__all__ = ["LifecycleHooks"]
