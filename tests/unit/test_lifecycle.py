"""Unit tests for the suite lifecycle hooks."""

from __future__ import annotations

import logging

import pytest

from fixture_foundry.core.config import FoundryConfig
from fixture_foundry.core.errors import FoundryNotBooted
from fixture_foundry.core.logger import current_suite_id
from fixture_foundry.lifecycle import LifecycleHooks
from tests.helpers.fakes import FakeOrm, RecordingFactory


class Thing:
    pass


def _hooks(binding, *, cleanup: bool, orm_cleanup: bool, seed: int | None = None):
    config = FoundryConfig(
        factories=(RecordingFactory(Thing),), cleanup=cleanup, faker_seed=seed
    )
    orm = FakeOrm(cleanup=orm_cleanup)
    return LifecycleHooks(config, orm, state=binding), orm


class TestSuiteEnd:
    @pytest.mark.parametrize(
        ("cleanup", "orm_cleanup", "resets"),
        [
            (False, False, 0),
            (True, False, 0),
            (False, True, 0),
            (True, True, 1),
        ],
    )
    def test_reset_requires_both_flags(self, binding, container, cleanup, orm_cleanup, resets):
        hooks, orm = _hooks(binding, cleanup=cleanup, orm_cleanup=orm_cleanup)
        hooks.on_suite_start(container)

        hooks.on_suite_end()

        assert hooks.cleanup_enabled is (resets == 1)
        assert len(orm.resets) == resets
        if resets:
            assert orm.resets[0] is container

    def test_reset_before_boot_fails(self, binding):
        hooks, _ = _hooks(binding, cleanup=True, orm_cleanup=True)

        with pytest.raises(FoundryNotBooted):
            hooks.on_suite_end()

    def test_noop_before_boot_when_cleanup_disabled(self, binding):
        hooks, orm = _hooks(binding, cleanup=True, orm_cleanup=False)

        hooks.on_suite_end()

        assert orm.resets == []

    def test_reset_is_announced(self, binding, container, caplog):
        caplog.set_level(logging.DEBUG, logger="fixture_foundry")
        hooks, _ = _hooks(binding, cleanup=True, orm_cleanup=True)
        hooks.on_suite_start(container)

        hooks.on_suite_end()

        assert "[Foundry] Resetting database schema." in caplog.messages


class TestSuiteStart:
    def test_boot_binds_container_session(self, binding, container, app):
        hooks, _ = _hooks(binding, cleanup=False, orm_cleanup=False)

        hooks.on_suite_start(container)

        assert hooks.booted
        assert hooks.container is container
        assert binding.get() is app.extensions["sqlalchemy"].session
        assert hooks.suite_id is not None
        assert current_suite_id() == hooks.suite_id

    def test_boot_is_announced(self, binding, container, caplog):
        caplog.set_level(logging.DEBUG, logger="fixture_foundry")
        hooks, _ = _hooks(binding, cleanup=False, orm_cleanup=False)

        hooks.on_suite_start(container)

        assert "[Foundry] Booting foundry." in caplog.messages

    def test_seed_applied_when_configured(self, binding, container, monkeypatch):
        seeds: list[tuple[str, int]] = []
        monkeypatch.setattr("faker.Faker.seed", lambda seed: seeds.append(("faker", seed)))
        monkeypatch.setattr(
            "factory.random.reseed_random", lambda seed: seeds.append(("factory", seed))
        )
        hooks, _ = _hooks(binding, cleanup=False, orm_cleanup=False, seed=42)

        hooks.on_suite_start(container)

        assert seeds == [("faker", 42), ("factory", 42)]

    def test_no_seed_by_default(self, binding, container, monkeypatch):
        seeds: list[int] = []
        monkeypatch.setattr("factory.random.reseed_random", seeds.append)
        hooks, _ = _hooks(binding, cleanup=False, orm_cleanup=False)

        hooks.on_suite_start(container)

        assert seeds == []

    def test_close_unbinds(self, binding, container):
        hooks, _ = _hooks(binding, cleanup=False, orm_cleanup=False)
        hooks.on_suite_start(container)

        hooks.close()

        assert not hooks.booted
        assert not binding.is_bound
        assert current_suite_id() is None
        with pytest.raises(FoundryNotBooted):
            binding.get()


class TestReconfigure:
    def test_resets_with_old_flags_then_applies_settings(self, binding, container):
        hooks, orm = _hooks(binding, cleanup=True, orm_cleanup=True)
        hooks.on_suite_start(container)
        first_suite = hooks.suite_id

        hooks.on_reconfigure({"cleanup": False, "faker_seed": 7})

        assert len(orm.resets) == 1
        assert hooks.config.cleanup is False
        assert hooks.config.faker_seed == 7
        assert hooks.suite_id != first_suite
        assert binding.is_bound

    def test_no_reset_when_disabled(self, binding, container):
        hooks, orm = _hooks(binding, cleanup=False, orm_cleanup=True)
        hooks.on_suite_start(container)

        hooks.on_reconfigure({"cleanup": True})

        assert orm.resets == []
        assert hooks.cleanup_enabled is True

    def test_accepts_container_when_not_booted(self, binding, container):
        hooks, _ = _hooks(binding, cleanup=False, orm_cleanup=False)

        hooks.on_reconfigure(None, container)

        assert hooks.container is container

    def test_requires_container(self, binding):
        hooks, _ = _hooks(binding, cleanup=False, orm_cleanup=False)

        with pytest.raises(FoundryNotBooted):
            hooks.on_reconfigure({})
