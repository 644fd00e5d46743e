"""Unit tests for the factory_boy adapter and the Proxy handle."""

from __future__ import annotations

import pytest

from fixture_foundry.adapters import Factory, FactoryBoyFactory, as_factory, load_reference
from fixture_foundry.adapters.base import CAPABILITY
from fixture_foundry.core.errors import FoundryNotBooted, IntrospectionError
from fixture_foundry.factories import session_binding
from fixture_foundry.proxy import Proxy
from tests.factories.user import CredentialsFactory, UserFactory
from tests.helpers.models import Credentials, Team, User


class TestFactoryBoyFactory:
    def test_target_type_reads_meta_model(self):
        assert FactoryBoyFactory(UserFactory).target_type() is User

    def test_satisfies_capability_protocol(self):
        assert isinstance(FactoryBoyFactory(UserFactory), Factory)

    def test_new_merges_overrides_without_touching_original(self):
        base = FactoryBoyFactory(CredentialsFactory)
        bound = base.new({"secret": "a"}).new({"login": "alice"})

        creds = bound.create().unwrap()
        assert creds == Credentials(login="alice", secret="a")
        assert base.create().unwrap().secret == "s3cret"

    def test_call_overrides_win_over_bound_ones(self):
        bound = FactoryBoyFactory(CredentialsFactory).new({"secret": "a"})

        assert bound.create({"secret": "b"}).unwrap().secret == "b"

    def test_without_persisting_keeps_bound_overrides(self):
        transient = FactoryBoyFactory(CredentialsFactory).new({"secret": "x"}).without_persisting()

        assert transient.persisting is False
        assert transient.create().unwrap().secret == "x"

    def test_build_strategy_needs_no_session(self):
        # Building never asks for a session
        proxy = FactoryBoyFactory(UserFactory).without_persisting().create({"active": False})

        user = proxy.unwrap()
        assert isinstance(user, User)
        assert isinstance(user.team, Team)
        assert user.id is None
        assert user.active is False
        assert proxy.is_persisted is False

    def test_sessionless_factory_batches(self):
        proxies = FactoryBoyFactory(CredentialsFactory).create_many(3, {"secret": "same"})

        assert len(proxies) == 3
        assert all(isinstance(p, Proxy) for p in proxies)
        assert {p.unwrap().secret for p in proxies} == {"same"}

    def test_transient_batches(self):
        proxies = FactoryBoyFactory(UserFactory).without_persisting().create_many(2)

        assert [p.unwrap().id for p in proxies] == [None, None]

    def test_repr_mentions_mode(self):
        adapter = FactoryBoyFactory(UserFactory)

        assert "persist" in repr(adapter)
        assert "transient" in repr(adapter.without_persisting())


class TestReferences:
    def test_load_reference_accepts_colon_and_dot(self):
        assert load_reference("tests.factories.user:UserFactory") is UserFactory
        assert load_reference("tests.factories.user.UserFactory") is UserFactory

    def test_load_reference_failure(self):
        with pytest.raises(IntrospectionError):
            load_reference("tests.no_such_module:Thing")

    def test_as_factory_passes_capability_objects_through(self):
        adapter = FactoryBoyFactory(UserFactory)

        assert as_factory(adapter) is adapter

    def test_as_factory_wraps_classes(self):
        assert as_factory(UserFactory).factory_class is UserFactory

    def test_as_factory_names_every_missing_method(self):
        with pytest.raises(IntrospectionError) as excinfo:
            as_factory(object())

        assert all(f"{name}()" in str(excinfo.value) for name in CAPABILITY)


class TestProxy:
    def test_unwrap_and_refresh_of_plain_object(self):
        creds = Credentials("bob", "pw")
        proxy = Proxy(creds)

        assert proxy.unwrap() is creds
        assert proxy.is_persisted is False
        assert proxy.refresh() is creds
        assert "Credentials" in repr(proxy)


def test_persisting_without_booted_suite_fails(monkeypatch):
    """A FoundryFactory used before suite start reports the missing boot."""
    monkeypatch.setattr(session_binding, "_provider", None)

    with pytest.raises(FoundryNotBooted):
        FactoryBoyFactory(UserFactory).create()
