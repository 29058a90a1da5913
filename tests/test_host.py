"""Tests for host integration."""

import logging

import pytest

from statetree import Store, StoreProvider, resolve_store


def test_provider_install_and_require(store):
    provider = StoreProvider()
    assert not provider.installed
    with pytest.raises(RuntimeError):
        provider.require()

    provider.install(store)

    assert provider.installed
    assert provider.store is store
    assert provider.require() is store


def test_second_install_reported_and_ignored(store, settings, caplog):
    provider = StoreProvider(store)
    other = Store({}, settings=settings)

    with caplog.at_level(logging.ERROR):
        provider.install(other)

    assert provider.store is store
    assert "already installed" in caplog.text


def test_providers_are_independent(store, settings):
    """Installation state lives on each provider, not in the process."""
    first = StoreProvider(store)
    second = StoreProvider(Store({}, settings=settings))

    assert first.store is not second.store


def test_resolve_store_prefers_own_option(store, settings):
    parent = StoreProvider(Store({}, settings=settings))
    assert resolve_store({"store": store}, parent=parent) is store


def test_resolve_store_calls_factory(settings):
    created = []

    def make_store():
        created.append(Store({}, settings=settings))
        return created[-1]

    first = resolve_store({"store": make_store})
    second = resolve_store({"store": make_store})

    assert first is created[0]
    assert second is created[1]
    assert first is not second


def test_resolve_store_falls_back_to_parent(store):
    assert resolve_store({}, parent=StoreProvider(store)) is store
    assert resolve_store({}) is None
