"""Tests for runtime registration, unregistration and hot reload.

Critical Invariants:
- Registering at runtime leaves existing entries and state intact
- preserve_state keeps state already present at the path
- Unregistering removes the module, its state and its table entries only
- Static modules cannot be unregistered
- hot_update with the same definition is functionally a no-op
"""

import logging

import pytest

from statetree import ConfigurationError, Store


def make_counter(start=0):
    return {
        "namespaced": True,
        "state": lambda: {"value": start},
        "mutations": {"add": lambda state, n: state.update(value=state["value"] + n)},
        "actions": {"add_twice": lambda ctx, n: (ctx.commit("add", n), ctx.commit("add", n))},
        "getters": {"value": lambda state, *_: state["value"]},
    }


def test_register_module_installs_state_and_handlers(store):
    store.commit("cart/push", "pen")

    store.register_module("counter", make_counter(5))

    assert store.has_module("counter")
    assert store.state["counter"] == {"value": 5}
    store.commit("counter/add", 1)
    assert store.getters["counter/value"] == 6
    # Existing module untouched
    assert store.state["cart"]["items"] == ["pen"]
    assert store.getters["cart/count"] == 1


def test_register_nested_module(store):
    store.register_module(["cart", "coupons"], make_counter())

    assert store.state["cart"]["coupons"] == {"value": 0}
    store.dispatch("cart/coupons/add_twice", 2)
    assert store.state["cart"]["coupons"]["value"] == 4


def test_register_with_preserve_state_keeps_existing_state(settings):
    """Property: registering ['a','b'] onto existing a.b = {x: 1} keeps x."""
    store = Store({"modules": {"a": {"state": {"b": {"x": 1}}}}}, settings=settings)

    store.register_module(
        ["a", "b"],
        {
            "state": {"x": 0, "y": 0},
            "mutations": {"inc": lambda state, _: state.update(x=state["x"] + 1)},
        },
        {"preserve_state": True},
    )

    assert store.state["a"]["b"] == {"x": 1}
    store.commit("inc")
    assert store.state["a"]["b"] == {"x": 2}


def test_register_without_preserve_state_overwrites(settings):
    store = Store({"modules": {"a": {"state": {"b": {"x": 1}}}}}, settings=settings)

    store.register_module(["a", "b"], {"state": {"x": 0}})

    assert store.state["a"]["b"] == {"x": 0}


def test_register_root_rejected(store):
    with pytest.raises(ValueError):
        store.register_module([], {})


def test_register_malformed_module_leaves_store_intact(store):
    with pytest.raises(ConfigurationError):
        store.register_module("bad", {"mutations": {"m": "not callable"}})

    assert not store.has_module("bad")
    assert "bad" not in store.state
    store.dispatch("cart/addAsync", "pen")
    assert store.state["cart"]["items"] == ["pen"]


def test_failed_install_rolls_back_registration(store):
    """A module whose parent state is gone is detached again and the error propagates."""
    store.replace_state({"count": 0})

    with pytest.raises(KeyError):
        store.register_module(["cart", "extra"], make_counter())

    assert not store.has_module(["cart", "extra"])
    assert "cart/extra/add" not in store._mutations
    assert "cart/push" in store._mutations


def test_unregister_removes_module_state_and_entries(store):
    store.register_module("counter", make_counter())
    store.register_module("other", make_counter(3))

    store.unregister_module("counter")

    assert not store.has_module("counter")
    assert "counter" not in store.state
    assert "counter/add" not in store._mutations
    assert "counter/add_twice" not in store._actions
    assert "counter/value" not in store.getters
    # Siblings untouched
    assert store.getters["other/value"] == 3
    store.commit("other/add", 1)
    assert store.state["other"]["value"] == 4
    store.dispatch("cart/addAsync", "pen")
    assert store.state["cart"]["items"] == ["pen"]


def test_unregister_preserves_sibling_state(store):
    store.register_module("counter", make_counter())
    store.commit("cart/push", "pen")
    store.commit("increment", 3)

    store.unregister_module("counter")

    assert store.state == {"count": 3, "cart": {"items": ["pen"]}}


def test_unregister_static_module_is_noop(store):
    """Modules declared at construction cannot be removed."""
    store.commit("cart/push", "pen")

    store.unregister_module("cart")

    assert store.has_module("cart")
    assert store.state["cart"] == {"items": ["pen"]}
    assert "cart/push" in store._mutations


def test_unregister_root_rejected(store):
    with pytest.raises(ValueError):
        store.unregister_module([])


def test_reregister_after_unregister(store):
    store.register_module("counter", make_counter(1))
    store.unregister_module("counter")
    store.register_module("counter", make_counter(7))

    assert store.getters["counter/value"] == 7
    assert len(store._mutations["counter/add"]) == 1


def test_hot_update_swaps_handlers_and_keeps_state(store):
    store.commit("cart/push", "pen")

    store.hot_update(
        {
            "modules": {
                "cart": {
                    "namespaced": True,
                    "mutations": {"push": lambda state, item: state["items"].append(item.upper())},
                    "getters": {"count": lambda state, *_: len(state["items"]) * 100},
                }
            }
        }
    )

    store.commit("cart/push", "ink")
    assert store.state["cart"]["items"] == ["pen", "INK"]
    assert store.getters["cart/count"] == 200
    # Actions were not part of the update and are kept
    store.dispatch("cart/addAsync", "cap")
    assert store.state["cart"]["items"][-1] == "CAP"


def test_hot_update_with_same_definition_is_functionally_identical(cart_definition, settings):
    """Round-trip: tables and state behave identically after a same-definition hot update."""
    definition = {
        "state": {"count": 0},
        "mutations": {"increment": lambda state, n: state.update(count=state["count"] + n)},
        "modules": {"cart": cart_definition},
    }
    store = Store(definition, settings=settings)
    store.commit("cart/push", "pen")
    tables_before = (sorted(store._mutations), sorted(store._actions), sorted(store.getters))
    state_before = repr(store.state)

    store.hot_update(definition)

    tables_after = (sorted(store._mutations), sorted(store._actions), sorted(store.getters))
    assert tables_after == tables_before
    assert repr(store.state) == state_before
    assert store.getters["cart/count"] == 1
    store.dispatch("cart/addAsync", "ink")
    store.commit("increment", 2)
    assert store.state == {"count": 2, "cart": {"items": ["pen", "ink"]}}


def test_malformed_hot_update_leaves_tree_untouched(settings):
    """CRITICAL: a rejected hot update must not surface on a later rebuild.

    Why: the tree and the installed tables must agree, or an unrelated
    unregister_module silently switches on half of the update.
    """
    produced = []
    store = Store(
        {
            "state": {},
            "mutations": {"set": lambda state, _: produced.append("old")},
            "modules": {"a": {"state": {}}},
        },
        settings=settings,
    )

    with pytest.raises(ConfigurationError):
        store.hot_update(
            {
                "mutations": {"set": lambda state, _: produced.append("new")},
                "modules": {"a": {"mutations": {"noop": 42}}},
            }
        )

    store.commit("set")
    store.register_module("tmp", {})
    store.unregister_module("tmp")
    store.commit("set")

    assert produced == ["old", "old"]
    assert "noop" not in store._mutations


def test_hot_update_new_module_reported_and_skipped(store, caplog):
    with caplog.at_level(logging.WARNING):
        store.hot_update({"modules": {"brand_new": {"state": {}}}})

    assert "manual reload is needed" in caplog.text
    assert not store.has_module("brand_new")
    assert store.getters["cart/count"] == 0


def test_hot_update_forces_watchers_to_reevaluate(store):
    seen = []
    store.watch(
        lambda state, getters: getters["cart/count"], lambda new, old: seen.append((new, old))
    )

    store.hot_update(
        {"modules": {"cart": {"namespaced": True, "getters": {"count": lambda state, *_: -1}}}}
    )

    assert seen == [(-1, 0)]


def test_hot_update_can_toggle_namespacing(store):
    store.hot_update({"modules": {"cart": {"namespaced": False}}})

    assert "push" in store._mutations
    assert "cart/push" not in store._mutations
    store.commit("push", "pen")
    assert store.state["cart"]["items"] == ["pen"]
