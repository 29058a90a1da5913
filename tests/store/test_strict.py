"""Tests for strict mode.

Critical Invariants:
- State changes made inside mutation handlers are never reported
- State changes made anywhere else are reported at the next commit, dispatch or getter read
- Strict mode off means no fingerprinting at all
"""

import logging

import pytest

from statetree import Store
from statetree.config import StoreSettings

VIOLATION = "do not mutate store state outside mutation handlers."


@pytest.fixture
def strict_store(cart_definition, settings):
    return Store(
        {
            "strict": True,
            "state": {"count": 0},
            "mutations": {"increment": lambda state, n: state.update(count=state["count"] + 1)},
            "getters": {"count": lambda state, *_: state["count"]},
            "modules": {"cart": cart_definition},
        },
        settings=settings,
    )


def test_mutations_inside_handlers_are_not_reported(strict_store, caplog):
    with caplog.at_level(logging.ERROR):
        strict_store.commit("increment")
        strict_store.dispatch("cart/addAsync", "pen")
        assert strict_store.getters["count"] == 1

    assert VIOLATION not in caplog.text


def test_direct_mutation_reported_on_next_commit(strict_store, caplog):
    strict_store.state["count"] = 99

    with caplog.at_level(logging.ERROR):
        strict_store.commit("increment")

    assert "InvariantViolation" in caplog.text
    assert VIOLATION in caplog.text
    # Reported, not prevented
    assert strict_store.state["count"] == 100


def test_direct_mutation_reported_on_getter_read(strict_store, caplog):
    strict_store.state["cart"]["items"].append("smuggled")

    with caplog.at_level(logging.ERROR):
        strict_store.getters["cart/count"]

    assert VIOLATION in caplog.text


def test_action_mutating_state_directly_is_reported(strict_store, caplog):
    def sneaky(ctx, payload):
        ctx.state["items"].append(payload)

    strict_store.hot_update(
        {"modules": {"cart": {"namespaced": True, "actions": {"sneaky": sneaky}}}}
    )

    with caplog.at_level(logging.ERROR):
        strict_store.dispatch("cart/sneaky", "pen")
        strict_store.commit("increment")

    assert caplog.text.count(VIOLATION) == 1


def test_violation_reported_once_per_change(strict_store, caplog):
    strict_store.state["count"] = 5

    with caplog.at_level(logging.ERROR):
        strict_store.commit("increment")
        strict_store.commit("increment")

    assert caplog.text.count(VIOLATION) == 1


def test_replace_state_is_not_a_violation(strict_store, caplog):
    with caplog.at_level(logging.ERROR):
        strict_store.replace_state({"count": 3, "cart": {"items": []}})
        strict_store.commit("increment")

    assert VIOLATION not in caplog.text
    assert strict_store.state["count"] == 4


def test_strict_from_settings(caplog):
    store = Store({"state": {"x": 0}}, settings=StoreSettings(debug=True, strict=True))
    assert store.strict is True

    store.state["x"] = 1
    with caplog.at_level(logging.ERROR):
        store.dispatch("anything")

    assert VIOLATION in caplog.text


def test_option_overrides_settings():
    store = Store({"strict": False}, settings=StoreSettings(debug=True, strict=True))
    assert store.strict is False
    assert store._strict_guard is None


def test_non_strict_store_does_not_report(store, caplog):
    store.state["count"] = 42

    with caplog.at_level(logging.ERROR):
        store.commit("increment")

    assert VIOLATION not in caplog.text
    assert store._strict_guard is None


class Point:
    """Plain class: equality is identity."""

    def __init__(self, x):
        self.x = x


class SlottedPoint:
    __slots__ = ("x",)

    def __init__(self, x):
        self.x = x


@pytest.fixture
def object_store(settings):
    def move(state, dx):
        state["point"].x += dx

    return Store(
        {
            "strict": True,
            "state": {"point": Point(1), "slotted": SlottedPoint(2), "n": 0},
            "mutations": {
                "inc": lambda state, _: state.update(n=state["n"] + 1),
                "move": move,
            },
        },
        settings=settings,
    )


def test_plain_objects_in_state_are_not_false_positives(object_store, caplog):
    """Why: identity-equality objects never equal their deep copy."""
    with caplog.at_level(logging.ERROR):
        object_store.commit("inc")
        object_store.commit("move", 2)
        object_store.commit("inc")

    assert VIOLATION not in caplog.text
    assert object_store.state["point"].x == 3


def test_attribute_change_outside_mutation_is_reported(object_store, caplog):
    object_store.state["point"].x = 10

    with caplog.at_level(logging.ERROR):
        object_store.commit("inc")

    assert caplog.text.count(VIOLATION) == 1


def test_slotted_attribute_change_outside_mutation_is_reported(object_store, caplog):
    object_store.state["slotted"].x = 10

    with caplog.at_level(logging.ERROR):
        object_store.commit("inc")

    assert caplog.text.count(VIOLATION) == 1
