"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from statetree import Store
from statetree.config import StoreSettings


def increment(state, n):
    state["count"] += n or 1


def push_item(state, item):
    state["items"].append(item)


def add_async(ctx, item):
    ctx.commit("push", item)


def item_count(state, getters, root_state, root_getters):
    return len(state["items"])


@pytest.fixture
def settings():
    """Debug settings, independent of the environment."""
    return StoreSettings(debug=True, strict=False)


@pytest.fixture
def cart_definition():
    """Namespaced cart module with a factory state."""
    return {
        "namespaced": True,
        "state": lambda: {"items": []},
        "mutations": {"push": push_item},
        "actions": {"addAsync": add_async},
        "getters": {"count": item_count},
    }


@pytest.fixture
def store(cart_definition, settings):
    """Store with a root counter and the cart module mounted at 'cart'."""
    return Store(
        {
            "state": {"count": 0},
            "mutations": {"increment": increment},
            "modules": {"cart": cart_definition},
        },
        settings=settings,
    )
