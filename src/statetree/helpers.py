"""Binding helpers: build named accessors for state, getters, mutations and actions.

Every mapped function takes the store as its first argument.

Usage:
    accessors = map_state({"count": "count", "double": lambda state, getters: state["count"] * 2})
    accessors["count"](store)

    methods = map_mutations(["increment"])
    methods["increment"](store, 5)           # store.commit("increment", 5)

    cart = create_namespaced_helpers("cart")
    cart.map_actions({"buy": "checkout"})["buy"](store, order)  # "cart/checkout"
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any, TypeAlias

from statetree.core.module import Module
from statetree.diagnostics import report
from statetree.exceptions import UnknownTypeError

if TYPE_CHECKING:
    from statetree.store import Store

MapSpec: TypeAlias = Sequence[str] | Mapping[str, Any]


def _normalize_map(names: MapSpec) -> list[tuple[str, Any]]:
    """``["a", "b"]`` -> ``[("a", "a"), ("b", "b")]``; mappings keep their pairs."""
    if isinstance(names, Mapping):
        return list(names.items())
    return [(key, key) for key in names]


def _normalize_namespace(namespace: str | MapSpec, names: MapSpec | None) -> tuple[str, MapSpec]:
    if not isinstance(namespace, str):
        return "", namespace
    if names is None:
        raise TypeError("a map of names is required after the namespace")
    if namespace and not namespace.endswith("/"):
        namespace += "/"
    return namespace, names


def _get_module_by_namespace(store: Store, helper: str, namespace: str) -> Module | None:
    module = store._modules_namespace_map.get(namespace)
    if module is None:
        report(
            UnknownTypeError(
                f"module namespace not found in {helper}(): {namespace}",
                type=namespace,
                kind="namespace",
            )
        )
    return module


def map_state(
    namespace: str | MapSpec, states: MapSpec | None = None
) -> dict[str, Callable[[Store], Any]]:
    """Map names to state reads. Values are state keys or ``fn(state, getters)``."""
    prefix, names = _normalize_namespace(namespace, states)
    result: dict[str, Callable[[Store], Any]] = {}
    for key, val in _normalize_map(names):

        def mapped_state(store: Store, val: Any = val) -> Any:
            state = store.state
            getters: Any = store.getters
            if prefix:
                module = _get_module_by_namespace(store, "map_state", prefix)
                if module is None or module.context is None:
                    return None
                state = module.context.state
                getters = module.context.getters
            return val(state, getters) if callable(val) else state[val]

        result[key] = mapped_state
    return result


def map_getters(
    namespace: str | MapSpec, getters: MapSpec | None = None
) -> dict[str, Callable[[Store], Any]]:
    """Map names to getters. Values are getter keys local to the namespace."""
    prefix, names = _normalize_namespace(namespace, getters)
    result: dict[str, Callable[[Store], Any]] = {}
    for key, val in _normalize_map(names):
        full_type = prefix + val

        def mapped_getter(store: Store, full_type: str = full_type) -> Any:
            if prefix and _get_module_by_namespace(store, "map_getters", prefix) is None:
                return None
            if full_type not in store.getters:
                report(
                    UnknownTypeError(f"unknown getter: {full_type}", type=full_type, kind="getter")
                )
                return None
            return store.getters[full_type]

        result[key] = mapped_getter
    return result


def map_mutations(
    namespace: str | MapSpec, mutations: MapSpec | None = None
) -> dict[str, Callable[..., Any]]:
    """Map names to commits. Values are mutation types or ``fn(commit, *args)``."""
    prefix, names = _normalize_namespace(namespace, mutations)
    result: dict[str, Callable[..., Any]] = {}
    for key, val in _normalize_map(names):

        def mapped_mutation(store: Store, *args: Any, val: Any = val) -> Any:
            commit: Callable[..., Any] = store.commit
            if prefix:
                module = _get_module_by_namespace(store, "map_mutations", prefix)
                if module is None or module.context is None:
                    return None
                commit = module.context.commit
            return val(commit, *args) if callable(val) else commit(val, *args)

        result[key] = mapped_mutation
    return result


def map_actions(
    namespace: str | MapSpec, actions: MapSpec | None = None
) -> dict[str, Callable[..., Any]]:
    """Map names to dispatches. Values are action types or ``fn(dispatch, *args)``."""
    prefix, names = _normalize_namespace(namespace, actions)
    result: dict[str, Callable[..., Any]] = {}
    for key, val in _normalize_map(names):

        def mapped_action(store: Store, *args: Any, val: Any = val) -> Any:
            dispatch: Callable[..., Any] = store.dispatch
            if prefix:
                module = _get_module_by_namespace(store, "map_actions", prefix)
                if module is None or module.context is None:
                    return None
                dispatch = module.context.dispatch
            return val(dispatch, *args) if callable(val) else dispatch(val, *args)

        result[key] = mapped_action
    return result


@dataclass(frozen=True, slots=True)
class NamespacedHelpers:
    """The four map helpers with a namespace already bound."""

    map_state: Callable[[MapSpec], dict[str, Callable[..., Any]]]
    map_getters: Callable[[MapSpec], dict[str, Callable[..., Any]]]
    map_mutations: Callable[[MapSpec], dict[str, Callable[..., Any]]]
    map_actions: Callable[[MapSpec], dict[str, Callable[..., Any]]]


def create_namespaced_helpers(namespace: str) -> NamespacedHelpers:
    """Bind ``namespace`` into every map helper."""
    return NamespacedHelpers(
        map_state=partial(map_state, namespace),
        map_getters=partial(map_getters, namespace),
        map_mutations=partial(map_mutations, namespace),
        map_actions=partial(map_actions, namespace),
    )
