"""Installer: compiles the module tree into the store's flat dispatch tables.

For every module, in tree order:
    1. graft its state into the parent state (skipped for root and hot installs)
    2. build its LocalContext
    3. register mutations, actions and getters under namespaced types
    4. recurse into children

Usage:
    install_module(store, store.state, (), store._modules.root)
    install_module(store, store.state, ("cart",), cart_module, hot=True)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from statetree.core.module import Module, action_handler, is_root_action
from statetree.core.types import Path, get_nested_state
from statetree.diagnostics import report
from statetree.exceptions import DuplicateGetterError, StateTreeError
from statetree.store.context import ActionContext, LocalContext
from statetree.store.result import to_awaitable

if TYPE_CHECKING:
    from statetree.store.store import Store

_logger = logging.getLogger(__name__)


def install_module(
    store: Store,
    root_state: Any,
    path: Path,
    module: Module,
    hot: bool = False,
) -> None:
    """Install ``module`` and its subtree into ``store``.

    Args:
        store: Store whose tables are filled.
        root_state: Root state object to graft module states into.
        path: Path of ``module`` from the root.
        module: Module to install.
        hot: Keep state already in place instead of grafting the module's own.

    Raises:
        StateTreeError: If installing ``module`` itself fails. Failures of
            descendants are reported and skipped, leaving siblings installed.
    """
    namespace = store._modules.get_namespace(path)

    if module.namespaced:
        store._modules_namespace_map[namespace] = module

    if path and not hot:
        parent_state = get_nested_state(root_state, path[:-1])
        with store._with_commit():
            parent_state[path[-1]] = module.state

    local = module.context = LocalContext(store, namespace, path)

    module.for_each_mutation(
        lambda mutation, key: register_mutation(store, namespace + key, mutation, local)
    )

    def _install_action(action: Any, key: str) -> None:
        type_ = key if is_root_action(action) else namespace + key
        register_action(store, type_, action_handler(action), local)

    module.for_each_action(_install_action)

    module.for_each_getter(
        lambda getter, key: register_getter(store, namespace + key, getter, local)
    )

    for key, child in module.children():
        child_path = (*path, key)
        try:
            install_module(store, root_state, child_path, child, hot)
        except (StateTreeError, KeyError, TypeError) as e:
            _logger.error("failed to install module %s: %s", "/".join(child_path), e)

    _logger.debug("installed module %r (namespace=%r, hot=%s)", path, namespace, hot)


def register_mutation(
    store: Store, type_: str, handler: Callable[[Any, Any], Any], local: LocalContext
) -> None:
    """Append a mutation wrapper; several modules may share one type."""
    entry = store._mutations.setdefault(type_, [])

    def wrapped_mutation_handler(payload: Any) -> None:
        handler(local.state, payload)

    entry.append(wrapped_mutation_handler)


def register_action(
    store: Store, type_: str, handler: Callable[..., Any], local: LocalContext
) -> None:
    """Append an action wrapper whose result is always awaitable."""
    entry = store._actions.setdefault(type_, [])

    def wrapped_action_handler(payload: Any) -> Any:
        context = ActionContext(
            dispatch=local.dispatch,
            commit=local.commit,
            getters=local.getters,
            state=local.state,
            root_getters=store.getters,
            root_state=store.state,
        )
        return to_awaitable(handler(context, payload))

    entry.append(wrapped_action_handler)


def register_getter(
    store: Store, type_: str, getter: Callable[..., Any], local: LocalContext
) -> None:
    """Store a getter wrapper. The first registration of a type wins."""
    if type_ in store._wrapped_getters:
        report(DuplicateGetterError(f"duplicate getter key: {type_}", type=type_))
        return

    def wrapped_getter(store: Store) -> Any:
        return getter(local.state, local.getters, store.state, store.getters)

    store._wrapped_getters[type_] = wrapped_getter
