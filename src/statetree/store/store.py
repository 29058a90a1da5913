"""Store: central state tree and mutation/action router.

Usage:
    store = Store({
        "state": {"count": 0},
        "mutations": {"increment": lambda state, n: state.update(count=state["count"] + n)},
        "modules": {"cart": cart_definition},
    })

    store.commit("increment", 1)
    await store.dispatch("cart/checkout", order)

    # Runtime modules
    store.register_module("wishlist", wishlist_definition)
    store.unregister_module("wishlist")

    # Hot reload handlers without losing state
    store.hot_update(new_definition)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from functools import partial
from typing import Any, TypeVar

from statetree.config import StoreSettings
from statetree.core.call import CallOptions, normalize_call
from statetree.core.module import Module, ModuleDefinition
from statetree.core.tree import ModuleTree
from statetree.core.types import get_nested_state, normalize_path
from statetree.diagnostics import report
from statetree.exceptions import InvariantViolation, UnknownTypeError
from statetree.reactive import ObservationService, VersionedObserver
from statetree.store.context import GetterView
from statetree.store.installer import install_module
from statetree.store.models import (
    ActionRecord,
    MutationRecord,
    RegisterOptions,
    StoreOptions,
    WatchOptions,
)
from statetree.store.result import discard_results, gather_results
from statetree.store.strict import StrictModeGuard

_logger = logging.getLogger(__name__)

SubscriberT = TypeVar("SubscriberT", bound=Callable[..., Any])


class Store:
    """Single state tree with flat mutation, action and getter tables.

    The module tree is compiled into the tables at construction and again
    on every runtime registration change. Handlers only ever see state through
    their module's LocalContext.

    Args:
        options: Root module definition plus plugins and strict flag.
        settings: Diagnostics settings. Defaults to ``StoreSettings()``,
            which reads ``STATETREE_*`` environment variables.
        observer: Getter cache and watch backend. Defaults to VersionedObserver.
    """

    def __init__(
        self,
        options: StoreOptions | Mapping[str, Any] | None = None,
        *,
        settings: StoreSettings | None = None,
        observer: ObservationService | None = None,
    ) -> None:
        store_options = StoreOptions.from_raw(options if options is not None else {})
        self.settings = settings or StoreSettings()
        self.strict = (
            store_options.strict if store_options.strict is not None else self.settings.strict
        )

        self._committing = False
        self._actions: dict[str, list[Callable[[Any], Any]]] = {}
        self._action_subscribers: list[Callable[[ActionRecord, Any], None]] = []
        self._mutations: dict[str, list[Callable[[Any], None]]] = {}
        self._wrapped_getters: dict[str, Callable[[Store], Any]] = {}
        self._modules = ModuleTree(store_options)
        self._modules_namespace_map: dict[str, Module] = {}
        self._subscribers: list[Callable[[MutationRecord, Any], None]] = []
        self._observer: ObservationService = observer or VersionedObserver()
        self._getters = GetterView(self)

        self._state: Any = self._modules.root.state
        self._strict_guard = StrictModeGuard(lambda: self._state) if self.strict else None

        install_module(self, self._state, (), self._modules.root)
        self._reset_observer()

        for plugin in store_options.plugins:
            plugin(self)

    @property
    def state(self) -> Any:
        """Root state. Replace it with ``replace_state``, never by assignment."""
        return self._state

    @state.setter
    def state(self, value: Any) -> None:
        if self.settings.debug:
            report(InvariantViolation("use store.replace_state() to explicit replace store state."))

    @property
    def getters(self) -> GetterView:
        """Cached getters keyed by full type."""
        return self._getters

    def commit(
        self,
        type_: str | Mapping[str, Any],
        payload: Any = None,
        options: CallOptions | Mapping[str, Any] | None = None,
    ) -> None:
        """Run every mutation handler registered for a type, then notify subscribers.

        Accepts ``commit(type, payload, options)`` or ``commit({"type": ..., ...}, options)``.
        Unknown types are reported and ignored.
        """
        call = normalize_call(type_, payload, options)
        mutation = MutationRecord(type=call.type, payload=call.payload)
        entry = self._mutations.get(call.type)
        if entry is None:
            report(
                UnknownTypeError(
                    f"unknown mutation type: {call.type}", type=call.type, kind="mutation"
                )
            )
            return

        with self._with_commit():
            for handler in list(entry):
                handler(call.payload)

        for subscriber in list(self._subscribers):
            subscriber(mutation, self.state)

        if call.options is not None and call.options.silent:
            _logger.warning(
                "mutation type: %s. Silent option has been removed. "
                "Subscribers are always notified.",
                call.type,
            )

    def dispatch(
        self,
        type_: str | Mapping[str, Any],
        payload: Any = None,
        options: CallOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        """Run every action handler registered for a type.

        Action subscribers are notified before any handler runs.

        ``options`` exists so calls can be forwarded unchanged, including the
        object style ``dispatch({"type": ...}, options)``. The store acts on no
        dispatch option; ``root`` only matters to a namespaced LocalContext.

        Gotcha: Without a running event loop a coroutine action is returned
        unstarted. It only runs once the caller awaits the result, for example
        with ``asyncio.run``. Inside a running loop it is scheduled as a task
        right away.

        Returns:
            The single handler's awaitable unchanged, an aggregate awaitable
            when several handlers are registered, or None for unknown types.
        """
        call = normalize_call(type_, payload, options)
        action = ActionRecord(type=call.type, payload=call.payload)
        self._check_strict()

        for subscriber in list(self._action_subscribers):
            subscriber(action, self.state)

        entry = self._actions.get(call.type)
        if entry is None:
            report(
                UnknownTypeError(f"unknown action type: {call.type}", type=call.type, kind="action")
            )
            return None

        if len(entry) == 1:
            return entry[0](call.payload)

        results: list[Any] = []
        try:
            for handler in list(entry):
                results.append(handler(call.payload))
        except BaseException:
            discard_results(results)
            raise
        return gather_results(results)

    def subscribe(self, fn: Callable[[MutationRecord, Any], None]) -> Callable[[], None]:
        """Call ``fn(mutation, state)`` after every commit.

        Returns:
            Callable that unsubscribes.
        """
        return _generic_subscribe(fn, self._subscribers)

    def subscribe_action(self, fn: Callable[[ActionRecord, Any], None]) -> Callable[[], None]:
        """Call ``fn(action, state)`` before every dispatch.

        Returns:
            Callable that unsubscribes.
        """
        return _generic_subscribe(fn, self._action_subscribers)

    def watch(
        self,
        getter: Callable[[Any, Any], Any],
        callback: Callable[[Any, Any], None],
        options: WatchOptions | Mapping[str, Any] | None = None,
    ) -> Callable[[], None]:
        """Call ``callback(new, old)`` when ``getter(state, getters)`` changes.

        Returns:
            Callable that stops watching.

        Raises:
            TypeError: If ``getter`` is not callable.
        """
        if not callable(getter):
            raise TypeError("store.watch only accepts a function.")
        watch_options = WatchOptions.coerce(options)
        return self._observer.watch(
            lambda: getter(self.state, self.getters),
            callback,
            deep=watch_options.deep,
            immediate=watch_options.immediate,
            sync=watch_options.sync,
        )

    def replace_state(self, state: Any) -> None:
        """Swap the whole root state (e.g. when restoring a snapshot)."""
        with self._with_commit():
            self._state = state

    def has_module(self, path: str | Sequence[str]) -> bool:
        """Check if a module is registered at ``path``."""
        return self._modules.is_registered(path)

    def register_module(
        self,
        path: str | Sequence[str],
        raw: ModuleDefinition | Mapping[str, Any],
        options: RegisterOptions | Mapping[str, Any] | None = None,
    ) -> None:
        """Register and install a runtime module at ``path``.

        With ``preserve_state`` the state already present at ``path`` is kept.

        Raises:
            ValueError: If ``path`` is empty (the root cannot be re-registered).
            ConfigurationError: If the definition is malformed.
        """
        key_path = normalize_path(path)
        if not key_path:
            raise ValueError("cannot register the root module by using register_module.")
        register_options = RegisterOptions.coerce(options)

        module = self._modules.register(key_path, raw)
        try:
            install_module(self, self.state, key_path, module, register_options.preserve_state)
        except Exception:
            self._modules.unregister(key_path)
            self._reset_store()
            raise
        self._reset_observer()
        _logger.debug("registered module %s", "/".join(key_path))

    def unregister_module(self, path: str | Sequence[str]) -> None:
        """Remove a runtime module, its state, and its handlers.

        Modules declared at construction are left untouched.

        Raises:
            ValueError: If ``path`` is empty.
        """
        key_path = normalize_path(path)
        if not key_path:
            raise ValueError("cannot unregister the root module.")

        if not self._modules.unregister(key_path):
            _logger.debug("module %s is not a runtime module, not unregistered", "/".join(key_path))
            return

        with self._with_commit():
            parent_state = get_nested_state(self.state, key_path[:-1])
            parent_state.pop(key_path[-1], None)
        self._reset_store()
        _logger.debug("unregistered module %s", "/".join(key_path))

    def hot_update(self, new_options: ModuleDefinition | Mapping[str, Any]) -> None:
        """Swap handler definitions across the tree, keeping state."""
        self._modules.update(new_options)
        self._reset_store(hot=True)

    def _reset_store(self, hot: bool = False) -> None:
        self._actions = {}
        self._mutations = {}
        self._wrapped_getters = {}
        self._modules_namespace_map = {}
        install_module(self, self.state, (), self._modules.root, True)
        self._reset_observer(hot)

    def _reset_observer(self, hot: bool = False) -> None:
        getters = {key: partial(fn, self) for key, fn in self._wrapped_getters.items()}
        self._observer.reset(getters, hot=hot)

    @contextmanager
    def _with_commit(self) -> Iterator[None]:
        """Run the body as a committing scope. Reentrant."""
        committing = self._committing
        if not committing:
            self._check_strict()
        self._committing = True
        try:
            yield
        finally:
            self._committing = committing
            self._observer.invalidate()
            if self._strict_guard is not None:
                self._strict_guard.snapshot()

    def _check_strict(self) -> None:
        if self._strict_guard is not None and not self._committing:
            self._strict_guard.check()


def _generic_subscribe(fn: SubscriberT, subscribers: list[SubscriberT]) -> Callable[[], None]:
    if fn not in subscribers:
        subscribers.append(fn)

    def unsubscribe() -> None:
        if fn in subscribers:
            subscribers.remove(fn)

    return unsubscribe
