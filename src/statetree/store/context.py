"""Local contexts: module-scoped views of the store.

Usage:
    # Inside an action of a namespaced module mounted at "cart":
    def checkout(ctx, payload):
        ctx.commit("clear")                       # -> "cart/clear"
        ctx.commit("log", payload, {"root": True})  # -> "log"
        total = ctx.getters["total"]              # -> store.getters["cart/total"]
        items = ctx.state["items"]                # -> store.state["cart"]["items"]
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from statetree.core.call import CallOptions, normalize_call
from statetree.core.types import Path, get_nested_state
from statetree.diagnostics import report
from statetree.exceptions import UnknownTypeError

if TYPE_CHECKING:
    from statetree.store.store import Store


class GetterView(Mapping[str, Any]):
    """Read-only mapping over the store's cached getters.

    Reading an unknown getter reports UnknownTypeError and returns None.
    """

    def __init__(self, store: Store):
        self._store = store

    def __getitem__(self, key: str) -> Any:
        observer = self._store._observer
        if not observer.has(key):
            report(UnknownTypeError(f"unknown getter: {key}", type=key, kind="getter"))
            return None
        self._store._check_strict()
        return observer.read(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._store._observer.has(key)

    def get(self, key: str, default: Any = None) -> Any:
        return self[key] if key in self else default

    def __iter__(self) -> Iterator[str]:
        return self._store._observer.keys()

    def __len__(self) -> int:
        return sum(1 for _ in self._store._observer.keys())

    def __repr__(self) -> str:
        return f"GetterView({list(self)!r})"


class LocalGetters(Mapping[str, Any]):
    """Getters of one namespace, exposed without the namespace prefix.

    Built fresh on every access of ``LocalContext.getters``, so it always
    reflects the getters currently installed.
    """

    def __init__(self, getters: Mapping[str, Any], namespace: str):
        self._getters = getters
        self._namespace = namespace
        split = len(namespace)
        self._local_keys = [key[split:] for key in getters if key.startswith(namespace)]

    def __getitem__(self, key: str) -> Any:
        return self._getters[self._namespace + key]

    def __contains__(self, key: object) -> bool:
        return key in self._local_keys

    def get(self, key: str, default: Any = None) -> Any:
        return self[key] if key in self else default

    def __iter__(self) -> Iterator[str]:
        return iter(self._local_keys)

    def __len__(self) -> int:
        return len(self._local_keys)


class LocalContext:
    """Module-scoped dispatch, commit, getters and state.

    For modules without a namespace, ``dispatch`` and ``commit`` are the
    store's own bound methods. For namespaced modules they prefix the type
    with the namespace unless ``root`` is requested in the options.

    Args:
        store: Owning store.
        namespace: The module's namespace ("" for none).
        path: The module's path from the root.
    """

    def __init__(self, store: Store, namespace: str, path: Path):
        self._store = store
        self.namespace = namespace
        self.path = path
        self.dispatch: Callable[..., Any]
        self.commit: Callable[..., Any]
        if namespace:
            self.dispatch = self._namespaced_dispatch
            self.commit = self._namespaced_commit
        else:
            self.dispatch = store.dispatch
            self.commit = store.commit

    @property
    def getters(self) -> Mapping[str, Any]:
        """Module getters, recomputed on every access."""
        if not self.namespace:
            return self._store.getters
        return LocalGetters(self._store.getters, self.namespace)

    @property
    def state(self) -> Any:
        """Module state, looked up from the current root state on every access."""
        return get_nested_state(self._store.state, self.path)

    def _namespaced_dispatch(
        self,
        type_: str | Mapping[str, Any],
        payload: Any = None,
        options: CallOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        call = normalize_call(type_, payload, options)
        full_type = call.type
        if not (call.options and call.options.root):
            full_type = self.namespace + call.type
            if self._store.settings.debug and full_type not in self._store._actions:
                report(
                    UnknownTypeError(
                        f"unknown local action type: {call.type}, global type: {full_type}",
                        type=full_type,
                        kind="action",
                    )
                )
                return None
        return self._store.dispatch(full_type, call.payload)

    def _namespaced_commit(
        self,
        type_: str | Mapping[str, Any],
        payload: Any = None,
        options: CallOptions | Mapping[str, Any] | None = None,
    ) -> None:
        call = normalize_call(type_, payload, options)
        full_type = call.type
        if not (call.options and call.options.root):
            full_type = self.namespace + call.type
            if self._store.settings.debug and full_type not in self._store._mutations:
                report(
                    UnknownTypeError(
                        f"unknown local mutation type: {call.type}, global type: {full_type}",
                        type=full_type,
                        kind="mutation",
                    )
                )
                return
        self._store.commit(full_type, call.payload, call.options)

    def __repr__(self) -> str:
        return f"LocalContext(namespace={self.namespace!r}, path={self.path!r})"


@dataclass(frozen=True, slots=True)
class ActionContext:
    """First argument of every action handler.

    Built per invocation from the module's LocalContext, so ``state`` and
    ``getters`` are the values current at dispatch time.
    """

    dispatch: Callable[..., Any]
    commit: Callable[..., Any]
    getters: Mapping[str, Any]
    state: Any
    root_getters: Mapping[str, Any]
    root_state: Any
