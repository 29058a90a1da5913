"""Version-counter observation service.

Every state change bumps a single counter. Getter values are memoized
together with the version they were computed at, and recomputed on the first
read after the counter moved. Watchers are re-evaluated on every bump.

Usage:
    observer = VersionedObserver()
    observer.reset({"total": lambda: sum(state["items"])})
    observer.read("total")
    observer.invalidate()  # after mutating state
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Callable, Iterator, Mapping
from typing import Any


class ComputedView:
    """Memoized getters for one install pass of the store.

    Args:
        getters: Getter name to zero-argument function.
        version: Returns the current state version.
    """

    def __init__(self, getters: Mapping[str, Callable[[], Any]], version: Callable[[], int]):
        self._getters = dict(getters)
        self._version = version
        self._cache: dict[str, tuple[int, Any]] = {}
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def read(self, name: str) -> Any:
        if self._disposed:
            raise RuntimeError("computed view has been disposed")
        fn = self._getters[name]
        version = self._version()
        cached = self._cache.get(name)
        if cached is not None and cached[0] == version:
            return cached[1]
        value = fn()
        self._cache[name] = (version, value)
        return value

    def keys(self) -> Iterator[str]:
        return iter(list(self._getters))

    def __contains__(self, name: object) -> bool:
        return name in self._getters

    def dispose(self) -> None:
        self._cache.clear()
        self._getters.clear()
        self._disposed = True


class _Watcher:
    """One watched expression and the last value it produced."""

    def __init__(
        self,
        expression: Callable[[], Any],
        callback: Callable[[Any, Any], None],
        deep: bool,
        sync: bool,
    ):
        self.expression = expression
        self.callback = callback
        self.deep = deep
        self.sync = sync
        self.active = True
        self.value = self._capture(expression())

    def _capture(self, value: Any) -> Any:
        return copy.deepcopy(value) if self.deep else value

    def run(self) -> None:
        if not self.active:
            return
        new = self.expression()
        old = self.value
        if self.deep:
            changed = new != old
        else:
            changed = new is not old and new != old
        if changed:
            self.value = self._capture(new)
            self.callback(new, old)


class VersionedObserver:
    """Default ObservationService: version counter plus memoized getters.

    Gotcha: Only changes announced through ``invalidate`` are observed. The
    store announces every committing scope, so mutations made outside
    mutation handlers can leave getters stale.
    """

    def __init__(self) -> None:
        self._version = 0
        self._view = ComputedView({}, self._current_version)
        self._watchers: list[_Watcher] = []
        self._pending: list[_Watcher] = []
        self._flush_scheduled = False

    @property
    def version(self) -> int:
        """Current state version. Increases on every invalidate."""
        return self._version

    def _current_version(self) -> int:
        return self._version

    def reset(self, getters: Mapping[str, Callable[[], Any]], hot: bool = False) -> None:
        old_view = self._view
        self._view = ComputedView(getters, self._current_version)
        if hot:
            self.invalidate()
        self.next_tick(old_view.dispose)

    def read(self, name: str) -> Any:
        return self._view.read(name)

    def keys(self) -> Iterator[str]:
        return self._view.keys()

    def has(self, name: str) -> bool:
        return name in self._view

    def invalidate(self) -> None:
        self._version += 1
        for watcher in list(self._watchers):
            if watcher.sync:
                watcher.run()
            elif watcher not in self._pending:
                self._pending.append(watcher)
        if self._pending and not self._flush_scheduled:
            self._flush_scheduled = True
            self.next_tick(self._flush)

    def _flush(self) -> None:
        self._flush_scheduled = False
        pending, self._pending = self._pending, []
        for watcher in pending:
            watcher.run()

    def watch(
        self,
        expression: Callable[[], Any],
        callback: Callable[[Any, Any], None],
        *,
        deep: bool = False,
        immediate: bool = False,
        sync: bool = True,
    ) -> Callable[[], None]:
        watcher = _Watcher(expression, callback, deep=deep, sync=sync)
        self._watchers.append(watcher)
        if immediate:
            callback(watcher.value, None)

        def unwatch() -> None:
            watcher.active = False
            if watcher in self._watchers:
                self._watchers.remove(watcher)

        return unwatch

    def next_tick(self, fn: Callable[[], None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            fn()
            return
        loop.call_soon(fn)
