"""Observation service protocol for swappable getter caches.

The store delegates getter memoization and watching to this service. It only
decides which functions are registered, never how results are cached.

Usage:
    observer = VersionedObserver()
    store = Store(options, observer=observer)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ObservationService(Protocol):
    """Cached derived values, change notification, and deferred callbacks."""

    def reset(self, getters: Mapping[str, Callable[[], Any]], hot: bool = False) -> None:
        """Replace the cached view with one built from ``getters``.

        The superseded view is torn down on the next tick. ``hot`` forces
        every watcher to re-evaluate (used after hot reloading).
        """
        ...

    def read(self, name: str) -> Any:
        """Read a cached getter value, computing it if stale.

        Raises:
            KeyError: If no getter is registered under ``name``.
        """
        ...

    def keys(self) -> Iterator[str]:
        """Iterate registered getter names."""
        ...

    def has(self, name: str) -> bool:
        """Check if a getter is registered under ``name``."""
        ...

    def invalidate(self) -> None:
        """Signal that state changed. Stale values are recomputed on next read."""
        ...

    def watch(
        self,
        expression: Callable[[], Any],
        callback: Callable[[Any, Any], None],
        *,
        deep: bool = False,
        immediate: bool = False,
        sync: bool = True,
    ) -> Callable[[], None]:
        """Call ``callback(new, old)`` whenever ``expression()`` changes.

        Returns:
            Callable that stops watching.
        """
        ...

    def next_tick(self, fn: Callable[[], None]) -> None:
        """Run ``fn`` after the current call stack unwinds."""
        ...
