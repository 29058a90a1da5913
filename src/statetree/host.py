"""Host integration: make a store reachable from anywhere in an application.

The installation state lives on the provider instance, so several
applications in one process can each install their own store.

Usage:
    provider = StoreProvider()
    provider.install(store)
    provider.store.commit("increment")

    # Component-style resolution: own store option first, then the parent's.
    child_store = resolve_store({"store": make_store}, parent=provider)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from statetree.diagnostics import report
from statetree.exceptions import InvariantViolation
from statetree.store import Store

_logger = logging.getLogger(__name__)


class StoreHolder(Protocol):
    """Anything exposing an installed store (a provider, a parent component)."""

    @property
    def store(self) -> Store | None: ...


class StoreProvider:
    """Holds the store installed for one application.

    Args:
        store: Optional store to install right away.
    """

    def __init__(self, store: Store | None = None) -> None:
        self._store: Store | None = None
        if store is not None:
            self.install(store)

    @property
    def installed(self) -> bool:
        """Whether a store has been installed."""
        return self._store is not None

    @property
    def store(self) -> Store | None:
        """The installed store, or None."""
        return self._store

    def install(self, store: Store) -> None:
        """Install ``store``. Installing again is reported and ignored."""
        if self._store is not None:
            report(
                InvariantViolation(
                    "already installed. StoreProvider.install() should be called only once."
                )
            )
            return
        self._store = store
        _logger.debug("store installed on %r", self)

    def require(self) -> Store:
        """Return the installed store.

        Raises:
            RuntimeError: If no store has been installed.
        """
        if self._store is None:
            raise RuntimeError("no store installed; call StoreProvider.install() first")
        return self._store


def resolve_store(
    options: Mapping[str, Any],
    parent: StoreHolder | None = None,
) -> Store | None:
    """Resolve the store for a component from its options or its parent.

    ``options["store"]`` may be a Store or a zero-argument factory returning
    one (so each component instance gets a fresh store).
    """
    own: Store | Callable[[], Store] | None = options.get("store")
    if own is not None:
        return own() if callable(own) and not isinstance(own, Store) else own
    if parent is not None:
        return parent.store
    return None
