"""Module: a single node of the module tree.

Usage:
    module = Module(ModuleDefinition(state={"count": 0}), runtime=False)
    module.add_child("cart", Module(cart_definition, runtime=False))

    module.for_each_mutation(lambda handler, key: ...)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from statetree.core.module.models import ModuleDefinition

if TYPE_CHECKING:
    from statetree.store.context import LocalContext


class Module:
    """Tree node wrapping one unit of state plus its handler definitions.

    State is computed once, at construction. ``update`` swaps handler maps
    in place (hot reload) and never touches state or children.

    Args:
        raw: The definition this node is built from.
        runtime: True for modules added through the runtime API. Only runtime
            modules can be unregistered.
    """

    def __init__(self, raw: ModuleDefinition | Mapping[str, Any], runtime: bool) -> None:
        self.runtime = runtime
        self._children: dict[str, Module] = {}
        self._raw = ModuleDefinition.from_raw(raw)
        self.state: Any = self._raw.resolve_state()
        # Set by the installer on every install pass.
        self.context: LocalContext | None = None

    @property
    def namespaced(self) -> bool:
        """Whether this module prefixes its handlers with its path segment."""
        return bool(self._raw.namespaced)

    @property
    def raw(self) -> ModuleDefinition:
        """The definition currently backing this node."""
        return self._raw

    def add_child(self, key: str, module: Module) -> None:
        """Attach a child under ``key``."""
        self._children[key] = module

    def remove_child(self, key: str) -> None:
        """Detach the child under ``key``. Missing keys are ignored."""
        self._children.pop(key, None)

    def get_child(self, key: str) -> Module | None:
        """Return the child under ``key``, or None."""
        return self._children.get(key)

    def has_child(self, key: str) -> bool:
        """Check if a child exists under ``key``."""
        return key in self._children

    def children(self) -> Iterator[tuple[str, Module]]:
        """Iterate ``(key, child)`` pairs in insertion order."""
        return iter(list(self._children.items()))

    def update(self, raw: ModuleDefinition | Mapping[str, Any]) -> None:
        """Hot-swap handler definitions.

        ``namespaced`` is always replaced. Mutations, actions and getters are
        replaced wholesale when the incoming definition provides them.
        """
        incoming = ModuleDefinition.from_raw(raw)
        current = self._raw
        self._raw = ModuleDefinition(
            state=current.state,
            namespaced=incoming.namespaced,
            mutations=incoming.mutations if incoming.mutations is not None else current.mutations,
            actions=incoming.actions if incoming.actions is not None else current.actions,
            getters=incoming.getters if incoming.getters is not None else current.getters,
            modules=current.modules,
        )

    def for_each_child(self, fn: Callable[[Module, str], None]) -> None:
        for key, child in self.children():
            fn(child, key)

    def for_each_getter(self, fn: Callable[[Any, str], None]) -> None:
        _for_each_value(self._raw.getters, fn)

    def for_each_action(self, fn: Callable[[Any, str], None]) -> None:
        _for_each_value(self._raw.actions, fn)

    def for_each_mutation(self, fn: Callable[[Any, str], None]) -> None:
        _for_each_value(self._raw.mutations, fn)

    def __repr__(self) -> str:
        return (
            f"Module(namespaced={self.namespaced}, runtime={self.runtime}, "
            f"children={list(self._children)})"
        )


def _for_each_value(entries: Mapping[str, Any] | None, fn: Callable[[Any, str], None]) -> None:
    if not entries:
        return
    for key, value in list(entries.items()):
        fn(value, key)
