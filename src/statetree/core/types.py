"""Core type definitions for statetree."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

Path: TypeAlias = tuple[str, ...]
"""Ordered segments identifying a module from the root. Empty means root."""

State: TypeAlias = dict[str, Any]
"""A module's state object. Nested module states live under their segment."""

MutationHandler: TypeAlias = Callable[[Any, Any], Any]
"""Raw mutation: ``(local_state, payload) -> None``."""

GetterHandler: TypeAlias = Callable[[Any, Any, Any, Any], Any]
"""Raw getter: ``(local_state, local_getters, root_state, root_getters) -> value``."""

ActionHandler: TypeAlias = Callable[..., Any]
"""Raw action: ``(context, payload) -> value | awaitable``."""


def normalize_path(path: str | Sequence[str]) -> Path:
    """Accept a single segment or a sequence of segments.

    Example:
        >>> normalize_path("cart")
        ('cart',)
        >>> normalize_path(["cart", "items"])
        ('cart', 'items')
    """
    if isinstance(path, str):
        return (path,)
    if not isinstance(path, Sequence):
        raise TypeError(f"module path must be a string or a sequence, got {type(path).__name__}")
    return tuple(path)


def get_nested_state(state: Any, path: Sequence[str]) -> Any:
    """Walk from ``state`` along ``path`` and return the nested state object."""
    for key in path:
        state = state[key]
    return state
