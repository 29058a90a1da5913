"""Module definition models.

A definition is what users author; a Module is the live tree node built from it.

Usage:
    cart = ModuleDefinition(
        namespaced=True,
        state=lambda: {"items": []},
        mutations={"push": lambda state, item: state["items"].append(item)},
        actions={"checkout": ActionDefinition(handler=checkout, root=True)},
    )

Plain mappings with the same keys are accepted anywhere a definition is:

    {"namespaced": True, "state": {...}, "mutations": {...}, "modules": {...}}
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any, Self

from statetree.core.types import ActionHandler


@dataclass(frozen=True, slots=True)
class ActionDefinition:
    """Object-style action entry.

    ``root=True`` registers the action under its bare key even inside a
    namespaced module.
    """

    handler: ActionHandler
    root: bool = False


@dataclass
class ModuleDefinition:
    """Raw module definition.

    Attributes:
        state: Initial state, or a zero-argument factory returning it.
            A factory gives every instantiation its own state object.
        namespaced: Register handlers under ``<segment>/`` prefixes.
        mutations: ``key -> (state, payload) -> None``.
        actions: ``key -> handler | ActionDefinition | {"handler": ..., "root": ...}``.
        getters: ``key -> (state, getters, root_state, root_getters) -> value``.
        modules: Child definitions keyed by path segment.
    """

    state: Any = None
    namespaced: bool = False
    mutations: Mapping[str, Any] | None = None
    actions: Mapping[str, Any] | None = None
    getters: Mapping[str, Any] | None = None
    modules: Mapping[str, Any] | None = None

    @classmethod
    def from_raw(cls, raw: ModuleDefinition | Mapping[str, Any]) -> Self:
        """Coerce a mapping into a definition. Definitions pass through unchanged.

        Unknown mapping keys are ignored.

        Raises:
            TypeError: If raw is neither a definition nor a mapping.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, ModuleDefinition):
            return cls(**{f.name: getattr(raw, f.name) for f in fields(ModuleDefinition)})
        if isinstance(raw, Mapping):
            return cls(**{f.name: raw[f.name] for f in fields(cls) if f.name in raw})
        raise TypeError(f"module definition must be a mapping, got {type(raw).__name__}")

    def resolve_state(self) -> Any:
        """Compute the initial state object. Called once per Module."""
        raw_state = self.state() if callable(self.state) else self.state
        return {} if raw_state is None else raw_state


def action_handler(action: Any) -> Callable[..., Any]:
    """Return the callable of an action entry (``handler`` field if present)."""
    if isinstance(action, Mapping):
        return action["handler"] if "handler" in action else action
    handler = getattr(action, "handler", None)
    return handler if callable(handler) else action


def is_root_action(action: Any) -> bool:
    """Whether an action entry declares itself root-dispatched."""
    if isinstance(action, Mapping):
        return bool(action.get("root"))
    return bool(getattr(action, "root", False))
