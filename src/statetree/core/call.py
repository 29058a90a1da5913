"""Argument normalization for commit and dispatch.

Two calling styles are supported:

    store.commit("increment", 10, {"root": True})
    store.commit({"type": "increment", "amount": 10}, {"root": True})

In the object style the whole mapping becomes the payload and the second
argument becomes the options.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CallOptions:
    """Options accepted by commit and dispatch."""

    root: bool = False
    """Namespaced contexts only: address the type globally, without prefixing."""

    silent: bool = False
    """Removed option. Still accepted so it can be reported."""

    @classmethod
    def coerce(cls, options: CallOptions | Mapping[str, Any] | None) -> CallOptions | None:
        """Turn a mapping into CallOptions, passing None and CallOptions through."""
        if options is None or isinstance(options, CallOptions):
            return options
        if isinstance(options, Mapping):
            return cls(root=bool(options.get("root")), silent=bool(options.get("silent")))
        raise TypeError(
            f"expects a mapping or CallOptions as options, but found {type(options).__name__}"
        )


@dataclass(frozen=True, slots=True)
class NormalizedCall:
    """Result of normalize_call."""

    type: str
    payload: Any
    options: CallOptions | None


def normalize_call(
    type_: str | Mapping[str, Any],
    payload: Any = None,
    options: CallOptions | Mapping[str, Any] | None = None,
) -> NormalizedCall:
    """Normalize positional and object-style arguments.

    Raises:
        TypeError: If the resolved type is not a string.
    """
    if isinstance(type_, Mapping) and type_.get("type"):
        options = payload
        payload = type_
        type_ = type_["type"]

    if not isinstance(type_, str):
        raise TypeError(f"expects string as the type, but found {type(type_).__name__}.")

    return NormalizedCall(type=type_, payload=payload, options=CallOptions.coerce(options))
