"""Strict mode: detect state mutations made outside mutation handlers.

The store fingerprints its state at the end of every committing scope. Before
the next commit, dispatch, or getter read, the live state is compared with the
fingerprint; any difference was made outside a mutation handler.

Values whose class keeps the identity ``__eq__`` of ``object`` are compared by
their attributes, so plain class instances in state equal their deep copy.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import Any

from statetree.diagnostics import report
from statetree.exceptions import InvariantViolation


def same_structure(
    live: Any, fingerprint: Any, _seen: set[tuple[int, int]] | None = None
) -> bool:
    """Compare ``live`` with a deep copy of an earlier version of it.

    Containers are walked element by element. Objects with a custom ``__eq__``
    use it; other objects are compared through ``vars()`` or ``__slots__``.
    """
    if live is fingerprint:
        return True
    if type(live) is not type(fingerprint):
        return False

    seen = set() if _seen is None else _seen
    pair = (id(live), id(fingerprint))
    if pair in seen:
        return True
    seen.add(pair)

    if isinstance(live, Mapping):
        if live.keys() != fingerprint.keys():
            return False
        return all(same_structure(live[key], fingerprint[key], seen) for key in live)
    if isinstance(live, (list, tuple)):
        return len(live) == len(fingerprint) and all(
            same_structure(a, b, seen) for a, b in zip(live, fingerprint, strict=True)
        )
    if type(live).__eq__ is not object.__eq__:
        return bool(live == fingerprint)
    return same_structure(_attributes(live), _attributes(fingerprint), seen)


def _attributes(value: Any) -> dict[str, Any]:
    attributes = dict(getattr(value, "__dict__", {}))
    for cls in type(value).__mro__:
        for name in getattr(cls, "__slots__", ()):
            if name not in ("__dict__", "__weakref__") and hasattr(value, name):
                attributes[name] = getattr(value, name)
    return attributes


class StrictModeGuard:
    """Fingerprint-and-compare checker for the committing invariant.

    Args:
        read_state: Returns the current root state.
    """

    def __init__(self, read_state: Callable[[], Any]):
        self._read_state = read_state
        self._fingerprint: Any = copy.deepcopy(read_state())

    def snapshot(self) -> None:
        """Record the current state as the last committed state."""
        self._fingerprint = copy.deepcopy(self._read_state())

    def check(self) -> bool:
        """Report a violation if state changed since the last snapshot.

        Returns:
            True if the state is unchanged.
        """
        if same_structure(self._read_state(), self._fingerprint):
            return True
        report(InvariantViolation("do not mutate store state outside mutation handlers."))
        self.snapshot()
        return False
