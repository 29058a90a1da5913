"""Exception hierarchy for statetree.

Only ConfigurationError is raised on the normal code path. The other errors are
built and handed to ``statetree.diagnostics.report``, which logs them; they are
exceptions so callers can raise them themselves or match on their type.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class StateTreeError(Exception):
    """Base exception for all statetree errors."""


class ConfigurationError(StateTreeError, ValueError):
    """Malformed module definition (non-callable mutation/getter, bad action).

    Fatal: raised while registering, aborts construction of that module tree.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Sequence[str] = (),
        section: str = "",
        key: str = "",
        value: Any = None,
    ) -> None:
        self.path = tuple(path)
        self.section = section
        self.key = key
        self.value = value
        super().__init__(message)


class UnknownTypeError(StateTreeError):
    """Commit, dispatch or getter access referencing an unregistered type."""

    def __init__(self, message: str, *, type: str = "", kind: str = "") -> None:  # noqa: A002
        self.type = type
        self.kind = kind
        super().__init__(message)


class DuplicateGetterError(StateTreeError):
    """Two modules register a getter under the same full type.

    The first registration wins; the second is reported and dropped.
    """

    def __init__(self, message: str, *, type: str = "") -> None:  # noqa: A002
        self.type = type
        super().__init__(message)


class InvariantViolation(StateTreeError):
    """State mutated outside a committing scope, or API misuse.

    Reported only in debug/strict configuration.
    """


class HotReloadMismatchError(StateTreeError):
    """Hot update introduces a module that is not present in the live tree."""

    def __init__(self, message: str, *, path: Sequence[str] = ()) -> None:
        self.path = tuple(path)
        super().__init__(message)
