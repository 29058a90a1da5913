"""Diagnostic channel for recoverable errors.

Recoverable errors (unknown types, duplicate getters, hot reload mismatches,
invariant violations) never propagate. They are logged here so that the
operation that hit them can continue as a no-op.
"""

from __future__ import annotations

import logging

from statetree.exceptions import HotReloadMismatchError, StateTreeError

_logger = logging.getLogger(__name__)

# Logged at WARNING; every other error type is logged at ERROR.
_WARNING_TYPES: tuple[type[StateTreeError], ...] = (HotReloadMismatchError,)


def report(error: StateTreeError, *, level: int | None = None) -> None:
    """Log a recoverable error on the diagnostic channel.

    Args:
        error: The error to report. It is not raised.
        level: Logging level override. Defaults to WARNING for hot reload
            mismatches and ERROR for everything else.
    """
    if level is None:
        level = logging.WARNING if isinstance(error, _WARNING_TYPES) else logging.ERROR
    _logger.log(level, "%s: %s", type(error).__name__, error)
