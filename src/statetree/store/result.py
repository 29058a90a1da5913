"""Action results and their normalization to awaitables.

Usage:
    # Actions can return anything; dispatch always hands back an awaitable:
    return None                 # -> Resolved(None)
    return 42                   # -> Resolved(42)
    return some_future          # -> some_future, unchanged
    async def action(ctx, p)    # -> Task when a loop is running, else the coroutine
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Generator, Sequence
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Resolved(Generic[T]):
    """An already-completed awaitable holding a plain action return value.

    Awaiting it never suspends, so it works with or without an event loop.
    """

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __await__(self) -> Generator[Any, None, T]:
        yield from ()
        return self.value

    def __repr__(self) -> str:
        return f"Resolved({self.value!r})"


def to_awaitable(result: Any) -> Awaitable[Any]:
    """Normalize an action handler's return value to an awaitable.

    Coroutines are scheduled as tasks when an event loop is running, so the
    action body starts without waiting for the caller to await it. Other
    awaitables pass through unchanged.
    """
    if inspect.iscoroutine(result):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return result
        return loop.create_task(result)
    if inspect.isawaitable(result):
        return result
    return Resolved(result)


def gather_results(results: Sequence[Awaitable[Any]]) -> Awaitable[list[Any]]:
    """Aggregate several action results.

    Completes with the list of values once all complete, and fails with the
    first failure (``asyncio.gather`` semantics).
    """
    if all(isinstance(r, Resolved) for r in results):
        return Resolved([r.value for r in results])  # type: ignore[attr-defined]
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return _gather(results)
    return asyncio.gather(*results)


async def _gather(results: Sequence[Awaitable[Any]]) -> list[Any]:
    return list(await asyncio.gather(*results))


def discard_results(results: Sequence[Awaitable[Any]]) -> None:
    """Cancel tasks and close unstarted coroutines nobody will await."""
    for result in results:
        if isinstance(result, asyncio.Future):
            result.cancel()
        elif inspect.iscoroutine(result):
            result.close()
