"""Store models: construction options, call records, and per-call options."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self

from statetree.core.module import ModuleDefinition

if TYPE_CHECKING:
    from statetree.store.store import Store


@dataclass
class StoreOptions(ModuleDefinition):
    """Root module definition plus store-level configuration.

    Passed to Store at construction. Plain mappings with the same keys are
    accepted too.
    """

    plugins: list[Callable[[Store], None]] = field(default_factory=list)
    """Called once with the store after construction, in order."""

    strict: bool | None = None
    """Overrides ``StoreSettings.strict`` when not None."""


@dataclass(frozen=True, slots=True)
class RegisterOptions:
    """Options for Store.register_module."""

    preserve_state: bool = False
    """Keep state already present at the module's path instead of grafting."""

    @classmethod
    def coerce(cls, options: RegisterOptions | Mapping[str, Any] | None) -> Self:
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls(preserve_state=bool(options.get("preserve_state")))


@dataclass(frozen=True, slots=True)
class WatchOptions:
    """Options for Store.watch."""

    deep: bool = False
    """Compare deep copies so in-place changes of the watched value are seen."""

    immediate: bool = False
    """Invoke the callback once right away with ``(value, None)``."""

    sync: bool = True
    """Run on every change. When False, runs are batched to the next tick."""

    @classmethod
    def coerce(cls, options: WatchOptions | Mapping[str, Any] | None) -> Self:
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls(
            deep=bool(options.get("deep", False)),
            immediate=bool(options.get("immediate", False)),
            sync=bool(options.get("sync", True)),
        )


@dataclass(frozen=True, slots=True)
class MutationRecord:
    """What mutation subscribers receive for each commit."""

    type: str
    payload: Any = None


@dataclass(frozen=True, slots=True)
class ActionRecord:
    """What action subscribers receive for each dispatch."""

    type: str
    payload: Any = None
