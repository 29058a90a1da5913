"""statetree: centralized, hierarchical state container.

Usage:
    from statetree import Store

    cart = {
        "namespaced": True,
        "state": lambda: {"items": []},
        "mutations": {"push": lambda state, item: state["items"].append(item)},
        "actions": {"add": lambda ctx, item: ctx.commit("push", item)},
        "getters": {"count": lambda state, getters, root_state, root_getters: len(state["items"])},
    }

    store = Store({"modules": {"cart": cart}})
    store.dispatch("cart/add", "pen")
    store.state             # {"cart": {"items": ["pen"]}}
    store.getters["cart/count"]  # 1
"""

__version__ = "0.1.0"

# Core primitives
from statetree.core import (
    ActionDefinition,
    CallOptions,
    Module,
    ModuleDefinition,
    ModuleTree,
    Path,
    normalize_path,
)

# Exceptions
from statetree.exceptions import (
    ConfigurationError,
    DuplicateGetterError,
    HotReloadMismatchError,
    InvariantViolation,
    StateTreeError,
    UnknownTypeError,
)

# Helpers
from statetree.helpers import (
    create_namespaced_helpers,
    map_actions,
    map_getters,
    map_mutations,
    map_state,
)

# Host integration
from statetree.host import StoreProvider, resolve_store

# Reactive backends
from statetree.reactive import ObservationService, VersionedObserver

# Store
from statetree.store import (
    ActionContext,
    ActionRecord,
    LocalContext,
    MutationRecord,
    RegisterOptions,
    Store,
    StoreOptions,
    WatchOptions,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Path",
    "normalize_path",
    "CallOptions",
    "Module",
    "ModuleDefinition",
    "ActionDefinition",
    "ModuleTree",
    # Store
    "Store",
    "StoreOptions",
    "RegisterOptions",
    "WatchOptions",
    "MutationRecord",
    "ActionRecord",
    "LocalContext",
    "ActionContext",
    # Reactive
    "ObservationService",
    "VersionedObserver",
    # Helpers
    "map_state",
    "map_getters",
    "map_mutations",
    "map_actions",
    "create_namespaced_helpers",
    # Host
    "StoreProvider",
    "resolve_store",
    # Exceptions
    "StateTreeError",
    "ConfigurationError",
    "UnknownTypeError",
    "DuplicateGetterError",
    "InvariantViolation",
    "HotReloadMismatchError",
]
