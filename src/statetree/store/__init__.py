"""Store routing layer and module installation.

Architecture Note:
    store/ is the stateful service layer. It owns the state tree and the flat
    dispatch tables compiled from core/'s module tree, and routes commit and
    dispatch calls to the installed handlers.
"""

from statetree.store.context import ActionContext, GetterView, LocalContext, LocalGetters
from statetree.store.installer import (
    install_module,
    register_action,
    register_getter,
    register_mutation,
)
from statetree.store.models import (
    ActionRecord,
    MutationRecord,
    RegisterOptions,
    StoreOptions,
    WatchOptions,
)
from statetree.store.result import Resolved, discard_results, gather_results, to_awaitable
from statetree.store.store import Store
from statetree.store.strict import StrictModeGuard

__all__ = [
    # Store
    "Store",
    "StoreOptions",
    "RegisterOptions",
    "WatchOptions",
    "MutationRecord",
    "ActionRecord",
    # Contexts
    "LocalContext",
    "ActionContext",
    "GetterView",
    "LocalGetters",
    # Installer
    "install_module",
    "register_mutation",
    "register_action",
    "register_getter",
    # Results
    "Resolved",
    "to_awaitable",
    "gather_results",
    "discard_results",
    # Strict mode
    "StrictModeGuard",
]
