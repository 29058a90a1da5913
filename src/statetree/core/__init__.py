"""Core functionalities: module definitions, tree nodes, and the module tree.

Architecture Note:
    core/ holds the module data structures and the argument helpers shared by
    the store. Nothing here touches store state or dispatch tables.
    For the stateful routing layer, see store/ and reactive/.
"""

from statetree.core.call import CallOptions, NormalizedCall, normalize_call
from statetree.core.module import (
    ActionDefinition,
    Module,
    ModuleDefinition,
    action_handler,
    assert_raw_module,
    is_root_action,
)
from statetree.core.tree import ModuleTree
from statetree.core.types import Path, get_nested_state, normalize_path

__all__ = [
    # Types
    "Path",
    "normalize_path",
    "get_nested_state",
    # Call
    "CallOptions",
    "NormalizedCall",
    "normalize_call",
    # Module
    "Module",
    "ModuleDefinition",
    "ActionDefinition",
    "action_handler",
    "is_root_action",
    "assert_raw_module",
    # Tree
    "ModuleTree",
]
