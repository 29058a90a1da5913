"""Module functionality: definitions, tree nodes, and validation."""

from statetree.core.module.core import Module
from statetree.core.module.models import (
    ActionDefinition,
    ModuleDefinition,
    action_handler,
    is_root_action,
)
from statetree.core.module.validation import assert_raw_module

__all__ = [
    # Models
    "ModuleDefinition",
    "ActionDefinition",
    "action_handler",
    "is_root_action",
    # Core
    "Module",
    "assert_raw_module",
]
