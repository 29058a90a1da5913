"""Module tree: path lookup, namespaces, and runtime registration."""

from statetree.core.tree.core import ModuleTree

__all__ = ["ModuleTree"]
