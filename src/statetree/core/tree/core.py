"""ModuleTree: the module hierarchy addressed by path.

Usage:
    tree = ModuleTree({"state": {...}, "modules": {"cart": cart_definition}})

    tree.get(("cart",))               # -> Module
    tree.get_namespace(("cart",))     # -> "cart/" if cart is namespaced
    tree.register(("wishlist",), wishlist_definition)
    tree.unregister(("wishlist",))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from statetree.core.module import Module, ModuleDefinition, assert_raw_module
from statetree.core.types import Path, normalize_path
from statetree.diagnostics import report
from statetree.exceptions import ConfigurationError, HotReloadMismatchError

_logger = logging.getLogger(__name__)


class ModuleTree:
    """Owns the root Module and every node reachable from it.

    The root definition is registered as static (``runtime=False``), so none of
    the modules declared up front can be unregistered.

    Args:
        raw_root: Definition of the root module, children included.
    """

    def __init__(self, raw_root: ModuleDefinition | Mapping[str, Any]) -> None:
        self.root: Module = self._build((), raw_root, runtime=False)

    def get(self, path: str | Sequence[str]) -> Module:
        """Return the module at ``path``.

        Raises:
            KeyError: If any segment along the path is missing.
        """
        module = self.root
        walked: list[str] = []
        for key in normalize_path(path):
            walked.append(key)
            child = module.get_child(key)
            if child is None:
                raise KeyError(f"module not found: {'/'.join(walked)}")
            module = child
        return module

    def is_registered(self, path: str | Sequence[str]) -> bool:
        """Check if a module exists at ``path``."""
        try:
            self.get(path)
        except KeyError:
            return False
        return True

    def get_namespace(self, path: str | Sequence[str]) -> str:
        """Concatenate ``segment/`` for every namespaced module along ``path``.

        Raises:
            KeyError: If any segment along the path is missing.
        """
        module = self.root
        namespace = ""
        for key in normalize_path(path):
            child = module.get_child(key)
            if child is None:
                raise KeyError(f"module not found: {key}")
            module = child
            if module.namespaced:
                namespace += key + "/"
        return namespace

    def register(
        self,
        path: str | Sequence[str],
        raw: ModuleDefinition | Mapping[str, Any],
        runtime: bool = True,
    ) -> Module:
        """Build a module subtree from ``raw`` and attach it at ``path``.

        The whole subtree is validated and built before it is attached, so a
        malformed child leaves the tree unchanged.

        Returns:
            The newly attached module.

        Raises:
            ConfigurationError: If any definition in the subtree is malformed,
                or a module already exists at ``path``.
            KeyError: If the parent of ``path`` does not exist.
        """
        key_path = normalize_path(path)
        if not key_path:
            self.root = self._build((), raw, runtime)
            return self.root

        parent = self.get(key_path[:-1])
        key = key_path[-1]
        if parent.has_child(key):
            raise ConfigurationError(
                f'module "{".".join(key_path)}" is already registered', path=key_path
            )
        module = self._build(key_path, raw, runtime)
        parent.add_child(key, module)
        return module

    def unregister(self, path: str | Sequence[str]) -> bool:
        """Detach the module at ``path`` if it was registered at runtime.

        Returns:
            True if the module was removed. False for static or missing modules,
            which leave the tree unchanged.
        """
        key_path = normalize_path(path)
        if not key_path:
            return False
        try:
            parent = self.get(key_path[:-1])
        except KeyError:
            _logger.debug("unregister of missing module %s ignored", key_path)
            return False
        key = key_path[-1]
        child = parent.get_child(key)
        if child is None or not child.runtime:
            return False
        parent.remove_child(key)
        return True

    def update(self, raw_root: ModuleDefinition | Mapping[str, Any]) -> None:
        """Hot-swap handlers across the tree, matching nodes by path.

        A child in ``raw_root`` that is missing from the live tree is reported
        and its subtree skipped; sibling subtrees are still updated.

        Every definition that would be applied is validated before any node
        changes, so a malformed definition leaves the whole tree untouched.

        Raises:
            ConfigurationError: If a definition being applied is malformed.
        """
        _validate((), self.root, raw_root)
        _update((), self.root, raw_root)

    def _build(
        self,
        path: Path,
        raw: ModuleDefinition | Mapping[str, Any],
        runtime: bool,
    ) -> Module:
        definition = ModuleDefinition.from_raw(raw)
        assert_raw_module(path, definition)
        module = Module(definition, runtime)
        for key, raw_child in (definition.modules or {}).items():
            module.add_child(key, self._build((*path, key), raw_child, runtime))
        return module


def _validate(path: Path, target: Module, raw: ModuleDefinition | Mapping[str, Any]) -> None:
    definition = ModuleDefinition.from_raw(raw)
    assert_raw_module(path, definition)
    for key, raw_child in (definition.modules or {}).items():
        child = target.get_child(key)
        if child is not None:
            _validate((*path, key), child, raw_child)


def _update(path: Path, target: Module, raw: ModuleDefinition | Mapping[str, Any]) -> None:
    definition = ModuleDefinition.from_raw(raw)
    target.update(definition)

    for key, raw_child in (definition.modules or {}).items():
        child = target.get_child(key)
        if child is None:
            report(
                HotReloadMismatchError(
                    f"trying to add a new module '{key}' on hot reloading, manual reload is needed",
                    path=(*path, key),
                )
            )
            continue
        _update((*path, key), child, raw_child)
