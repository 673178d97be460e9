"""Code unit identity: the Python package a mod is shipped in."""

from __future__ import annotations

import importlib
import importlib.resources
from dataclasses import dataclass, field
from importlib.resources.abc import Traversable

from packages.modhelper_shared.module_loader import (
    discover_unit_modules,
    import_modules,
    iter_defined_types,
)

RESOURCES_DIRECTORY = "resources"


@dataclass(slots=True)
class CodeUnit:
    """One loadable unit of mod code and its unit-wide patching flag.

    ``dont_patch_all`` mirrors the host's "do not auto-apply every patch in
    this unit" switch. Once a mod (or its author) sets it the host leaves
    patch application to that mod.
    """

    root_module: str
    dont_patch_all: bool = False
    _types: tuple[type, ...] | None = field(default=None, repr=False)

    @classmethod
    def for_module(cls, module_name: str) -> CodeUnit:
        """Return the unit owning ``module_name``: its package, or itself if top-level."""
        module = importlib.import_module(module_name)
        if hasattr(module, "__path__"):
            return cls(root_module=module.__name__)
        package = module.__package__ or module.__name__
        return cls(root_module=package)

    @property
    def name(self) -> str:
        """Canonical unit name used for id prefixes and settings files."""
        return self.root_module.rsplit(".", 1)[-1]

    def defer_patching(self) -> bool:
        """Set ``dont_patch_all``; return False when it was already set."""
        if self.dont_patch_all:
            return False
        self.dont_patch_all = True
        return True

    def types(self) -> tuple[type, ...]:
        """Return every class defined in the unit, module by module."""
        if self._types is None:
            seen: set[type] = set()
            ordered: list[type] = []
            modules = import_modules(discover_unit_modules(self.root_module))
            for module in modules:
                for cls in iter_defined_types(module):
                    if cls in seen:
                        continue
                    seen.add(cls)
                    ordered.append(cls)
            self._types = tuple(ordered)
        return self._types

    def read_resources(self) -> dict[str, bytes]:
        """Read embedded files under ``<unit>/resources`` keyed by file stem."""
        try:
            root = importlib.resources.files(self.root_module) / RESOURCES_DIRECTORY
        except (ModuleNotFoundError, TypeError):
            return {}
        if not root.is_dir():
            return {}
        resources: dict[str, bytes] = {}
        for entry in _walk_files(root):
            stem = entry.name.rsplit(".", 1)[0]
            resources.setdefault(stem, entry.read_bytes())
        return resources


def _walk_files(directory: Traversable) -> list[Traversable]:
    """Return files below ``directory`` sorted by name at each level."""
    files: list[Traversable] = []
    for entry in sorted(directory.iterdir(), key=lambda item: item.name):
        if entry.is_dir():
            files.extend(_walk_files(entry))
        elif entry.is_file():
            files.append(entry)
    return files
