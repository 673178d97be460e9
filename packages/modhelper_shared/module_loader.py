"""Module import and type-enumeration helpers for mod code units."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Iterator

_SKIPPED_SEGMENTS = frozenset({"tests", "deprecated", "generated"})


def import_modules(modules: tuple[str, ...]) -> tuple[ModuleType, ...]:
    """Import modules by dotted name and return them in request order."""
    return tuple(importlib.import_module(module) for module in modules)


def discover_unit_modules(root_module: str) -> tuple[str, ...]:
    """Return the dotted names of every module belonging to one code unit.

    The root itself comes first; for packages, submodules follow in
    ``pkgutil.walk_packages`` order.
    """
    root = importlib.import_module(root_module)
    modules: list[str] = [root.__name__]
    search_path = getattr(root, "__path__", None)
    if search_path is None:
        return tuple(modules)

    for info in pkgutil.walk_packages(search_path, prefix=f"{root.__name__}."):
        if _should_skip(info.name):
            continue
        modules.append(info.name)
    return tuple(modules)


def iter_defined_types(module: ModuleType) -> Iterator[type]:
    """Yield classes defined in ``module`` (not imported into it), in definition order."""
    for value in list(vars(module).values()):
        if inspect.isclass(value) and value.__module__ == module.__name__:
            yield from _walk_nested(value)


def _walk_nested(cls: type) -> Iterator[type]:
    """Yield a class followed by the classes nested in its body."""
    yield cls
    for value in list(vars(cls).values()):
        if (
            inspect.isclass(value)
            and value.__module__ == cls.__module__
            and value.__qualname__.startswith(f"{cls.__qualname__}.")
        ):
            yield from _walk_nested(value)


def _should_skip(module_name: str) -> bool:
    """Exclude test and generated modules from code-unit enumeration."""
    parts = module_name.split(".")
    return any(part in _SKIPPED_SEGMENTS for part in parts[1:])
