"""Public API for patch-group declaration and application."""

from .declarations import (
    PatchHooks,
    PatchTarget,
    declared_targets,
    patch,
    resolve_hooks,
)
from .patcher import AppliedPatch, Patcher

__all__ = [
    "AppliedPatch",
    "PatchHooks",
    "PatchTarget",
    "Patcher",
    "declared_targets",
    "patch",
    "resolve_hooks",
]
