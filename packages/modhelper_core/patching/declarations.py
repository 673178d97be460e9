"""Patch-group declarations.

A patch group is a class decorated one or more times with :func:`patch`. Each
decoration names one interception point (``owner.attribute``); the class body
supplies the hooks applied to every point in the group:

- ``prefix(*args, **kwargs)``: runs first; returning ``False`` skips the
  original and the call returns ``None``.
- ``replacement(original, *args, **kwargs)``: runs instead of the original and
  receives it so it can call through.
- ``postfix(result, *args, **kwargs)``: runs last; a non-``None`` return value
  replaces the result.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from packages.modhelper_shared.errors import PatchError

PATCH_TARGETS_ATTRIBUTE = "__modhelper_patch_targets__"
HOOK_NAMES = ("prefix", "replacement", "postfix")

TPatchGroup = TypeVar("TPatchGroup", bound=type)


@dataclass(frozen=True, slots=True)
class PatchTarget:
    """One interception point: a callable attribute on a class or module."""

    owner: object
    attribute: str

    def describe(self) -> str:
        owner_name = getattr(self.owner, "__qualname__", None) or getattr(
            self.owner, "__name__", repr(self.owner)
        )
        return f"{owner_name}.{self.attribute}"


@dataclass(frozen=True, slots=True)
class PatchHooks:
    """Resolved hook callables of one patch group."""

    prefix: Callable[..., object] | None = None
    replacement: Callable[..., object] | None = None
    postfix: Callable[..., object] | None = None


def patch(owner: object, attribute: str) -> Callable[[TPatchGroup], TPatchGroup]:
    """Declare ``owner.attribute`` as an interception point of the decorated class."""
    if not attribute or not isinstance(attribute, str):
        raise ValueError("patch attribute must be a non-empty string")

    def decorator(cls: TPatchGroup) -> TPatchGroup:
        existing = tuple(vars(cls).get(PATCH_TARGETS_ATTRIBUTE, ()))
        # Decorators apply bottom-up; prepend so targets keep source order.
        setattr(cls, PATCH_TARGETS_ATTRIBUTE, (PatchTarget(owner, attribute), *existing))
        return cls

    return decorator


def declared_targets(cls: type) -> tuple[PatchTarget, ...]:
    """Return the targets declared directly on ``cls`` (never inherited ones)."""
    return tuple(vars(cls).get(PATCH_TARGETS_ATTRIBUTE, ()))


def resolve_hooks(cls: type) -> PatchHooks:
    """Collect the hook callables declared on a patch group."""
    resolved: dict[str, Callable[..., object]] = {}
    for hook_name in HOOK_NAMES:
        if hook_name not in vars(cls):
            continue
        hook = getattr(cls, hook_name)
        if not callable(hook):
            raise PatchError(f"{cls.__name__}.{hook_name} must be callable")
        resolved[hook_name] = hook
    if not resolved:
        raise PatchError(
            f"{cls.__name__} declares patch targets but no prefix, replacement or postfix"
        )
    return PatchHooks(**resolved)
