"""Applies patch groups to the running process, one group as one atomic unit."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from packages.modhelper_shared.errors import PatchError
from packages.modhelper_shared.logging import get_logger

from .declarations import PatchHooks, PatchTarget, declared_targets, resolve_hooks

_LOGGER = get_logger(__name__)

ORIGINAL_ATTRIBUTE = "__modhelper_original__"


@dataclass(frozen=True, slots=True)
class AppliedPatch:
    """Record of one installed wrapper, sufficient to undo it."""

    patch_type: type
    target: PatchTarget
    original: object
    had_own_attribute: bool


class Patcher:
    """Installs and removes the patch groups owned by one mod."""

    def __init__(self, owner_id: str) -> None:
        self.owner_id = owner_id
        self._applied: list[AppliedPatch] = []

    @property
    def applied(self) -> tuple[AppliedPatch, ...]:
        return tuple(self._applied)

    def patch_class(self, cls: type) -> tuple[AppliedPatch, ...]:
        """Apply every target declared on ``cls`` or none of them.

        Classes without declarations are ignored. On failure the targets
        already wrapped by this call are restored before :class:`PatchError`
        is raised, chained to the underlying exception.
        """
        targets = declared_targets(cls)
        if not targets:
            return tuple()

        hooks = resolve_hooks(cls)
        applied: list[AppliedPatch] = []
        for target in targets:
            try:
                applied.append(_install(cls, target, hooks))
            except Exception as exc:
                for record in reversed(applied):
                    _restore(record)
                raise PatchError(
                    f"Patching exception in {cls.__name__} for {target.describe()}"
                ) from exc

        self._applied.extend(applied)
        _LOGGER.debug(
            "patch group applied",
            extra={"owner_id": self.owner_id, "patch_type": cls.__name__},
        )
        return tuple(applied)

    def patch_all(self, types: Iterable[type]) -> None:
        """Apply every patch group without isolation; the first failure propagates."""
        for cls in types:
            self.patch_class(cls)

    def unpatch_all(self) -> None:
        """Restore every original installed by this patcher, newest first."""
        while self._applied:
            _restore(self._applied.pop())


def _install(cls: type, target: PatchTarget, hooks: PatchHooks) -> AppliedPatch:
    """Wrap one target attribute and return the undo record."""
    raw = inspect.getattr_static(target.owner, target.attribute)
    had_own_attribute = target.attribute in vars(target.owner)

    if isinstance(raw, staticmethod):
        wrapped: object = staticmethod(_build_wrapper(raw.__func__, hooks))
    elif isinstance(raw, classmethod):
        wrapped = classmethod(_build_wrapper(raw.__func__, hooks))
    elif callable(raw):
        wrapped = _build_wrapper(raw, hooks)
    else:
        raise TypeError(f"{target.describe()} is not callable")

    setattr(target.owner, target.attribute, wrapped)
    return AppliedPatch(
        patch_type=cls,
        target=target,
        original=raw,
        had_own_attribute=had_own_attribute,
    )


def _restore(record: AppliedPatch) -> None:
    """Put back the attribute captured in ``record``."""
    owner, attribute = record.target.owner, record.target.attribute
    if record.had_own_attribute:
        setattr(owner, attribute, record.original)
    else:
        delattr(owner, attribute)


def _build_wrapper(
    original: Callable[..., object], hooks: PatchHooks
) -> Callable[..., object]:
    """Compose prefix, replacement and postfix hooks around ``original``."""

    @functools.wraps(original)
    def wrapper(*args: object, **kwargs: object) -> object:
        if hooks.prefix is not None and hooks.prefix(*args, **kwargs) is False:
            return None
        if hooks.replacement is not None:
            result = hooks.replacement(original, *args, **kwargs)
        else:
            result = original(*args, **kwargs)
        if hooks.postfix is not None:
            override = hooks.postfix(result, *args, **kwargs)
            if override is not None:
                result = override
        return result

    setattr(wrapper, ORIGINAL_ATTRIBUTE, original)
    return wrapper
