"""Exception normalization utilities for recorded unit failures."""

from __future__ import annotations

from . import codes
from .factories import (
    internal_error,
    lifecycle_error,
    not_found_error,
    patch_error,
    validation_error,
)
from .types import ErrorDetail, LifecycleError, PatchError


def innermost_exception(exc: BaseException) -> BaseException:
    """Follow ``__cause__``/``__context__`` links down to the root exception."""
    seen: set[int] = {id(exc)}
    current = exc
    while True:
        inner = current.__cause__ or current.__context__
        if inner is None or id(inner) in seen:
            return current
        seen.add(id(inner))
        current = inner


def innermost_message(exc: BaseException) -> str:
    """Return the message of the root exception, falling back to its type name."""
    inner = innermost_exception(exc)
    return str(inner) or type(inner).__name__


def exception_to_error(exc: BaseException) -> ErrorDetail:
    """Normalize a Python exception into an ``ErrorDetail``.

    The message is always the innermost one so wrapper exceptions raised by
    the patch applier do not hide what actually went wrong.
    """
    message = innermost_message(exc)
    metadata = {
        "exception_type": type(exc).__name__,
        "root_exception_type": type(innermost_exception(exc)).__name__,
    }

    if isinstance(exc, PatchError):
        inner = innermost_exception(exc)
        if isinstance(inner, AttributeError):
            return patch_error(
                message, code=codes.PATCH_TARGET_NOT_FOUND, metadata=metadata
            )
        return patch_error(message, metadata=metadata)

    if isinstance(exc, LifecycleError):
        return lifecycle_error(message, metadata=metadata)

    if isinstance(exc, (TypeError, ValueError)):
        return validation_error(message, code=codes.INVALID_ARGUMENT, metadata=metadata)

    if isinstance(exc, (KeyError, LookupError)):
        return not_found_error(message, metadata=metadata)

    return internal_error(message, code=codes.UNEXPECTED_EXCEPTION, metadata=metadata)
