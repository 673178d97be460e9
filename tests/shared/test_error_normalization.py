"""Tests for exception normalization into recorded error details."""

from __future__ import annotations

from packages.modhelper_shared.errors import (
    ErrorCategory,
    LifecycleError,
    PatchError,
    codes,
    exception_to_error,
    innermost_exception,
    innermost_message,
)


def _chained() -> PatchError:
    try:
        try:
            raise AttributeError("no attribute 'fire'")
        except AttributeError as inner:
            raise TypeError("bad target") from inner
    except TypeError as middle:
        try:
            raise PatchError("Patching exception in FirePatch") from middle
        except PatchError as outer:
            return outer


def test_innermost_message_follows_the_whole_chain() -> None:
    exc = _chained()

    assert isinstance(innermost_exception(exc), AttributeError)
    assert innermost_message(exc) == "no attribute 'fire'"


def test_innermost_message_falls_back_to_type_name() -> None:
    assert innermost_message(RuntimeError()) == "RuntimeError"


def test_innermost_exception_survives_context_cycles() -> None:
    first = ValueError("first")
    second = ValueError("second")
    first.__context__ = second
    second.__context__ = first

    assert innermost_exception(first) is second


def test_patch_error_with_missing_target_maps_to_not_found_code() -> None:
    detail = exception_to_error(_chained())

    assert detail.category is ErrorCategory.PATCH
    assert detail.code == codes.PATCH_TARGET_NOT_FOUND
    assert detail.metadata["exception_type"] == "PatchError"


def test_lifecycle_and_generic_errors_map_to_categories() -> None:
    assert exception_to_error(LifecycleError("x")).category is ErrorCategory.LIFECYCLE
    assert exception_to_error(ValueError("x")).code == codes.INVALID_ARGUMENT
    assert exception_to_error(KeyError("x")).category is ErrorCategory.NOT_FOUND
    assert exception_to_error(RuntimeError("x")).category is ErrorCategory.INTERNAL
