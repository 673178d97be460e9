"""Public shared error API for the mod host."""

from . import codes
from .factories import (
    internal_error,
    lifecycle_error,
    not_found_error,
    patch_error,
    validation_error,
)
from .normalize import exception_to_error, innermost_exception, innermost_message
from .types import (
    ErrorCategory,
    ErrorDetail,
    LifecycleError,
    ModHelperError,
    ModLoadError,
    PatchError,
    SchedulerError,
    SettingsError,
)

__all__ = [
    "ErrorCategory",
    "ErrorDetail",
    "LifecycleError",
    "ModHelperError",
    "ModLoadError",
    "PatchError",
    "SchedulerError",
    "SettingsError",
    "codes",
    "exception_to_error",
    "innermost_exception",
    "innermost_message",
    "internal_error",
    "lifecycle_error",
    "not_found_error",
    "patch_error",
    "validation_error",
]
