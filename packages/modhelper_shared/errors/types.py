"""Canonical error types for the mod host.

This module defines the error taxonomy used when a unit of work (a patch
group, a content item, a lifecycle hook) fails and has to be recorded rather
than raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ErrorCategory(str, Enum):
    """High-level error categories for recorded unit failures."""

    UNSPECIFIED = "unspecified"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PATCH = "patch"
    REGISTRATION = "registration"
    LIFECYCLE = "lifecycle"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorDetail:
    """Structured description of one recorded failure."""

    code: str
    message: str
    category: ErrorCategory
    metadata: Mapping[str, str] = field(default_factory=dict)


class ModHelperError(RuntimeError):
    """Base error for all mod host failures."""


class PatchError(ModHelperError):
    """Raised when a patch group cannot be applied as one unit."""


class LifecycleError(ModHelperError):
    """Raised when a mod lifecycle contract is violated."""


class SchedulerError(ModHelperError):
    """Raised when load tasks are scheduled with invalid dependencies."""


class SettingsError(ModHelperError):
    """Raised when a persisted settings blob cannot be used."""


class ModLoadError(ModHelperError):
    """Raised when a module does not expose a loadable mod."""
