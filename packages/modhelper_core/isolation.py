"""Uniform catch-and-record wrapper for independently failing units of work.

Patch application and content registration both go through :func:`try_unit`
so the isolation policy lives in one place: ordinary exceptions are captured
into a :class:`UnitResult`, while ``BaseException`` subclasses such as
``KeyboardInterrupt`` and ``SystemExit`` still propagate.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass

from packages.modhelper_shared.errors import (
    ErrorCategory,
    ErrorDetail,
    exception_to_error,
    innermost_message,
)


@dataclass(frozen=True, slots=True)
class UnitResult:
    """Outcome of one isolated unit of work."""

    unit: str
    ok: bool
    error: ErrorDetail | None = None
    exception: Exception | None = None

    @property
    def message(self) -> str | None:
        """Innermost failure message, or ``None`` on success."""
        if self.exception is None:
            return None
        return innermost_message(self.exception)


def try_unit(
    unit: Callable[[], object],
    *,
    name: str,
    category: ErrorCategory | None = None,
) -> UnitResult:
    """Run ``unit`` and convert any ``Exception`` into a failed ``UnitResult``."""
    try:
        unit()
    except Exception as exc:
        detail = exception_to_error(exc)
        if category is not None:
            detail = dataclasses.replace(detail, category=category)
        return UnitResult(unit=name, ok=False, error=detail, exception=exc)
    return UnitResult(unit=name, ok=True)
