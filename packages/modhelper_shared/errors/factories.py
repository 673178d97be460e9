"""Builders for :class:`ErrorDetail` values, one per error category."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail


def build_error(
    category: ErrorCategory,
    message: str,
    *,
    code: str,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create an error detail with a private copy of ``metadata``."""
    return ErrorDetail(
        code=code,
        message=message,
        category=category,
        metadata=dict(metadata or {}),
    )


def validation_error(
    message: str,
    *,
    code: str = codes.VALIDATION_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return build_error(ErrorCategory.VALIDATION, message, code=code, metadata=metadata)


def not_found_error(
    message: str,
    *,
    code: str = codes.NOT_FOUND,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return build_error(ErrorCategory.NOT_FOUND, message, code=code, metadata=metadata)


def patch_error(
    message: str,
    *,
    code: str = codes.PATCH_FAILURE,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Failure to install a patch group; ``code`` narrows down the cause."""
    return build_error(ErrorCategory.PATCH, message, code=code, metadata=metadata)


def lifecycle_error(
    message: str,
    *,
    code: str = codes.LIFECYCLE_FAILURE,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return build_error(ErrorCategory.LIFECYCLE, message, code=code, metadata=metadata)


def internal_error(
    message: str,
    *,
    code: str = codes.INTERNAL_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return build_error(ErrorCategory.INTERNAL, message, code=code, metadata=metadata)
