"""Shared error code constants.

Stable machine-readable codes attached to recorded unit failures.
"""

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"

# Not found
NOT_FOUND = "NOT_FOUND"
PATCH_TARGET_NOT_FOUND = "PATCH_TARGET_NOT_FOUND"

# Unit failures
PATCH_FAILURE = "PATCH_FAILURE"
LIFECYCLE_FAILURE = "LIFECYCLE_FAILURE"

# Internal
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
