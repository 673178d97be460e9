"""Public logging API for the mod host.

This package wraps Python's ``logging`` module with stdout emission defaults
and log fields scoped to the mod or task being handled.
"""

from .config import configure_logging, get_logger
from .context import log_context
from .mod_logger import ModLogger

__all__ = [
    "ModLogger",
    "configure_logging",
    "get_logger",
    "log_context",
]
