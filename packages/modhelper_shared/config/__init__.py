"""Public API for shared mod host configuration utilities."""

from .loader import load_config, load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    BuildVariant,
    HostSettings,
    LoggingSettings,
    ModHelperSettings,
    SchedulerSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "BuildVariant",
    "HostSettings",
    "LoggingSettings",
    "ModHelperSettings",
    "SchedulerSettings",
    "load_config",
    "load_settings",
]
