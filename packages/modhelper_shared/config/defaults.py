"""Built-in default configuration values for the mod host.

These defaults are the final fallback in the configuration cascade:
CLI params > ENV vars > config file > built-in defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

DEFAULT_DATA_ROOT = Path.home() / ".local" / "share" / "modhelper"

BUILTIN_DEFAULTS: dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "json_output": False,
        "service": "modhelper",
        "environment": "dev",
    },
    "host": {
        "build_variant": "steam",
        "mod_settings_directory": str(DEFAULT_DATA_ROOT / "settings"),
        "mod_sources_directory": str(DEFAULT_DATA_ROOT / "sources"),
        "suppressed_patch_markers": ["Il2CppFacepunch.Steamworks"],
    },
    "scheduler": {
        "max_steps_per_tick": 1,
    },
}
