"""Layered settings loading for the mod host.

Sources, highest precedence first:

1. CLI params (already-parsed mapping)
2. ``MODHELPER_*`` environment variables, ``__`` separating nested keys,
   e.g. ``MODHELPER_HOST__BUILD_VARIANT=epic``
3. the YAML file (``~/.config/modhelper/modhelper.yaml`` unless overridden)
4. :data:`BUILTIN_DEFAULTS`

Environment values are parsed as YAML scalars so ``true``, ``8`` and
``["A.Lib"]`` arrive as a bool, an int and a list.
"""

from __future__ import annotations

import copy
import os
from collections.abc import Mapping
from functools import reduce
from pathlib import Path
from typing import Any

import yaml

from .defaults import BUILTIN_DEFAULTS
from .models import DEFAULT_CONFIG_PATH, ModHelperSettings

ENV_PREFIX = "MODHELPER_"
ENV_NESTING = "__"


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
) -> ModHelperSettings:
    """Merge every source and validate the result into typed settings."""
    return ModHelperSettings(
        **load_config(cli_params=cli_params, environ=environ, config_path=config_path)
    )


def load_config(
    *,
    cli_params: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
    defaults: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return the merged, unvalidated configuration mapping."""
    layers = (
        BUILTIN_DEFAULTS if defaults is None else defaults,
        read_config_file(config_path),
        env_overrides(os.environ if environ is None else environ),
        cli_params or {},
    )
    return reduce(_deep_merge, layers, {})


def read_config_file(path: str | Path | None) -> dict[str, Any]:
    """Parse the YAML config file; a missing or empty file contributes nothing."""
    resolved = DEFAULT_CONFIG_PATH if path is None else Path(path)
    if not resolved.is_file():
        return {}
    parsed = yaml.safe_load(resolved.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config file must contain a top-level mapping: {resolved}")
    return parsed


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Turn prefixed environment variables into a nested mapping."""
    overrides: dict[str, Any] = {}
    for key, raw in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = [
            part.strip().lower()
            for part in key[len(ENV_PREFIX) :].split(ENV_NESTING)
            if part.strip()
        ]
        if not path:
            continue
        node = overrides
        for part in path[:-1]:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                break
        else:
            node[path[-1]] = _parse_env_value(raw)
    return overrides


def _parse_env_value(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
