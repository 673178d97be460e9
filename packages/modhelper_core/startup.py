"""Host load pipeline: phases for every mod, then scheduled content tasks."""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from packages.modhelper_shared.errors import (
    ErrorDetail,
    ModLoadError,
    SettingsError,
    exception_to_error,
)
from packages.modhelper_shared.logging import fields, get_logger, log_context

from .code_unit import CodeUnit
from .host import ModHost
from .isolation import try_unit
from .mod import Mod, ModInfo
from .tasks import ContentDiscoveryTask

_LOGGER = get_logger(__name__)

MOD_INFO_ATTRIBUTE = "MOD_INFO"


@dataclass(frozen=True, slots=True)
class ModLoadFailure:
    """One mod whose load the host aborted, and where."""

    mod_name: str
    phase: str
    error: ErrorDetail


@dataclass(frozen=True, slots=True)
class StartupResult:
    """Summary of one full load pass."""

    loaded: tuple[Mod, ...]
    failed: tuple[ModLoadFailure, ...]
    steps: int

    @property
    def load_errors(self) -> dict[str, tuple[str, ...]]:
        """Recorded per-unit load errors of mods that finished loading."""
        return {mod.info.name: mod.load_errors for mod in self.loaded if mod.load_errors}


def load_mod(host: ModHost, module_name: str) -> Mod:
    """Import ``module_name``, instantiate the mod its ``MOD_INFO`` names and add it."""
    module = importlib.import_module(module_name)
    info = getattr(module, MOD_INFO_ATTRIBUTE, None)
    if not isinstance(info, ModInfo):
        raise ModLoadError(f"{module_name} does not define {MOD_INFO_ATTRIBUTE}")
    if not (isinstance(info.mod_type, type) and issubclass(info.mod_type, Mod)):
        raise ModLoadError(f"{module_name}.{MOD_INFO_ATTRIBUTE}.mod_type is not a Mod")

    code_unit = CodeUnit.for_module(module_name)
    mod = info.mod_type(info=info, code_unit=code_unit, host=host)
    mod.resources = code_unit.read_resources()
    host.add_mod(mod)
    return mod


def load_mods(
    host: ModHost, module_names: Iterable[str]
) -> tuple[tuple[Mod, ...], tuple[ModLoadFailure, ...]]:
    """Load each module independently; import failures skip only that module."""
    mods: list[Mod] = []
    failures: list[ModLoadFailure] = []
    for module_name in module_names:
        try:
            mods.append(load_mod(host, module_name))
        except Exception as exc:
            _LOGGER.error(
                "failed to load mod module %s", module_name, exc_info=exc
            )
            failures.append(
                ModLoadFailure(
                    mod_name=module_name, phase="load", error=exception_to_error(exc)
                )
            )
    return tuple(mods), tuple(failures)


def run_mod_startup(host: ModHost, mods: Iterable[Mod]) -> StartupResult:
    """Drive every mod through its phases, then register content via the scheduler.

    Phase order across mods is: early initialize (all), host patching for
    mods that kept the host in charge of it, settings load, patch groups,
    initialize. A failure in any of these aborts only the mod it came from.
    """
    failures: list[ModLoadFailure] = []
    active = list(mods)

    active = _run_phase(host, active, "early_initialize", Mod.early_initialize, failures)
    active = _run_phase(host, active, "patch_all", _host_patch_all, failures)
    for mod in active:
        _load_settings(mod)
    active = _run_phase(host, active, "apply_patches", Mod.apply_patches, failures)
    active = _run_phase(host, active, "initialize", Mod.initialize, failures)

    for mod in active:
        discovery = ContentDiscoveryTask(mod)
        host.scheduler.schedule(discovery)
        host.scheduler.schedule(mod.load_content_task, after=(discovery,))
    steps = host.scheduler.run_until_complete()

    return StartupResult(loaded=tuple(active), failed=tuple(failures), steps=steps)


def _run_phase(
    host: ModHost,
    mods: list[Mod],
    phase: str,
    action: Callable[[Mod], object],
    failures: list[ModLoadFailure],
) -> list[Mod]:
    survivors: list[Mod] = []
    for mod in mods:
        result = try_unit(lambda mod=mod: action(mod), name=mod.info.name)
        error = result.error
        if error is None:
            survivors.append(mod)
            continue

        with log_context(
            {
                fields.MOD: mod.info.name,
                fields.MOD_VERSION: mod.info.version,
                fields.PHASE: phase,
                fields.ERROR_CATEGORY: error.category.value,
            }
        ):
            _LOGGER.error(
                "mod load aborted during %s", phase, exc_info=result.exception
            )
        mod.patcher.unpatch_all()
        host.remove_mod(mod)
        failures.append(
            ModLoadFailure(mod_name=mod.info.name, phase=phase, error=error)
        )
    return survivors


def _host_patch_all(mod: Mod) -> None:
    """Apply the whole unit at once when no mod took over patching for it."""
    if mod.code_unit.dont_patch_all:
        return
    mod.patcher.patch_all(mod.code_unit.types())


def _load_settings(mod: Mod) -> None:
    try:
        mod.load_mod_settings()
    except SettingsError as exc:
        mod.logger.warning(f"Using default settings: {exc}")
