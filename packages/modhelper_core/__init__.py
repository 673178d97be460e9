"""Public API for the mod lifecycle core."""

from packages.modhelper_core.code_unit import CodeUnit
from packages.modhelper_core.content import ContentCollection, ModContent
from packages.modhelper_core.host import ModHost
from packages.modhelper_core.isolation import UnitResult, try_unit
from packages.modhelper_core.mod import LifecyclePhase, Mod, ModInfo
from packages.modhelper_core.patching import Patcher, PatchTarget, patch
from packages.modhelper_core.settings import (
    ModSetting,
    ModSettingBool,
    ModSettingFloat,
    ModSettingInt,
    ModSettingString,
)
from packages.modhelper_core.startup import (
    ModLoadFailure,
    StartupResult,
    load_mod,
    load_mods,
    run_mod_startup,
)
from packages.modhelper_core.tasks import (
    ContentDiscoveryTask,
    LoadTask,
    ModContentTask,
    StepOutcome,
    TaskScheduler,
    TaskState,
)

__all__ = [
    "CodeUnit",
    "ContentCollection",
    "ContentDiscoveryTask",
    "LifecyclePhase",
    "LoadTask",
    "Mod",
    "ModContent",
    "ModContentTask",
    "ModHost",
    "ModInfo",
    "ModLoadFailure",
    "ModSetting",
    "ModSettingBool",
    "ModSettingFloat",
    "ModSettingInt",
    "ModSettingString",
    "PatchTarget",
    "Patcher",
    "StartupResult",
    "StepOutcome",
    "TaskScheduler",
    "TaskState",
    "UnitResult",
    "load_mod",
    "load_mods",
    "patch",
    "run_mod_startup",
    "try_unit",
]
