"""The host side of the mod lifecycle: lookup, dispatch and shared state."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from packages.modhelper_shared.config import ModHelperSettings
from packages.modhelper_shared.registry import InstanceRegistry

from .code_unit import CodeUnit
from .isolation import UnitResult, try_unit
from .patching import Patcher
from .tasks import TaskScheduler

if TYPE_CHECKING:
    from .mod import Mod

TMod = TypeVar("TMod", bound="Mod")


class ModHost:
    """Owns everything the loaded mods share.

    The instance registry, the scheduler and the id-prefix bookkeeping are
    held here and passed by reference instead of living in module globals.
    All mutation is expected on the host's main thread.
    """

    def __init__(
        self,
        *,
        settings: ModHelperSettings | None = None,
        registry: InstanceRegistry | None = None,
        scheduler: TaskScheduler | None = None,
        patcher_factory: Callable[[str], Patcher] = Patcher,
    ) -> None:
        self.settings = settings if settings is not None else ModHelperSettings()
        self.registry = registry if registry is not None else InstanceRegistry()
        self.scheduler = (
            scheduler
            if scheduler is not None
            else TaskScheduler(
                max_steps_per_tick=self.settings.scheduler.max_steps_per_tick
            )
        )
        self._patcher_factory = patcher_factory
        self._mods: list[Mod] = []
        self._id_prefix_too_soon: set[type] = set()
        self._code_units: dict[type, CodeUnit] = {}

    @property
    def is_epic(self) -> bool:
        return self.settings.host.build_variant == "epic"

    @property
    def mods(self) -> tuple[Mod, ...]:
        return tuple(self._mods)

    def create_patcher(self, mod: Mod) -> Patcher:
        return self._patcher_factory(mod.info.name)

    def add_mod(self, mod: Mod) -> None:
        if any(existing is mod for existing in self._mods):
            return
        self._mods.append(mod)
        self._code_units.setdefault(type(mod), mod.code_unit)

    def remove_mod(self, mod: Mod) -> None:
        """Forget a mod whose load the host aborted."""
        self._mods = [existing for existing in self._mods if existing is not mod]
        self.registry.remove_instance(type(mod), mod)

    def get_mod(self, name: str) -> Mod | None:
        """Find a loaded mod by display name or code unit name."""
        for mod in self._mods:
            if name in (mod.info.name, mod.code_unit.name):
                return mod
        return None

    def get_mod_of_type(self, mod_type: type[TMod]) -> TMod | None:
        return self.registry.get_instance(mod_type)

    def call(self, mod_name: str, operation: str, *parameters: object) -> object | None:
        """Dispatch ``operation`` to the named mod; ``None`` when no such mod is loaded."""
        mod = self.get_mod(mod_name)
        if mod is None:
            return None
        return mod.call(operation, *parameters)

    def perform_hook(
        self, hook: Callable[[Mod], object], *, name: str = "hook"
    ) -> tuple[UnitResult, ...]:
        """Run ``hook`` for every loaded mod; one mod failing does not stop the rest."""
        results: list[UnitResult] = []
        for mod in self.mods:
            result = try_unit(lambda mod=mod: hook(mod), name=mod.info.name)
            if not result.ok:
                mod.logger.error(f"Failed to run {name}", exc_info=result.exception)
            results.append(result)
        return tuple(results)

    def id_prefix_for(self, mod_type: type[Mod]) -> str:
        """Return the id prefix of ``mod_type``'s instance.

        Before that mod has registered itself only the default prefix can be
        derived, from the code unit the mod was added with (or the unit of its
        module); the request is remembered so the mod can warn at
        initialization if its real prefix differs.
        """
        mod = self.get_mod_of_type(mod_type)
        if mod is not None:
            return mod.id_prefix
        self._id_prefix_too_soon.add(mod_type)
        code_unit = self._code_units.get(mod_type) or CodeUnit.for_module(
            mod_type.__module__
        )
        return f"{code_unit.name}-"

    def id_prefix_requested_too_soon(self, mod_type: type) -> bool:
        return mod_type in self._id_prefix_too_soon

    def is_suppressed_patch_failure(self, message: str) -> bool:
        """Known false positives: platform libraries missing from the epic build."""
        if not self.is_epic:
            return False
        return any(
            marker in message for marker in self.settings.host.suppressed_patch_markers
        )
