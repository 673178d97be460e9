"""The mod lifecycle orchestrator.

A :class:`Mod` is driven by the host through three phases, each run once:

1. :meth:`Mod.early_initialize` registers the instance and decides whether the
   mod lets the host apply its patches one group at a time;
2. :meth:`Mod.apply_patches` applies every patch group in the mod's code unit,
   recording failures instead of raising;
3. :meth:`Mod.initialize` checks the id-prefix ordering hazard and runs the
   initialization hooks.

Content registration then happens through :attr:`Mod.load_content_task`,
which the host hands to its scheduler.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from packages.modhelper_shared.errors import ErrorCategory, LifecycleError
from packages.modhelper_shared.logging import ModLogger, fields

from .code_unit import CodeUnit
from .content import ContentCollection, ModContent
from .isolation import UnitResult, try_unit
from .patching import Patcher
from .settings import (
    ModSetting,
    collect_settings,
    load_mod_settings,
    save_mod_settings,
    settings_file_path,
)
from .tasks import ModContentTask

if TYPE_CHECKING:
    from .host import ModHost


@dataclass(frozen=True, slots=True)
class ModInfo:
    """Identity a mod module declares as ``MOD_INFO``."""

    mod_type: type[Mod]
    name: str
    version: str
    author: str


class LifecyclePhase(str, Enum):
    """Host-driven phases of one mod's load."""

    EARLY_INITIALIZE = "early_initialize"
    APPLY_PATCHES = "apply_patches"
    INITIALIZE = "initialize"


class Mod:
    """Base class for mods loaded by the host.

    Subclasses override the ``on_*`` hooks, :attr:`id_prefix`,
    :attr:`optional_patches` and :meth:`call`. The phase methods themselves
    are driven by the host and are not meant to be overridden.
    """

    def __init__(
        self,
        *,
        info: ModInfo,
        code_unit: CodeUnit,
        host: ModHost,
        patcher: Patcher | None = None,
        logger: ModLogger | None = None,
    ) -> None:
        self.info = info
        self.code_unit = code_unit
        self.host = host
        self.patcher = patcher or host.create_patcher(self)
        self.logger = logger or ModLogger(mod_name=info.name, author=info.author)

        #: Settings declared on the mod class, by setting name.
        self.mod_settings: dict[str, ModSetting[Any]] = collect_settings(type(self))
        #: Embedded resource files of the code unit, by file stem.
        self.resources: dict[str, bytes] = {}

        #: True when this mod asked the host to let it apply patches group by group.
        self.mod_helper_patch_all = False

        self._content = ContentCollection()
        self._load_errors: list[str] = []
        self._load_content_task: ModContentTask | None = None
        self._completed_phases: set[LifecyclePhase] = set()

    # Identity and paths

    @property
    def default_id_prefix(self) -> str:
        return f"{self.code_unit.name}-"

    @property
    def id_prefix(self) -> str:
        """Prefix for the ids of this mod's content, to avoid clashes between mods."""
        return self.default_id_prefix

    @property
    def optional_patches(self) -> bool:
        """Whether one failing patch group should not stop the whole mod from loading."""
        return True

    @property
    def settings_file_path(self) -> Path:
        return settings_file_path(
            directory=self.host.settings.host.mod_settings_directory,
            display_name=self.info.name,
            canonical_name=self.code_unit.name,
        )

    @property
    def mod_sources_path(self) -> Path:
        """Where this mod's sources most likely live in the mod sources folder."""
        return self.host.settings.host.mod_sources_directory / self.code_unit.name

    # Owned collections

    @property
    def content(self) -> Sequence[ModContent]:
        """All content of this mod in the order it was added."""
        return self._content

    @property
    def load_errors(self) -> tuple[str, ...]:
        return tuple(self._load_errors)

    @property
    def load_content_task(self) -> ModContentTask:
        """The content-registration task, created on first access."""
        if self._load_content_task is None:
            self._load_content_task = ModContentTask(self)
        return self._load_content_task

    def add_content(self, item: ModContent) -> None:
        """Add one item without loading or registering it.

        Registration still happens if this runs before the registration task
        reaches the end of the content; after that the caller must call
        ``item.run_registration()`` itself.
        """
        item.mod = self
        self._content.append(item)
        self.host.registry.add_instance(type(item), item)

    def add_contents(self, items: Iterable[ModContent]) -> None:
        """Add several items in order; same contract as :meth:`add_content`."""
        contents = list(items)
        for item in contents:
            item.mod = self
            self.host.registry.add_instance(type(item), item)
        self._content.extend(contents)

    def call(self, operation: str, *parameters: object) -> object | None:
        """Entry point for other mods; unknown operations return ``None``."""
        return None

    # Phases

    def early_initialize(self) -> None:
        if not self._enter_phase(LifecyclePhase.EARLY_INITIALIZE):
            return

        self.host.registry.add_instance(type(self), self)

        # Unless the mod opted out or the unit is already self-managed, take
        # over patching so one bad patch group cannot sink the whole mod.
        if self.optional_patches and self.code_unit.defer_patching():
            self.mod_helper_patch_all = True

        self.on_early_initialize()

    def apply_patches(self) -> tuple[UnitResult, ...]:
        """Apply every patch group of the code unit when this mod requested it."""
        self._require_phase(LifecyclePhase.EARLY_INITIALIZE)
        if not self._enter_phase(LifecyclePhase.APPLY_PATCHES):
            return tuple()
        if not self.mod_helper_patch_all:
            return tuple()
        return tuple(self.apply_patch_group(cls) for cls in self.code_unit.types())

    def apply_patch_group(self, patch_type: type) -> UnitResult:
        """Apply the patches declared on one type; failures are recorded, never raised."""
        result = try_unit(
            lambda: self.patcher.patch_class(patch_type),
            name=patch_type.__name__,
            category=ErrorCategory.PATCH,
        )
        if result.ok:
            return result

        message = result.message or ""
        if self.host.is_suppressed_patch_failure(message):
            return result

        self.logger.warning(
            f"Failed to apply {self.info.name} patch(es) in {patch_type.__name__}: "
            f'"{message}" The mod might not function correctly. '
            f"This needs to be fixed by {self.info.author}",
            **{
                fields.PATCH_TYPE: patch_type.__name__,
                fields.EVENT: fields.PATCH_FAILED_EVENT,
            },
        )
        self._load_errors.append(f"Failed to apply patch(es) in {patch_type.__name__}")
        return result

    def initialize(self) -> None:
        self._require_phase(LifecyclePhase.EARLY_INITIALIZE)
        if LifecyclePhase.APPLY_PATCHES not in self._completed_phases:
            self.apply_patches()
        if not self._enter_phase(LifecyclePhase.INITIALIZE):
            return

        if (
            self.host.id_prefix_requested_too_soon(type(self))
            and self.id_prefix != self.default_id_prefix
        ):
            self.logger.warning(
                "Tried to get mod id prefix too soon, used default value at least once",
                **{fields.EVENT: fields.ORDERING_HAZARD_EVENT},
            )

        self.on_application_start()
        self.on_initialize()

    def has_completed(self, phase: LifecyclePhase) -> bool:
        return phase in self._completed_phases

    def _enter_phase(self, phase: LifecyclePhase) -> bool:
        """Mark ``phase`` as entered; False (and a warning) when it already ran."""
        if phase in self._completed_phases:
            self.logger.warning(
                f"{phase.value} already ran; ignoring repeated call",
                **{fields.PHASE: phase.value},
            )
            return False
        self._completed_phases.add(phase)
        return True

    def _require_phase(self, phase: LifecyclePhase) -> None:
        if phase not in self._completed_phases:
            raise LifecycleError(f"{self.info.name}: {phase.value} has not run yet")

    # Settings

    def save_mod_settings(self) -> Path:
        return save_mod_settings(self)

    def load_mod_settings(self) -> bool:
        return load_mod_settings(self)

    # Hooks

    def on_early_initialize(self) -> None:
        """Runs at the end of :meth:`early_initialize`; exceptions reach the host."""

    def on_application_start(self) -> None:
        """Runs in :meth:`initialize`, before :meth:`on_initialize`."""

    def on_initialize(self) -> None:
        """Runs last in :meth:`initialize`."""

    def on_mod_options_opened(self) -> None:
        """Runs whenever the host's mod options menu finishes opening."""

    def on_save_settings(self, settings: dict[str, Any]) -> None:
        """Receives the settings blob right before it is written."""

    def on_load_settings(self, settings: dict[str, Any]) -> None:
        """Receives the settings blob right after it is read."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.info.name!r}, version={self.info.version!r})"
