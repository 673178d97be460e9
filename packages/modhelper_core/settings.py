"""Mod settings and their JSON persistence.

Settings are declared as class attributes of a mod; the attribute name is the
setting name unless one is given explicitly::

    class MyMod(Mod):
        fast_mode = ModSettingBool(False, description="Skip animations")
        max_towers = ModSettingInt(10, min_value=1, max_value=50)

Each mod persists one JSON object ``{setting name: value}``. The mod's
``on_save_settings`` hook sees that object right before it is written and
``on_load_settings`` sees it right after it is read, before values are
applied, so either hook may mutate it in place.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Generic, TypeVar

from pydantic import Field, TypeAdapter, ValidationError

from packages.modhelper_shared.errors import SettingsError

if TYPE_CHECKING:
    from .mod import Mod

TValue = TypeVar("TValue")


class ModSetting(Generic[TValue]):
    """One named, typed, persisted mod setting."""

    value_type: ClassVar[Any] = object

    def __init__(
        self,
        default: TValue,
        *,
        name: str | None = None,
        display_name: str | None = None,
        description: str = "",
    ) -> None:
        self.name = name
        self.display_name = display_name
        self.description = description
        self._adapter: TypeAdapter[TValue] = TypeAdapter(self.annotation())
        self.default: TValue = self.validate(default)
        self.value: TValue = self.default

    def __set_name__(self, owner: type, name: str) -> None:
        if self.name is None:
            self.name = name

    def annotation(self) -> Any:
        """Type (possibly ``Annotated`` with constraints) values must satisfy."""
        return self.value_type

    def validate(self, raw: object) -> TValue:
        """Coerce ``raw`` into a valid value or raise ``pydantic.ValidationError``."""
        return self._adapter.validate_python(raw, strict=True)

    def set_value(self, raw: object) -> None:
        self.value = self.validate(raw)

    def fresh_copy(self) -> ModSetting[TValue]:
        """Return an independent copy holding the default value."""
        clone = copy.copy(self)
        clone.value = clone.default
        return clone

    def reset(self) -> None:
        self.value = self.default

    def to_json(self) -> object:
        return self._adapter.dump_python(self.value, mode="json")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, value={self.value!r})"


class ModSettingBool(ModSetting[bool]):
    value_type = bool


class ModSettingString(ModSetting[str]):
    value_type = str


class _BoundedSetting(ModSetting[TValue]):
    """Numeric setting with optional inclusive bounds."""

    def __init__(
        self,
        default: TValue,
        *,
        min_value: TValue | None = None,
        max_value: TValue | None = None,
        **kwargs: Any,
    ) -> None:
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(default, **kwargs)

    def annotation(self) -> Any:
        return Annotated[self.value_type, Field(ge=self.min_value, le=self.max_value)]


class ModSettingInt(_BoundedSetting[int]):
    value_type = int


class ModSettingFloat(_BoundedSetting[float]):
    value_type = float

    def validate(self, raw: object) -> float:
        # JSON does not distinguish 1 from 1.0; accept integral numbers.
        if isinstance(raw, int) and not isinstance(raw, bool):
            raw = float(raw)
        return super().validate(raw)


def collect_settings(mod_type: type) -> dict[str, ModSetting[Any]]:
    """Return fresh copies of the settings declared on ``mod_type`` and its bases.

    Declarations stay on the class; each mod instance owns its own values.
    """
    collected: dict[str, ModSetting[Any]] = {}
    for klass in reversed(mod_type.__mro__):
        for value in vars(klass).values():
            if isinstance(value, ModSetting) and value.name is not None:
                collected[value.name] = value.fresh_copy()
    return collected


def settings_file_path(*, directory: Path, display_name: str, canonical_name: str) -> Path:
    """Prefer an existing legacy ``<display name>.json``, else ``<canonical name>.json``."""
    legacy = directory / f"{display_name}.json"
    if legacy.exists():
        return legacy
    return directory / f"{canonical_name}.json"


def save_mod_settings(mod: Mod) -> Path:
    """Write the mod's settings blob and return the file written."""
    blob: dict[str, Any] = {
        name: setting.to_json() for name, setting in mod.mod_settings.items()
    }
    mod.on_save_settings(blob)

    path = mod.settings_file_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(blob, indent=2, sort_keys=True), encoding="utf-8")
    return path


def load_mod_settings(mod: Mod) -> bool:
    """Read and apply the mod's settings blob; return False when no file exists.

    Unknown keys are left in the blob for the hook and otherwise ignored. A
    value that fails validation is logged and the setting keeps its value.
    """
    path = mod.settings_file_path
    if not path.exists():
        return False

    try:
        blob = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SettingsError(f"settings file is not valid JSON: {path}") from exc
    if not isinstance(blob, dict):
        raise SettingsError(f"settings file must contain a JSON object: {path}")

    mod.on_load_settings(blob)

    for name, setting in mod.mod_settings.items():
        if name not in blob:
            continue
        try:
            setting.set_value(blob[name])
        except ValidationError as exc:
            mod.logger.warning(
                f"Ignoring invalid saved value for setting {name}: "
                f"{exc.errors()[0]['msg']}"
            )
    return True
