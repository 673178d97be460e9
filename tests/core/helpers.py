"""Shared builders and fakes for lifecycle core tests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from packages.modhelper_core import CodeUnit, Mod, ModContent, ModHost, ModInfo
from packages.modhelper_shared.config import ModHelperSettings

SAMPLE_UNIT = "tests.fixtures.sample_mod"


class FakePatcher:
    """Records patch requests and raises configured failures by type name."""

    def __init__(self, failures: Mapping[str, Exception] | None = None) -> None:
        self.failures = dict(failures or {})
        self.patched: list[type] = []
        self.unpatched = False

    def patch_class(self, cls: type) -> tuple:
        self.patched.append(cls)
        failure = self.failures.get(cls.__name__)
        if failure is not None:
            raise failure
        return tuple()

    def patch_all(self, types: Iterable[type]) -> None:
        for cls in types:
            self.patch_class(cls)

    def unpatch_all(self) -> None:
        self.unpatched = True


class RecordingItem(ModContent):
    """Content item that counts ``register`` calls and can be told to fail."""

    def __init__(self, label: str, *, fail: bool = False) -> None:
        self.label = label
        self.fail = fail
        self.register_calls = 0

    @property
    def name(self) -> str:
        return self.label

    def register(self) -> None:
        self.register_calls += 1
        if self.fail:
            raise RuntimeError(f"cannot register {self.label}")


def make_settings(tmp_path: Path, *, build_variant: str = "steam") -> ModHelperSettings:
    return ModHelperSettings(
        host={
            "build_variant": build_variant,
            "mod_settings_directory": tmp_path / "settings",
            "mod_sources_directory": tmp_path / "sources",
        }
    )


def make_host(
    tmp_path: Path,
    *,
    build_variant: str = "steam",
    patcher: FakePatcher | None = None,
) -> ModHost:
    """Build a host whose mods all share ``patcher`` (a fresh fake by default)."""
    shared = patcher if patcher is not None else FakePatcher()
    return ModHost(
        settings=make_settings(tmp_path, build_variant=build_variant),
        patcher_factory=lambda _owner_id: shared,  # type: ignore[arg-type,return-value]
    )


def make_mod(
    host: ModHost,
    mod_type: type[Mod] = Mod,
    *,
    name: str = "Test Mod",
    author: str = "Tester",
    root_module: str = SAMPLE_UNIT,
    code_unit: CodeUnit | None = None,
) -> Mod:
    info = ModInfo(mod_type=mod_type, name=name, version="1.0.0", author=author)
    mod = mod_type(
        info=info,
        code_unit=code_unit or CodeUnit(root_module=root_module),
        host=host,
    )
    host.add_mod(mod)
    return mod
