"""End-to-end tests for the host load pipeline using the fixture mod."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from packages.modhelper_core import Mod, ModHost, load_mod, load_mods, run_mod_startup
from packages.modhelper_shared.errors import ErrorCategory, ModLoadError
from tests.core.helpers import FakePatcher, make_host, make_mod, make_settings
from tests.fixtures.host_game import Tower

SAMPLE_MODULE = "tests.fixtures.sample_mod.mod"


class _ExplodesEarly(Mod):
    def on_early_initialize(self) -> None:
        raise RuntimeError("cannot start")


@pytest.fixture
def host(tmp_path: Path) -> Iterator[ModHost]:
    instance = ModHost(settings=make_settings(tmp_path))
    yield instance
    for mod in instance.mods:
        mod.patcher.unpatch_all()


def test_sample_mod_loads_end_to_end(host: ModHost) -> None:
    """Good patches apply, bad ones are recorded, and content is registered."""
    mods, failures = load_mods(host, [SAMPLE_MODULE])

    result = run_mod_startup(host, mods)

    assert failures == tuple()
    assert result.failed == tuple()
    (mod,) = result.loaded
    assert mod.info.name == "Sample Mod"
    assert mod.mod_helper_patch_all
    assert mod.events == ["early_initialize", "application_start", "initialize"]  # type: ignore[attr-defined]
    assert mod.resources == {"icon": b"sample-icon"}

    assert Tower().fire() == 2
    assert Tower.cost(5) == 5
    assert result.load_errors == {
        "Sample Mod": ("Failed to apply patch(es) in BrokenPatch",)
    }

    assert mod.content.names() == (  # type: ignore[attr-defined]
        "SampleTower",
        "SampleUpgrade1",
        "SampleUpgrade2",
        "BrokenRegistration",
    )
    registered = {item.name: item.registered for item in mod.content}
    assert registered == {
        "SampleTower": True,
        "SampleUpgrade1": True,
        "SampleUpgrade2": True,
        "BrokenRegistration": False,
    }
    assert mod.content[0].registered_id == "sample_mod-SampleTower"  # type: ignore[attr-defined]
    assert result.steps > 0
    assert host.scheduler.pending == tuple()


def test_unpatch_restores_host_code(host: ModHost) -> None:
    mods, _ = load_mods(host, [SAMPLE_MODULE])
    run_mod_startup(host, mods)

    mods[0].patcher.unpatch_all()

    assert Tower().fire() == 1


def test_load_mod_requires_mod_info(host: ModHost) -> None:
    with pytest.raises(ModLoadError):
        load_mod(host, "tests.fixtures.host_game")


def test_load_mods_skips_broken_modules(
    host: ModHost, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR, logger="packages.modhelper_core.startup"):
        mods, failures = load_mods(host, ["tests.fixtures.no_such_mod", SAMPLE_MODULE])

    assert [mod.info.name for mod in mods] == ["Sample Mod"]
    assert [(failure.mod_name, failure.phase) for failure in failures] == [
        ("tests.fixtures.no_such_mod", "load")
    ]
    assert "failed to load mod module tests.fixtures.no_such_mod" in caplog.text


def test_phase_failure_aborts_only_that_mod(tmp_path: Path) -> None:
    patcher = FakePatcher()
    host = make_host(tmp_path, patcher=patcher)
    broken = make_mod(host, _ExplodesEarly, name="Broken")
    healthy = make_mod(host, name="Healthy")

    result = run_mod_startup(host, [broken, healthy])

    assert result.loaded == (healthy,)
    (failure,) = result.failed
    assert failure.mod_name == "Broken"
    assert failure.phase == "early_initialize"
    assert failure.error.category is ErrorCategory.INTERNAL
    assert host.mods == (healthy,)
    assert patcher.unpatched


def test_host_applies_whole_unit_when_no_mod_took_over(tmp_path: Path) -> None:
    patcher = FakePatcher()
    host = make_host(tmp_path, patcher=patcher)

    class _HostManaged(Mod):
        @property
        def optional_patches(self) -> bool:
            return False

    mod = make_mod(host, _HostManaged)

    result = run_mod_startup(host, [mod])

    assert result.loaded == (mod,)
    assert patcher.patched == list(mod.code_unit.types())
    assert not mod.mod_helper_patch_all


def test_unreadable_settings_fall_back_to_defaults(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    host = make_host(tmp_path)
    mod = make_mod(host, name="Settings Mod")
    path = mod.settings_file_path
    path.parent.mkdir(parents=True)
    path.write_text("{broken", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="modhelper.mods"):
        result = run_mod_startup(host, [mod])

    assert result.loaded == (mod,)
    assert "Using default settings" in caplog.text
