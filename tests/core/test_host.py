"""Tests for host-side lookup, cross-mod dispatch and shared hooks."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from packages.modhelper_core import Mod
from tests.core.helpers import make_host, make_mod
from tests.fixtures.sample_mod.mod import SampleMod


def test_call_dispatches_to_named_mod(tmp_path: Path) -> None:
    host = make_host(tmp_path)
    make_mod(host, SampleMod, name="Sample Mod")

    assert host.call("Sample Mod", "double", 21) == 42
    assert host.call("sample_mod", "double", "ab") == "abab"
    assert host.call("Sample Mod", "unknown") is None


def test_call_to_missing_mod_returns_none(tmp_path: Path) -> None:
    host = make_host(tmp_path)

    assert host.call("Nobody", "double", 1) is None


def test_get_mod_of_type_uses_registry(tmp_path: Path) -> None:
    host = make_host(tmp_path)
    mod = make_mod(host, SampleMod)

    assert host.get_mod_of_type(SampleMod) is None
    mod.early_initialize()
    assert host.get_mod_of_type(SampleMod) is mod


def test_remove_mod_forgets_mod_and_instance(tmp_path: Path) -> None:
    host = make_host(tmp_path)
    mod = make_mod(host, SampleMod)
    mod.early_initialize()

    host.remove_mod(mod)

    assert host.mods == tuple()
    assert host.get_mod_of_type(SampleMod) is None


def test_add_mod_is_idempotent(tmp_path: Path) -> None:
    host = make_host(tmp_path)
    mod = make_mod(host)

    host.add_mod(mod)

    assert host.mods == (mod,)


def test_perform_hook_isolates_each_mod(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    host = make_host(tmp_path)
    first = make_mod(host, name="First")
    second = make_mod(host, name="Second")
    opened: list[str] = []

    def _open(mod: Mod) -> None:
        if mod is first:
            raise RuntimeError("menu broke")
        opened.append(mod.info.name)

    with caplog.at_level(logging.ERROR, logger="modhelper.mods"):
        results = host.perform_hook(_open, name="on_mod_options_opened")

    assert [result.ok for result in results] == [False, True]
    assert opened == ["Second"]
    assert "[First] Failed to run on_mod_options_opened" in caplog.text
    assert second in host.mods


def test_suppressed_failures_only_on_epic(tmp_path: Path) -> None:
    message = "No module named 'Il2CppFacepunch.Steamworks'"

    assert not make_host(tmp_path).is_suppressed_patch_failure(message)
    epic = make_host(tmp_path, build_variant="epic")
    assert epic.is_epic
    assert epic.is_suppressed_patch_failure(message)
    assert not epic.is_suppressed_patch_failure("AttributeError: fire")


def test_mod_paths_follow_host_settings(tmp_path: Path) -> None:
    mod = make_mod(make_host(tmp_path))

    assert mod.mod_sources_path == tmp_path / "sources" / "sample_mod"
    assert mod.settings_file_path == tmp_path / "settings" / "sample_mod.json"
