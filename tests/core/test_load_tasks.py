"""Tests for the step-driven load tasks that create and register content."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import pytest

from packages.modhelper_core import CodeUnit, ModContent
from packages.modhelper_core.tasks import (
    ContentDiscoveryTask,
    LoadTask,
    StepOutcome,
    TaskState,
)
from tests.core.helpers import SAMPLE_UNIT, RecordingItem, make_host, make_mod

MOD_LOGGER = "modhelper.mods"


def test_load_content_task_is_memoized(tmp_path: Path) -> None:
    mod = make_mod(make_host(tmp_path))

    assert mod.load_content_task is mod.load_content_task
    assert mod.load_content_task.display_name == "Registering ModContent for Test Mod..."


def test_registration_continues_past_one_failing_item(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Every item is attempted and exactly one error names the failing item."""
    mod = make_mod(make_host(tmp_path))
    items = [RecordingItem(f"item{index}", fail=index == 2) for index in range(5)]
    mod.add_contents(items)
    task = mod.load_content_task

    with caplog.at_level(logging.ERROR, logger=MOD_LOGGER):
        steps = task.run_to_completion()

    assert steps == 5
    assert task.state is TaskState.COMPLETED
    assert [item.register_calls for item in items] == [1, 1, 1, 1, 1]
    assert [item.registered for item in items] == [True, True, False, True, True]
    errors = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "Failed to register item2" in errors[0].getMessage()
    assert errors[0].exc_info is not None
    assert [failure.unit for failure in task.failures] == ["item2"]


def test_items_added_mid_run_are_still_registered(tmp_path: Path) -> None:
    """The task walks the live collection, so late additions are picked up."""
    mod = make_mod(make_host(tmp_path))
    first = RecordingItem("first")
    late = RecordingItem("late")
    mod.add_content(first)
    task = mod.load_content_task

    assert task.next() is StepOutcome.PROCESSED
    mod.add_content(late)
    task.run_to_completion()

    assert first.registered
    assert late.registered


def test_items_added_after_completion_need_manual_registration(tmp_path: Path) -> None:
    mod = make_mod(make_host(tmp_path))
    task = mod.load_content_task
    task.run_to_completion()

    straggler = RecordingItem("straggler")
    mod.add_content(straggler)

    assert task.next() is StepOutcome.DONE
    assert not straggler.registered
    straggler.run_registration()
    assert straggler.registered


def test_already_registered_items_are_skipped(tmp_path: Path) -> None:
    mod = make_mod(make_host(tmp_path))
    item = RecordingItem("manual")
    mod.add_content(item)
    item.run_registration()

    mod.load_content_task.run_to_completion()

    assert item.register_calls == 1


def test_base_task_adds_loaded_items_one_per_step(tmp_path: Path) -> None:
    """The default step adds one produced item to the mod per call."""
    mod = make_mod(make_host(tmp_path))
    produced = [RecordingItem("a"), RecordingItem("b")]

    class _Producer(LoadTask):
        def load(self) -> Iterable[ModContent]:
            return produced

    task = _Producer(mod)
    assert task.state is TaskState.PENDING
    assert task.display_name == "Loading Test Mod..."

    assert task.next() is StepOutcome.PROCESSED
    assert list(mod.content) == produced[:1]
    assert task.state is TaskState.RUNNING

    assert task.run_to_completion() == 2
    assert list(mod.content) == produced
    assert task.done
    assert not any(item.registered for item in produced)


def test_step_failure_marks_task_failed(tmp_path: Path) -> None:
    mod = make_mod(make_host(tmp_path))

    class _Broken(LoadTask):
        def load(self) -> Iterable[ModContent]:
            raise RuntimeError("cannot load")

    task = _Broken(mod)

    with pytest.raises(RuntimeError, match="cannot load"):
        task.next()
    assert task.state is TaskState.FAILED
    assert task.next() is StepOutcome.DONE


def test_discovery_creates_concrete_content_in_definition_order(tmp_path: Path) -> None:
    """Abstract classes are skipped and ``load`` expansions are added in order."""
    mod = make_mod(make_host(tmp_path))
    task = ContentDiscoveryTask(mod)

    task.run_to_completion()

    assert mod.content.names() == (  # type: ignore[attr-defined]
        "SampleTower",
        "SampleUpgrade1",
        "SampleUpgrade2",
        "BrokenRegistration",
    )
    assert all(item.mod is mod for item in mod.content)
    assert task.display_name == "Creating ModContent for Test Mod..."


def test_discovery_logs_and_skips_classes_that_fail_to_build(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    class _NeedsArgs(ModContent):
        def __init__(self, required: str) -> None:
            self.required = required

    class _Fine(ModContent):
        pass

    unit = CodeUnit(root_module=SAMPLE_UNIT, _types=(_NeedsArgs, _Fine))
    mod = make_mod(make_host(tmp_path), code_unit=unit)

    with caplog.at_level(logging.ERROR, logger=MOD_LOGGER):
        ContentDiscoveryTask(mod).run_to_completion()

    assert mod.content.names() == ("_Fine",)  # type: ignore[attr-defined]
    assert any("Failed to create _NeedsArgs" in r.getMessage() for r in caplog.records)
