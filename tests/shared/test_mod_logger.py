"""Tests for scoped log fields and the mod-scoped logger."""

from __future__ import annotations

import json
import logging

import pytest

from packages.modhelper_shared.logging import ModLogger, log_context
from packages.modhelper_shared.logging.config import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
)
from packages.modhelper_shared.logging.context import current_fields


def test_log_context_adds_fields_for_the_block_only() -> None:
    """``None`` values are skipped and the outer fields come back afterwards."""
    before = current_fields()

    with log_context({"mod": "Sample Mod", "author": None}) as bound:
        assert bound == {**before, "mod": "Sample Mod"}

    assert current_fields() == before


def test_nested_scopes_override_and_restore() -> None:
    with log_context({"mod": "Outer", "task": "Loading Outer..."}):
        with log_context({"mod": "Inner"}):
            inner = current_fields()
        outer = current_fields()

    assert inner["mod"] == "Inner"
    assert inner["task"] == "Loading Outer..."
    assert outer["mod"] == "Outer"


def test_mod_logger_prefixes_message_and_binds_identity(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Records carry the mod and author fields once the context filter runs."""
    caplog.handler.addFilter(ContextFilter())
    logger = ModLogger(mod_name="Sample Mod", author="Sample Author")
    before = current_fields()

    with caplog.at_level(logging.WARNING, logger="modhelper.mods"):
        logger.warning("something odd", patch_type="FirePatch")

    (record,) = caplog.records
    assert record.getMessage() == "[Sample Mod] something odd"
    assert record.mod == "Sample Mod"  # type: ignore[attr-defined]
    assert record.author == "Sample Author"  # type: ignore[attr-defined]
    assert record.patch_type == "FirePatch"  # type: ignore[attr-defined]
    assert current_fields() == before


def test_mod_logger_error_attaches_exception(caplog: pytest.LogCaptureFixture) -> None:
    logger = ModLogger(mod_name="Sample Mod")
    error = RuntimeError("registry rejected item")

    with caplog.at_level(logging.ERROR, logger="modhelper.mods"):
        logger.error("Failed to register BrokenRegistration", exc_info=error)

    (record,) = caplog.records
    assert record.exc_info is not None
    assert record.exc_info[1] is error


def test_formatters_render_scoped_fields() -> None:
    record = logging.LogRecord(
        "modhelper.mods", logging.INFO, __file__, 1, "hello", None, None
    )
    with log_context({"mod": "Sample Mod", "service": "modhelper"}):
        ContextFilter().filter(record)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["mod"] == "Sample Mod"
    assert PlainFormatter().format(record).endswith("hello mod=Sample Mod")
