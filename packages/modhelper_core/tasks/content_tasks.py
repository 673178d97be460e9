"""Load tasks that create and register a mod's content."""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from packages.modhelper_shared.errors import ErrorCategory
from packages.modhelper_shared.logging import fields

from ..content import ModContent
from ..isolation import UnitResult, try_unit
from .contracts import LoadTask, StepOutcome

if TYPE_CHECKING:
    from ..mod import Mod


class ModContentTask(LoadTask):
    """Registers a mod's already-collected content, one item per step.

    Produces nothing itself. The cursor indexes the mod's live collection, so
    items appended before a given step are still registered by this task.
    """

    def __init__(self, mod: Mod) -> None:
        super().__init__(mod)
        self._cursor = 0
        self.failures: list[UnitResult] = []

    @property
    def display_name(self) -> str:
        return f"Registering ModContent for {self.mod.info.name}..."

    def load(self) -> Iterable[ModContent]:
        return ()

    def _step(self) -> StepOutcome:
        content = self.mod.content
        if self._cursor >= len(content):
            return StepOutcome.DONE

        item = content[self._cursor]
        self._cursor += 1
        if item.registered:
            return StepOutcome.PROCESSED

        result = try_unit(
            item.run_registration,
            name=item.name,
            category=ErrorCategory.REGISTRATION,
        )
        if not result.ok:
            self.failures.append(result)
            self.mod.logger.error(
                f"Failed to register {item.name}",
                exc_info=result.exception,
                **{
                    fields.CONTENT: item.name,
                    fields.EVENT: fields.REGISTRATION_FAILED_EVENT,
                },
            )
        return StepOutcome.PROCESSED


class ContentDiscoveryTask(LoadTask):
    """Instantiates every concrete ``ModContent`` class in the mod's code unit.

    A class opts out of discovery with ``abstract = True`` in its own body.
    Classes whose construction or ``load`` fails are logged and skipped.
    """

    @property
    def display_name(self) -> str:
        return f"Creating ModContent for {self.mod.info.name}..."

    def load(self) -> Iterator[ModContent]:
        for cls in self.mod.code_unit.types():
            if not _is_discoverable(cls):
                continue
            produced: list[ModContent] = []
            result = try_unit(
                lambda: produced.extend(cls().load()),
                name=cls.__name__,
            )
            if not result.ok:
                self.mod.logger.error(
                    f"Failed to create {cls.__name__}",
                    exc_info=result.exception,
                    **{fields.CONTENT: cls.__name__},
                )
                continue
            yield from produced


def _is_discoverable(cls: type) -> bool:
    return (
        issubclass(cls, ModContent)
        and cls is not ModContent
        and not inspect.isabstract(cls)
        and not vars(cls).get("abstract", False)
    )
