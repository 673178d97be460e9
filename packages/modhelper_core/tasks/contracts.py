"""Step protocol shared by every load task."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..content import ModContent
    from ..mod import Mod

_EXHAUSTED = object()


class StepOutcome(str, Enum):
    """Result of driving a task by one step."""

    PROCESSED = "processed"
    DONE = "done"


class TaskState(str, Enum):
    """Lifecycle of one load task."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class LoadTask:
    """A named unit of deferred work driven one step at a time.

    :meth:`next` is an explicit state machine: each call performs at most one
    unit of work and reports ``PROCESSED`` or ``DONE``. ``load`` is evaluated
    lazily on the first step. The base implementation adds each produced
    item to the owning mod, one item per step.
    """

    def __init__(self, mod: Mod) -> None:
        self.mod = mod
        self.state = TaskState.PENDING
        self.steps_processed = 0
        self._items: Iterator[ModContent] | None = None

    @property
    def display_name(self) -> str:
        return f"Loading {self.mod.info.name}..."

    @property
    def done(self) -> bool:
        return self.state in (TaskState.COMPLETED, TaskState.FAILED)

    def load(self) -> Iterable[ModContent]:
        """Produce the content items this task contributes; empty by default."""
        return ()

    def next(self) -> StepOutcome:
        """Advance by one unit of work.

        Exceptions escaping a step mark the task ``FAILED`` and propagate to
        the driver. Calling ``next`` on a finished task returns ``DONE``.
        """
        if self.done:
            return StepOutcome.DONE
        self.state = TaskState.RUNNING
        try:
            outcome = self._step()
        except Exception:
            self.state = TaskState.FAILED
            raise
        if outcome is StepOutcome.DONE:
            self.state = TaskState.COMPLETED
        else:
            self.steps_processed += 1
        return outcome

    def run_to_completion(self) -> int:
        """Drive the task without a scheduler; return the processed step count."""
        while self.next() is StepOutcome.PROCESSED:
            pass
        return self.steps_processed

    def _step(self) -> StepOutcome:
        if self._items is None:
            self._items = iter(self.load())
        item = next(self._items, _EXHAUSTED)
        if item is _EXHAUSTED:
            return StepOutcome.DONE
        self.mod.add_content(item)  # type: ignore[arg-type]
        return StepOutcome.PROCESSED

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.display_name!r}, state={self.state.value})"
