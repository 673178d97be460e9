"""Host-owned cooperative scheduler that drives load tasks step by step."""

from __future__ import annotations

from dataclasses import dataclass

from packages.modhelper_shared.errors import SchedulerError
from packages.modhelper_shared.logging import fields, get_logger, log_context

from .contracts import LoadTask, StepOutcome, TaskState

_LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _Entry:
    """One scheduled task and the tasks that must finish before it starts."""

    task: LoadTask
    after: tuple[LoadTask, ...]

    @property
    def ready(self) -> bool:
        return not self.task.done and all(dependency.done for dependency in self.after)


class TaskScheduler:
    """Interleaves load tasks from many mods on the calling thread.

    Each step picks the next ready task after the previously stepped one, so
    tasks of different mods advance round-robin. A task that raises is marked
    ``FAILED``, logged, and counts as finished for the tasks waiting on it.
    """

    def __init__(self, *, max_steps_per_tick: int = 1) -> None:
        if max_steps_per_tick <= 0:
            raise ValueError("max_steps_per_tick must be positive")
        self.max_steps_per_tick = max_steps_per_tick
        self._entries: list[_Entry] = []
        self._cursor = 0

    def schedule(self, task: LoadTask, *, after: tuple[LoadTask, ...] = ()) -> None:
        """Queue ``task``; every task in ``after`` must already be scheduled."""
        if self._is_scheduled(task):
            raise SchedulerError(f"task already scheduled: {task.display_name}")
        for dependency in after:
            if dependency is task:
                raise SchedulerError(f"task depends on itself: {task.display_name}")
            if not self._is_scheduled(dependency):
                raise SchedulerError(
                    f"task '{task.display_name}' depends on unscheduled task "
                    f"'{dependency.display_name}'"
                )
        self._entries.append(_Entry(task=task, after=tuple(after)))

    @property
    def tasks(self) -> tuple[LoadTask, ...]:
        return tuple(entry.task for entry in self._entries)

    @property
    def pending(self) -> tuple[LoadTask, ...]:
        return tuple(entry.task for entry in self._entries if not entry.task.done)

    @property
    def failed(self) -> tuple[LoadTask, ...]:
        return tuple(
            entry.task
            for entry in self._entries
            if entry.task.state is TaskState.FAILED
        )

    def tick(self, max_steps: int | None = None) -> int:
        """Run up to ``max_steps`` steps (default: configured budget); return steps run."""
        budget = self.max_steps_per_tick if max_steps is None else max_steps
        steps = 0
        while steps < budget:
            entry = self._next_ready()
            if entry is None:
                break
            self._step(entry.task)
            steps += 1
        return steps

    def run_until_complete(self) -> int:
        """Tick until no task is ready; return the total number of steps run."""
        total = 0
        while True:
            stepped = self.tick()
            if stepped == 0:
                break
            total += stepped
        return total

    def _next_ready(self) -> _Entry | None:
        count = len(self._entries)
        for offset in range(count):
            index = (self._cursor + offset) % count
            entry = self._entries[index]
            if entry.ready:
                self._cursor = index + 1
                return entry
        return None

    def _step(self, task: LoadTask) -> None:
        with log_context({fields.TASK: task.display_name}):
            if task.state is TaskState.PENDING:
                _LOGGER.info(
                    "load task started",
                    extra={fields.EVENT: fields.TASK_STARTED_EVENT},
                )
            try:
                outcome = task.next()
            except Exception:
                _LOGGER.exception("load task failed: %s", task.display_name)
                return
            if outcome is StepOutcome.DONE:
                _LOGGER.info(
                    "load task finished",
                    extra={
                        fields.EVENT: fields.TASK_FINISHED_EVENT,
                        "steps": task.steps_processed,
                    },
                )

    def _is_scheduled(self, task: LoadTask) -> bool:
        return any(entry.task is task for entry in self._entries)
