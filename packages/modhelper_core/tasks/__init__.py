"""Public API for load tasks and their scheduler."""

from .content_tasks import ContentDiscoveryTask, ModContentTask
from .contracts import LoadTask, StepOutcome, TaskState
from .scheduler import TaskScheduler

__all__ = [
    "ContentDiscoveryTask",
    "LoadTask",
    "ModContentTask",
    "StepOutcome",
    "TaskScheduler",
    "TaskState",
]
