"""Explicit process-wide type-to-instance registry.

Mods and their content items are registered here by concrete type so other
components can resolve "the instance of type T" without ambient global state.
The host owns exactly one registry and passes it by reference.

Writes are expected from the host's main thread only; the lock serializes the
map itself but does not make iteration over a mod's own collections safe
against concurrent structural mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class InstanceRegistry:
    """Type-keyed registry of live mod and content instances."""

    _instances: dict[type, list[object]] = field(default_factory=dict)
    _lock: RLock = field(default_factory=RLock)

    def add_instance(self, instance_type: type, instance: object) -> None:
        """Associate one instance with a type; re-adding the same pair is a no-op."""
        with self._lock:
            bucket = self._instances.setdefault(instance_type, [])
            if any(existing is instance for existing in bucket):
                return
            bucket.append(instance)

    def get_instance(self, instance_type: type[T]) -> T | None:
        """Return the first instance registered for ``instance_type``."""
        with self._lock:
            bucket = self._instances.get(instance_type)
            if not bucket:
                return None
            return bucket[0]  # type: ignore[return-value]

    def get_instances(self, instance_type: type[T]) -> tuple[T, ...]:
        """Return all instances registered for ``instance_type`` in insertion order."""
        with self._lock:
            return tuple(self._instances.get(instance_type, ()))  # type: ignore[arg-type]

    def contains(self, instance_type: type) -> bool:
        """Return True when at least one instance exists for ``instance_type``."""
        with self._lock:
            return bool(self._instances.get(instance_type))

    def remove_instance(self, instance_type: type, instance: object) -> None:
        """Drop one instance; used when the host aborts a mod's load."""
        with self._lock:
            bucket = self._instances.get(instance_type)
            if bucket is None:
                return
            bucket[:] = [existing for existing in bucket if existing is not instance]
            if not bucket:
                del self._instances[instance_type]

    def list_types(self) -> tuple[type, ...]:
        """Return registered types sorted by qualified name."""
        with self._lock:
            return tuple(
                sorted(
                    self._instances,
                    key=lambda item: f"{item.__module__}.{item.__qualname__}",
                )
            )
