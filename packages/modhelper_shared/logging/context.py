"""Log fields scoped to the mod, task or content item currently being handled.

The lifecycle core logs from deep inside phases and load tasks. Instead of
passing mod and task identity to every call, the caller opens a scope with
:func:`log_context`; :class:`~.config.ContextFilter` copies the scope's fields
onto each record emitted inside it. Scopes nest, and inner values win.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType

_FIELDS: ContextVar[Mapping[str, str]] = ContextVar(
    "modhelper_log_fields", default=MappingProxyType({})
)


def current_fields() -> dict[str, str]:
    """Return the fields of the innermost open scope."""
    return dict(_FIELDS.get())


def _with(values: Mapping[str, object]) -> Mapping[str, str]:
    merged = dict(_FIELDS.get())
    merged.update(
        (str(key), str(value)) for key, value in values.items() if value is not None
    )
    return MappingProxyType(merged)


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[dict[str, str]]:
    """Attach ``values`` to every record logged in the block; ``None`` values are skipped."""
    token = _FIELDS.set(_with(values))
    try:
        yield current_fields()
    finally:
        _FIELDS.reset(token)


def bind_process_fields(**values: object) -> None:
    """Attach fields such as ``service`` to everything logged from now on."""
    _FIELDS.set(_with(values))
