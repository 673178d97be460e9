"""Stdout logging configuration for the mod host process.

Every emission goes through one handler on the root logger. Records pick up
the bound mod/task context via :class:`ContextFilter`; the formatter then
renders either one JSON object per line or a plain line with ``key=value``
context appended.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from . import fields
from .context import bind_process_fields, current_fields

# Process-wide fields already implied by the host process; plain output drops them.
_PROCESS_FIELDS = frozenset({fields.SERVICE, fields.ENVIRONMENT})


class ContextFilter(logging.Filter):
    """Copy the bound logging context onto each record as attributes."""

    def filter(self, record: logging.LogRecord) -> bool:
        bound = current_fields()
        record.context = bound
        record.__dict__.update(bound)
        return True


def _record_context(record: logging.LogRecord) -> dict[str, str]:
    bound = getattr(record, "context", None)
    return bound if isinstance(bound, dict) else {}


class JsonFormatter(logging.Formatter):
    """One JSON object per line: core fields, bound context, then exception text."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
            **_record_context(record),
        }
        if record.exc_info and record.exc_info[1] is not None:
            payload["exception_type"] = type(record.exc_info[1]).__name__
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Readable single-line format with mod/task context appended."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = sorted(
            (key, value)
            for key, value in _record_context(record).items()
            if key not in _PROCESS_FIELDS
        )
        if not extras:
            return line
        return line + " " + " ".join(f"{key}={value}" for key, value in extras)


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = False,
    service: str | None = None,
    environment: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route all logging to one stream handler (stdout unless ``stream`` is given).

    Calling this again replaces the previous handler instead of adding a
    second one.
    """
    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    bind_process_fields(**{fields.SERVICE: service, fields.ENVIRONMENT: environment})


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)
