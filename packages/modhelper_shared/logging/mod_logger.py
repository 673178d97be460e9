"""Mod-scoped logger that attributes every line to one mod and its author."""

from __future__ import annotations

import logging
from typing import Any

from . import fields
from .context import log_context


class ModLogger:
    """Thin adapter over a stdlib logger bound to one mod's identity.

    Each emission runs inside :func:`log_context` so structured handlers see
    the ``mod`` and ``author`` fields alongside any per-call ``context``.
    Messages are prefixed with ``[<mod name>]`` for plain-text readers.
    """

    def __init__(
        self,
        *,
        mod_name: str,
        author: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.mod_name = mod_name
        self.author = author
        self._logger = logger or logging.getLogger("modhelper.mods")

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def info(self, message: str, **context: object) -> None:
        self._emit(logging.INFO, message, context=context)

    def warning(self, message: str, **context: object) -> None:
        self._emit(logging.WARNING, message, context=context)

    def error(
        self,
        message: str,
        *,
        exc_info: BaseException | None = None,
        **context: object,
    ) -> None:
        self._emit(logging.ERROR, message, context=context, exc_info=exc_info)

    def _emit(
        self,
        level: int,
        message: str,
        *,
        context: dict[str, object],
        exc_info: BaseException | None = None,
    ) -> None:
        bound: dict[str, Any] = {fields.MOD: self.mod_name, fields.AUTHOR: self.author}
        bound.update(context)
        with log_context(bound):
            self._logger.log(level, "[%s] %s", self.mod_name, message, exc_info=exc_info)
