"""Conditional diagnostics: gate on the log level, then forward to a sink."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from keyfall.core.models import LogLevel
from keyfall.core.protocols import DiagnosticsSink

SEPARATOR: str = "-----------------------------------"

Message = str | Callable[[], str]


@dataclass(frozen=True, slots=True)
class Diagnostics:
    """Per-call logging capability.

    Messages are dropped unless *level* is :attr:`LogLevel.VERBOSE` and
    a sink is attached.  A message may be a zero-argument callable; it
    is only formatted once the level check has passed, so user values
    are never ``repr``-ed in silent mode.
    """

    level: LogLevel = LogLevel.SILENT
    sink: DiagnosticsSink | None = None

    @classmethod
    def silent(cls) -> Diagnostics:
        return cls()

    @property
    def enabled(self) -> bool:
        return self.level is LogLevel.VERBOSE and self.sink is not None

    def log(self, message: Message) -> None:
        if not self.enabled:
            return
        self.sink.write(_render(message))  # type: ignore[union-attr]


def _render(message: Message) -> str:
    if isinstance(message, str):
        return message
    try:
        return message()
    except Exception as exc:
        # A broken __repr__ on a decoded value must not change the result.
        return f"<diagnostic message unavailable: {type(exc).__name__}: {exc}>"
