"""Diagnostics sinks.

Concrete :class:`~keyfall.core.protocols.DiagnosticsSink`
implementations.  None of them writes to stdout: diagnostics must
never mix with a program's normal output.

Rich is imported lazily so that importing keyfall never fails on a
bare interpreter; the import error surfaces only when a Rich sink is
actually used.
"""

from __future__ import annotations

import logging
from typing import Any

from keyfall.exceptions import EnvironmentError

DEFAULT_LOGGER_NAME: str = "keyfall"


def load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = load_rich_console_class()
    return console_class(stderr=True)


class RichConsoleSink:
    """Write diagnostics to stderr through a Rich console.

    Markup and highlighting are disabled: diagnostic lines contain key
    lists such as ``['v2name', 'v1name']`` that must print verbatim.
    """

    def __init__(self, console: Any | None = None) -> None:
        self._console: Any | None = console

    @property
    def console(self) -> Any:
        if self._console is None:
            self._console = get_rich_console()
        return self._console

    def write(self, message: str) -> None:
        self.console.print(message, markup=False, highlight=False, soft_wrap=True)


class LoggingSink:
    """Forward diagnostics to a stdlib :class:`logging.Logger`."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: int = logging.DEBUG,
    ) -> None:
        self.logger: logging.Logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.level: int = level

    def write(self, message: str) -> None:
        self.logger.log(self.level, message)


class ListSink:
    """Collect diagnostics in memory."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def write(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()
