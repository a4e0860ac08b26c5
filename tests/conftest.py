"""Shared pytest fixtures and configuration for the keyfall test suite.

Guidelines
----------
* Core tests use the JSON containers or small in-test fakes, never I/O.
* Diagnostics are asserted through :class:`~keyfall.infra.sinks.ListSink`.
* Rich is hidden through ``sys.modules`` when testing its absence.
* Tests must not depend on OS state.
"""

from __future__ import annotations

import pytest

from keyfall.cli.console import console as _cli_console


@pytest.fixture(autouse=True)
def _reset_cli_console_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give each test a fresh lazily-resolved CLI console (test isolation)."""
    monkeypatch.setattr(_cli_console, "_rich", None)
