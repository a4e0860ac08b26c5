"""``keyfall doctor``: environment diagnostics command.

Collects one :class:`CheckRow` per component, then renders them as a
Rich table, or as plain stderr text when Rich itself is missing (a
missing Rich is one of the failures this command reports).

The last row is a self-test that resolves a renamed field through the
public API, so a passing doctor means key fallback actually works in
this interpreter.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from importlib import metadata

from keyfall.cli import exit_codes
from keyfall.cli.console import console
from keyfall.version import __version__

MIN_PYTHON: tuple[int, int] = (3, 10)

_STATUS_STYLE: dict[str, str] = {"OK": "green", "WARN": "yellow", "FAIL": "red"}


@dataclass(frozen=True, slots=True)
class CheckRow:
    """One line of the doctor report; *status* is OK, WARN or FAIL."""

    label: str
    value: str
    status: str
    note: str = ""

    @property
    def failed(self) -> bool:
        return self.status == "FAIL"

    def plain_status(self) -> str:
        return f"{self.status} ({self.note})" if self.note else self.status

    def styled_status(self) -> str:
        style = _STATUS_STYLE.get(self.status, "white")
        return f"[{style}]{self.plain_status()}[/{style}]"


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def _keyfall_version_check() -> CheckRow:
    return CheckRow("keyfall", __version__, "OK")


def _python_version_check() -> CheckRow:
    version = platform.python_version()
    if sys.version_info[:2] >= MIN_PYTHON:
        return CheckRow("Python", version, "OK")
    required = ".".join(str(part) for part in MIN_PYTHON)
    return CheckRow("Python", version, "FAIL", note=f">={required} required")


def _rich_version_check() -> CheckRow:
    """Rich renders diagnostics and this table; without it only silent use works."""
    try:
        import rich  # noqa: F401
    except ImportError:
        return CheckRow("rich", "NOT INSTALLED", "FAIL")
    try:
        return CheckRow("rich", metadata.version("rich"), "OK")
    except metadata.PackageNotFoundError:
        return CheckRow("rich", "unknown", "WARN", note="no package metadata")


def _os_check() -> CheckRow:
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    return CheckRow("OS", f"{system_display} {platform.release()} ({platform.machine()})", "OK")


def _self_test_check() -> CheckRow:
    """Resolve a field renamed between two schema versions."""
    from keyfall.api import decode

    result = decode(
        '{"v1name": "hello"}',
        ["v2name", "v1name"],
        str,
        fallback="fallback",
    )
    if result == "hello":
        return CheckRow("self-test", "v2name -> v1name", "OK")
    return CheckRow("self-test", repr(result), "FAIL", note="expected 'hello'")


def collect_checks() -> list[CheckRow]:
    """Run every check in display order."""
    return [
        _keyfall_version_check(),
        _python_version_check(),
        _rich_version_check(),
        _os_check(),
        _self_test_check(),
    ]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_rich(checks: list[CheckRow]) -> bool:
    """Print the Rich table; ``False`` when Rich cannot be imported."""
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        return False

    table = Table(
        title="keyfall doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for row in checks:
        table.add_row(row.label, row.value, row.styled_status())

    console.print()
    console.print(table)
    console.print()
    return True


def _render_plain(checks: list[CheckRow]) -> None:
    print("\nkeyfall doctor", file=sys.stderr)
    print("=" * 56, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<32} {'Status':<8}", file=sys.stderr)
    print("-" * 56, file=sys.stderr)
    for row in checks:
        print(f"{row.label:<12} {row.value:<32} {row.plain_status():<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a summary.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    checks = collect_checks()
    if not _render_rich(checks):
        _render_plain(checks)

    if any(row.failed for row in checks):
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR
    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
