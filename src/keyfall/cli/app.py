"""CLI application entry point and command routing for keyfall.

This module is the **sole error boundary** for the command line.  It
catches :class:`~keyfall.exceptions.KeyfallError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via
Rich and returning well-defined exit codes.

Architecture notes
------------------
* No resolution logic lives here - all work is delegated to
  :mod:`keyfall.api`, which wires the core and infrastructure layers.
* Resolved values are the only thing written to stdout; diagnostics and
  errors go to stderr.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import datetime as dt
import decimal
import json
import sys
import uuid
from typing import Any

from keyfall.cli import exit_codes
from keyfall.cli.console import console
from keyfall.exceptions import KeyfallError
from keyfall.version import __version__

TARGET_TYPES: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "object": dict,
    "array": list,
    "any": Any,
    "datetime": dt.datetime,
    "date": dt.date,
    "uuid": uuid.UUID,
    "decimal": decimal.Decimal,
}
"""Names accepted by ``--type``."""


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The CLI supports:
    * ``keyfall resolve FILE KEY [KEY ...]`` - resolve keys in a JSON file
    * ``keyfall doctor``  - environment diagnostics
    * ``keyfall --version``
    """
    parser = argparse.ArgumentParser(
        prog="keyfall",
        description="Resolve fields from JSON documents across schema versions.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    commands = parser.add_subparsers(dest="command")

    resolve = commands.add_parser(
        "resolve",
        help="Resolve one field from the first usable candidate key.",
    )
    resolve.add_argument("file", help="JSON document to read, or '-' for stdin.")
    resolve.add_argument(
        "keys",
        nargs="+",
        metavar="KEY",
        help="Candidate keys, highest priority first.",
    )
    resolve.add_argument(
        "-t",
        "--type",
        dest="target",
        choices=sorted(TARGET_TYPES),
        default="any",
        help="Type of the value (or of each element with --list).",
    )
    resolve.add_argument(
        "-l",
        "--list",
        dest="as_list",
        action="store_true",
        help="Resolve an array, skipping elements that fail to decode.",
    )
    resolve.add_argument(
        "-f",
        "--fallback",
        default=None,
        help="Value used when no key resolves (JSON, or a plain string).",
    )
    resolve.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print resolution diagnostics to stderr.",
    )

    commands.add_parser("doctor", help="Run environment diagnostics.")
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _parse_fallback(raw: str | None) -> Any:
    """Interpret ``--fallback`` as JSON, else as a plain string."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _load_document(path: str) -> Any:
    from keyfall.infra.json_container import JsonDocument

    if path == "-":
        return JsonDocument.from_text(sys.stdin.buffer.read())
    return JsonDocument.from_path(path)


def _handle_resolve(args: argparse.Namespace) -> int:
    """Resolve the requested keys and print the result as JSON.

    Flow:
    1. Load the document (file or stdin).
    2. Resolve a single value or a list through :mod:`keyfall.api`.
    3. Print the result on stdout.
    """
    from keyfall.api import decode, decode_list
    from keyfall.core.models import LogLevel
    from keyfall.infra.json_values import encode_json_value

    document = _load_document(args.file)
    target = TARGET_TYPES[args.target]
    fallback = _parse_fallback(args.fallback)
    log_level = LogLevel.VERBOSE if args.verbose else LogLevel.SILENT

    if args.as_list:
        if fallback is not None and not isinstance(fallback, list):
            fallback = [fallback]
        result = decode_list(
            document, args.keys, target, fallback=fallback, log_level=log_level,
        )
    else:
        result = decode(document, args.keys, target, fallback=fallback, log_level=log_level)

    if result is None:
        console.labelled("[yellow]No value resolved for keys:[/yellow]", ", ".join(args.keys))
        return exit_codes.GENERAL_ERROR

    print(json.dumps(encode_json_value(result), ensure_ascii=False))
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from keyfall.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the keyfall CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.command == "doctor":
        return _handle_doctor()

    return _handle_resolve(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except KeyfallError as exc:
        console.labelled("[bold red]Error:[/bold red]", exc)
        if exc.hint:
            console.labelled("[yellow]Hint:[/yellow]", exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print("[bold red]Unexpected error.[/bold red] Please report this issue.")
        console.print(f"  {type(exc).__name__}: {exc}", markup=False)
        sys.exit(exit_codes.UNEXPECTED_ERROR)
