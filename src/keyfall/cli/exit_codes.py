"""Process exit codes returned by :func:`keyfall.cli.app.main`.

Shell callers branch on these: ``0`` means stdout holds a JSON value,
anything else means stdout is empty and stderr explains why.
"""

from __future__ import annotations

SUCCESS: int = 0
"""A value was resolved (possibly the ``--fallback``) and printed."""

GENERAL_ERROR: int = 1
"""No candidate key resolved and no fallback was given, a failed doctor
check, or a :class:`~keyfall.exceptions.KeyfallError` such as an
unreadable document."""

UNEXPECTED_ERROR: int = 2
"""A bug: an exception outside the keyfall hierarchy reached ``cli()``.
Also what argparse uses for bad command-line usage."""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""
