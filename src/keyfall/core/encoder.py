"""Encode-path reporting.

Writes one value per call through a
:class:`~keyfall.core.protocols.KeyedWriter` and reports failures
without stopping the encode of sibling keys.

* :func:`encode_value` logs, then re-raises.
* :func:`encode_value_quietly` logs, then returns the failure.
* :func:`encode_entries` runs a best-effort batch.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from keyfall.core.diagnostics import Diagnostics
from keyfall.core.models import EncodeEntry, Key, key_name
from keyfall.core.protocols import KeyedWriter
from keyfall.exceptions import EncodeFailure, InvalidValueError


def describe_encode_failure(exc: Exception, key: str) -> str:
    """Render the diagnostic line for a failed write."""
    if isinstance(exc, InvalidValueError):
        return (
            f"Failed to encode type '{exc.value_type.__name__}' for key '{key}' "
            f"due to invalid value - {exc.context}"
        )
    return f"Failed to encode key '{key}' - {exc}"


def encode_value(
    writer: KeyedWriter,
    value: Any,
    key: Key,
    *,
    diagnostics: Diagnostics | None = None,
) -> None:
    """Write *value* under *key*.

    Raises
    ------
    InvalidValueError
        When the writer rejects the value as not representable.
    EncodeFailure
        For any other failure, including unexpected writer errors.
    """
    diag = diagnostics or Diagnostics.silent()
    name = key_name(key)
    try:
        writer.set(key, value)
    except EncodeFailure as exc:
        diag.log(lambda: describe_encode_failure(exc, name))
        raise
    except Exception as exc:
        diag.log(lambda: describe_encode_failure(exc, name))
        raise EncodeFailure(f"Unexpected writer error: {exc}") from exc
    diag.log(lambda: f"Encoded value for key '{name}': {value!r}")


def encode_value_quietly(
    writer: KeyedWriter,
    value: Any,
    key: Key,
    *,
    diagnostics: Diagnostics | None = None,
) -> EncodeFailure | None:
    """Like :func:`encode_value` but returns the failure instead of raising."""
    try:
        encode_value(writer, value, key, diagnostics=diagnostics)
    except EncodeFailure as exc:
        return exc
    return None


def encode_entries(
    writer: KeyedWriter,
    entries: Iterable[EncodeEntry],
    *,
    diagnostics: Diagnostics | None = None,
    strict: bool = False,
) -> list[EncodeFailure]:
    """Encode every entry; one failing key does not block the others.

    With *strict* the first failure is raised instead.  Returns the
    failures in entry order.
    """
    failures: list[EncodeFailure] = []
    for entry in entries:
        if strict:
            encode_value(writer, entry.value, entry.key, diagnostics=diagnostics)
            continue
        failure = encode_value_quietly(
            writer, entry.value, entry.key, diagnostics=diagnostics,
        )
        if failure is not None:
            failures.append(failure)
    return failures
