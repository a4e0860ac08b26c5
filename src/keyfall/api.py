"""Public entry points - wire JSON containers and sinks into the core.

This module is the composition root for library users, the way
:mod:`keyfall.cli.app` is for the command line.  It holds no resolution
logic of its own.

Usage::

    from keyfall import LogLevel, decode

    name = decode(payload, ["v2name", "v1name"], str, fallback="default")
    tags = decode_list(payload, ["tags", "labels"], str, fallback=[])

*source* may be a :class:`~keyfall.infra.json_container.JsonDocument`,
JSON text (``str`` / ``bytes``), already-parsed JSON data, or any object
satisfying :class:`~keyfall.core.protocols.KeyedContainer`.
"""

from __future__ import annotations

from typing import Any, TypeVar

from keyfall.core.diagnostics import Diagnostics
from keyfall.core.encoder import encode_entries as _encode_entries
from keyfall.core.encoder import encode_value, encode_value_quietly
from keyfall.core.models import CandidateKeys, DecodeOutcome, EncodeEntry, Key, LogLevel
from keyfall.core.protocols import DiagnosticsSink, KeyedContainer, KeyedWriter
from keyfall.core.resolver import KeysArg, announce, resolve, resolve_or_raise
from keyfall.core.sequence_resolver import resolve_sequence
from keyfall.exceptions import EncodeFailure, KeyResolutionError
from keyfall.infra.json_container import JsonDocument
from keyfall.infra.json_values import decoder_for
from keyfall.infra.sinks import RichConsoleSink

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Wiring helpers
# ---------------------------------------------------------------------------

def build_diagnostics(
    log_level: LogLevel = LogLevel.SILENT,
    sink: DiagnosticsSink | None = None,
) -> Diagnostics:
    """Return diagnostics for one call; verbose calls default to stderr."""
    if log_level is LogLevel.VERBOSE and sink is None:
        sink = RichConsoleSink()
    return Diagnostics(level=log_level, sink=sink)


def open_container(source: Any) -> DecodeOutcome[KeyedContainer]:
    """Turn any supported *source* into a keyed container outcome."""
    if isinstance(source, JsonDocument):
        return source.keyed_container()
    if isinstance(source, (str, bytes, bytearray)):
        return JsonDocument.from_text(source).keyed_container()
    if hasattr(source, "get_optional") and hasattr(source, "nested_sequence"):
        return DecodeOutcome.success(source)
    return JsonDocument.from_data(source).keyed_container()


def _open_or_log(
    source: Any,
    keys: KeysArg,
    fallback: Any,
    diagnostics: Diagnostics,
) -> DecodeOutcome[KeyedContainer]:
    opened = open_container(source)
    if not opened.ok:
        announce(diagnostics, CandidateKeys.coerce(keys))
        diagnostics.log(
            lambda: f"Failed to decode: {opened.detail}. Using fallback: {fallback!r}",
        )
    return opened


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def decode(
    source: Any,
    keys: KeysArg,
    target: Any,
    *,
    fallback: T | None = None,
    log_level: LogLevel = LogLevel.SILENT,
    sink: DiagnosticsSink | None = None,
) -> T | None:
    """Decode one value of type *target* from the first usable key.

    Never raises for data problems; returns *fallback* instead.
    """
    diagnostics = build_diagnostics(log_level, sink)
    opened = _open_or_log(source, keys, fallback, diagnostics)
    if not opened.ok:
        return fallback
    return resolve(
        opened.value,  # type: ignore[arg-type]
        keys,
        decoder_for(target),
        fallback=fallback,
        diagnostics=diagnostics,
    )


def decode_list(
    source: Any,
    keys: KeysArg,
    element: Any,
    *,
    fallback: list[T] | None = None,
    log_level: LogLevel = LogLevel.SILENT,
    sink: DiagnosticsSink | None = None,
) -> list[T] | None:
    """Decode a list of *element* values, skipping elements that fail."""
    diagnostics = build_diagnostics(log_level, sink)
    opened = _open_or_log(source, keys, fallback, diagnostics)
    if not opened.ok:
        return fallback
    return resolve_sequence(
        opened.value,  # type: ignore[arg-type]
        keys,
        decoder_for(element),
        fallback=fallback,
        diagnostics=diagnostics,
    )


def decode_or_raise(
    source: Any,
    keys: KeysArg,
    target: Any,
    *,
    log_level: LogLevel = LogLevel.SILENT,
    sink: DiagnosticsSink | None = None,
) -> Any:
    """Decode a value that has no fallback.

    Raises
    ------
    KeyResolutionError
        When the document cannot be opened or no key resolves.
    """
    diagnostics = build_diagnostics(log_level, sink)
    opened = _open_or_log(source, keys, None, diagnostics)
    if not opened.ok:
        raise KeyResolutionError(f"Failed to decode: {opened.detail}", opened)
    return resolve_or_raise(
        opened.value,  # type: ignore[arg-type]
        keys,
        decoder_for(target),
        diagnostics=diagnostics,
    )


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode(
    writer: KeyedWriter,
    value: Any,
    key: Key,
    *,
    log_level: LogLevel = LogLevel.SILENT,
    sink: DiagnosticsSink | None = None,
) -> None:
    """Write one value; failures are logged and re-raised."""
    encode_value(writer, value, key, diagnostics=build_diagnostics(log_level, sink))


def encode_quietly(
    writer: KeyedWriter,
    value: Any,
    key: Key,
    *,
    log_level: LogLevel = LogLevel.SILENT,
    sink: DiagnosticsSink | None = None,
) -> EncodeFailure | None:
    """Write one value; failures are logged and returned, never raised."""
    return encode_value_quietly(
        writer, value, key, diagnostics=build_diagnostics(log_level, sink),
    )


def encode_entries(
    writer: KeyedWriter,
    *entries: EncodeEntry,
    log_level: LogLevel = LogLevel.SILENT,
    sink: DiagnosticsSink | None = None,
    strict: bool = False,
) -> list[EncodeFailure]:
    """Write several ``(value, key)`` entries, best effort unless *strict*."""
    return _encode_entries(
        writer,
        entries,
        diagnostics=build_diagnostics(log_level, sink),
        strict=strict,
    )
