"""JSON-backed implementations of the container protocols.

This module is the **only** place that parses JSON text.  Parser
failures and decoder exceptions are caught here and returned as
:class:`~keyfall.core.models.DecodeOutcome` failures - nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from keyfall.core.models import DecodeOutcome, DecodeStatus, Key, key_name
from keyfall.core.protocols import ElementDecoder
from keyfall.exceptions import DocumentError
from keyfall.infra.json_values import (
    classify_decode_error,
    decoder_label,
    dump_json,
    encode_json_value,
    json_type_of,
)


def _decode_raw(
    raw: Any,
    decoder: ElementDecoder[Any],
    *,
    key: str | None,
) -> DecodeOutcome[Any]:
    """Run *decoder* on *raw*, turning any exception into an outcome."""
    try:
        value = decoder(raw)
    except Exception as exc:
        return classify_decode_error(exc, key=key, expected=decoder_label(decoder))
    return DecodeOutcome.success(value, key=key)


# ---------------------------------------------------------------------------
# Sequence container
# ---------------------------------------------------------------------------

class JsonSequenceContainer:
    """Cursor over a parsed JSON array.

    Satisfies :class:`~keyfall.core.protocols.SequenceContainer`
    structurally.
    """

    def __init__(self, items: list[Any], *, key: str | None = None) -> None:
        self._items: list[Any] = items
        self._key: str | None = key
        self._index: int = 0

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def current_index(self) -> int:
        return self._index

    def is_exhausted(self) -> bool:
        return self._index >= len(self._items)

    def decode_next(self, decoder: ElementDecoder[Any]) -> DecodeOutcome[Any]:
        if self.is_exhausted():
            return DecodeOutcome.failure(
                DecodeStatus.VALUE_MISSING,
                key=self._key,
                expected=decoder_label(decoder),
                detail="Unkeyed container is at end.",
            )
        outcome = _decode_raw(self._items[self._index], decoder, key=self._key)
        if outcome.ok:
            self._index += 1
        return outcome

    def skip_one(self) -> DecodeOutcome[None]:
        if self.is_exhausted():
            return DecodeOutcome.failure(
                DecodeStatus.OTHER,
                key=self._key,
                detail="Unkeyed container is at end.",
            )
        self._index += 1
        return DecodeOutcome.success(None, key=self._key)


# ---------------------------------------------------------------------------
# Keyed container
# ---------------------------------------------------------------------------

class JsonKeyedContainer:
    """Keyed view over a parsed JSON object.

    Satisfies :class:`~keyfall.core.protocols.KeyedContainer`
    structurally.
    """

    def __init__(self, data: dict[str, Any]) -> None:
        self._data: dict[str, Any] = data

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._data

    def get(self, key: Key, decoder: ElementDecoder[Any]) -> DecodeOutcome[Any]:
        name = key_name(key)
        if name not in self._data:
            return DecodeOutcome.failure(
                DecodeStatus.NOT_FOUND,
                key=name,
                detail=f'No value associated with key "{name}".',
            )
        raw = self._data[name]
        if raw is None:
            expected = decoder_label(decoder)
            return DecodeOutcome.failure(
                DecodeStatus.VALUE_MISSING,
                key=name,
                expected=expected,
                detail=f"Expected {expected} value but found null instead.",
            )
        return _decode_raw(raw, decoder, key=name)

    def get_optional(self, key: Key, decoder: ElementDecoder[Any]) -> DecodeOutcome[Any]:
        name = key_name(key)
        raw = self._data.get(name)
        if raw is None:
            return DecodeOutcome.success(None, key=name)
        return _decode_raw(raw, decoder, key=name)

    def nested_sequence(self, key: Key) -> DecodeOutcome[JsonSequenceContainer]:
        name = key_name(key)
        if name not in self._data:
            return DecodeOutcome.failure(
                DecodeStatus.NOT_FOUND,
                key=name,
                detail=f'No value associated with key "{name}".',
            )
        raw = self._data[name]
        if raw is None:
            return DecodeOutcome.failure(
                DecodeStatus.VALUE_MISSING,
                key=name,
                expected="array",
                detail="Cannot get unkeyed decoding container -- found null value instead.",
            )
        if not isinstance(raw, list):
            return DecodeOutcome.failure(
                DecodeStatus.TYPE_MISMATCH,
                key=name,
                expected="array",
                detail=f"Expected to decode array but found {json_type_of(raw)} instead.",
            )
        return DecodeOutcome.success(JsonSequenceContainer(raw, key=name), key=name)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class JsonDocument:
    """A JSON document, parsed lazily into a keyed container.

    Usage::

        document = JsonDocument.from_text('{"v1name": "hello"}')
        outcome = document.keyed_container()
    """

    def __init__(self, *, text: str | bytes | None = None, data: Any = None) -> None:
        self._text: str | bytes | None = text
        self._data: Any = data

    @classmethod
    def from_text(cls, text: str | bytes) -> JsonDocument:
        return cls(text=text)

    @classmethod
    def from_data(cls, data: Any) -> JsonDocument:
        return cls(data=data)

    @classmethod
    def from_path(cls, path: str | Path) -> JsonDocument:
        """Read a document from disk.

        Raises
        ------
        DocumentError
            If the file cannot be read.
        """
        try:
            text = Path(path).read_bytes()
        except OSError as exc:
            raise DocumentError(
                f"Cannot read {path}: {exc.strerror or exc}",
                hint="Check that the path exists and is readable.",
            ) from exc
        return cls(text=text)

    def keyed_container(self) -> DecodeOutcome[JsonKeyedContainer]:
        """Return the top-level object as a :class:`JsonKeyedContainer`.

        ``MALFORMED`` for unparsable text, ``TYPE_MISMATCH`` when the
        top level is not an object.
        """
        data = self._data
        if self._text is not None:
            try:
                data = json.loads(self._text)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                return DecodeOutcome.failure(
                    DecodeStatus.MALFORMED,
                    detail=f"The given data was not valid JSON. {exc}",
                )
        if not isinstance(data, dict):
            return DecodeOutcome.failure(
                DecodeStatus.TYPE_MISMATCH,
                expected="object",
                detail=f"Expected to decode object but found {json_type_of(data)} instead.",
            )
        return DecodeOutcome.success(JsonKeyedContainer(data))


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class JsonObjectWriter:
    """Builds a JSON object one key at a time.

    Satisfies :class:`~keyfall.core.protocols.KeyedWriter` structurally.
    A rejected value leaves the object unchanged.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def set(self, key: Key, value: Any) -> None:
        """Write *value* under *key*.

        Raises
        ------
        InvalidValueError
            When *value* has no JSON representation.
        """
        self._data[key_name(key)] = encode_json_value(value)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def dumps(self, *, indent: int | None = None) -> str:
        return dump_json(self._data, indent=indent)
