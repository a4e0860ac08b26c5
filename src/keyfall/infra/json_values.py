"""Value codecs between parsed JSON and Python types, backed by pydantic.

:func:`decoder_for` turns a target type into an
:data:`~keyfall.core.protocols.ElementDecoder` built on a
:class:`pydantic.TypeAdapter`; :func:`encode_json_value` is its mirror
on the write path.  :func:`classify_decode_error` maps any exception
raised while decoding into the shared taxonomy, so that no raw
exception leaves this layer.

Values are validated in pydantic's **strict JSON mode**: ``"1"`` is not
an ``int`` and ``1`` is not a ``str``, while ISO-8601 strings, UUID
strings and enum values still decode, exactly as they would from a
JSON document.  Any type pydantic can build a schema for is a valid
target (``tuple[int, str]``, ``set[T]``, ``TypedDict``, ``Literal``,
dataclasses, ``BaseModel`` subclasses, ...).  A callable that is not a
type is used as a custom decoder.
"""

from __future__ import annotations

import functools
import json
import typing
from collections.abc import Callable
from typing import Any

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import ErrorDetails, PydanticSerializationError, to_json, to_jsonable_python

from keyfall.core.models import DecodeOutcome, DecodeStatus
from keyfall.exceptions import (
    DecodeError,
    InvalidValueError,
    KeyNotFoundError,
    MalformedDataError,
    TypeMismatchError,
    ValueMissingError,
)

_JSON_TYPE_NAMES: dict[type, str] = {
    dict: "object",
    list: "array",
    str: "string",
    bool: "bool",
    int: "number",
    float: "number",
    type(None): "null",
}

# pydantic error codes that mean "right shape, unusable content".
_MALFORMED_ERRORS: frozenset[str] = frozenset(
    {
        "enum",
        "int_from_float",
        "json_invalid",
        "finite_number",
        "value_error",
        "assertion_error",
        "uuid_version",
        "date_from_datetime_inexact",
        "datetime_object_invalid",
    },
)


# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------

def type_label(target: Any) -> str:
    """Human-readable name of a decode target."""
    if isinstance(target, type) and typing.get_origin(target) is None:
        return target.__name__
    return str(target).replace("typing.", "")


def json_type_of(raw: Any) -> str:
    """Name of the JSON type *raw* was parsed from."""
    return _JSON_TYPE_NAMES.get(type(raw), type(raw).__name__)


def decoder_label(decoder: Any) -> str:
    """Best-effort description of what *decoder* produces."""
    if isinstance(decoder, TypeDecoder):
        return decoder.label
    return getattr(decoder, "__name__", type(decoder).__name__)


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------

def _is_type_form(target: Any) -> bool:
    return (
        isinstance(target, type)
        or typing.get_origin(target) is not None
        or target is Any
        or isinstance(target, typing.NewType)
    )


@functools.lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _adapter_for(target: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(target)
    except TypeError:
        # Unhashable targets, e.g. Annotated with list metadata.
        return TypeAdapter(target)


class TypeDecoder:
    """Strict decoder for one target type.

    Raises :class:`~keyfall.exceptions.DecodeError` subclasses, never a
    raw :class:`pydantic.ValidationError`.
    """

    def __init__(self, target: Any) -> None:
        self.target: Any = target
        self.label: str = type_label(target)
        try:
            self._adapter: TypeAdapter[Any] = _adapter_for(target)
        except PydanticSchemaGenerationError as exc:
            raise TypeError(f"Unsupported decode target: {target!r}") from exc

    def __call__(self, raw: Any) -> Any:
        try:
            payload = to_json(raw)
        except PydanticSerializationError as exc:
            raise MalformedDataError(f"Value is not JSON data: {exc}") from exc
        try:
            return self._adapter.validate_json(payload, strict=True)
        except ValidationError as exc:
            raise decode_error_from_validation(exc, self.label) from exc

    def __repr__(self) -> str:
        return f"TypeDecoder({self.label})"


def decoder_for(target: Any) -> Callable[[Any], Any]:
    """Build a decoder for *target*.

    ``object`` is treated as ``Any``.

    Raises
    ------
    TypeError
        If *target* is neither a type pydantic can validate nor a
        callable.
    """
    if target is object:
        target = Any
    if _is_type_form(target):
        return TypeDecoder(target)
    if callable(target):
        return target
    raise TypeError(f"Unsupported decode target: {target!r}")


# ---------------------------------------------------------------------------
# Exception classification
# ---------------------------------------------------------------------------

def _location(error: ErrorDetails) -> str:
    return ".".join(str(part) for part in error.get("loc", ()))


def decode_error_from_validation(exc: ValidationError, label: str) -> DecodeError:
    """Translate the first pydantic error into a keyfall decode error."""
    error = exc.errors()[0]
    kind = error["type"]
    raw = error.get("input")
    where = _location(error)
    prefix = f"At '{where}': " if where else ""
    expected = label if not where else f"{label} ({where})"

    if kind == "missing":
        loc = error.get("loc", ())
        missing = str(loc[-1]) if loc else label
        return KeyNotFoundError(missing, f"No value associated with key '{missing}'.")
    if raw is None:
        return ValueMissingError(
            expected, f"{prefix}Expected {label} value but found null instead.",
        )
    if kind in _MALFORMED_ERRORS or kind.endswith("_parsing"):
        return MalformedDataError(f"{prefix}{error['msg']}, got {raw!r}.")
    return TypeMismatchError(
        expected,
        f"{prefix}Expected to decode {label} but found {json_type_of(raw)} instead."
        f" ({error['msg']})",
    )


def classify_decode_error(
    exc: Exception,
    *,
    key: str | None,
    expected: str,
) -> DecodeOutcome[Any]:
    """Map an exception raised while decoding into a failed outcome."""
    if isinstance(exc, ValidationError):
        exc = decode_error_from_validation(exc, expected)
    if isinstance(exc, KeyNotFoundError):
        return DecodeOutcome.failure(DecodeStatus.NOT_FOUND, key=exc.key, detail=str(exc))
    if isinstance(exc, TypeMismatchError):
        return DecodeOutcome.failure(
            DecodeStatus.TYPE_MISMATCH, key=key, expected=exc.expected, detail=str(exc),
        )
    if isinstance(exc, ValueMissingError):
        return DecodeOutcome.failure(
            DecodeStatus.VALUE_MISSING, key=key, expected=exc.expected, detail=str(exc),
        )
    if isinstance(exc, MalformedDataError):
        return DecodeOutcome.failure(DecodeStatus.MALFORMED, key=key, detail=str(exc))
    if isinstance(exc, (TypeError, ValueError)):
        return DecodeOutcome.failure(
            DecodeStatus.TYPE_MISMATCH, key=key, expected=expected, detail=str(exc),
        )
    return DecodeOutcome.failure(
        DecodeStatus.OTHER, key=key, detail=f"{type(exc).__name__}: {exc}",
    )


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode_json_value(value: Any) -> Any:
    """Convert *value* into plain JSON data.

    Dataclasses, models, enums, dates, UUIDs and Decimals are converted
    by pydantic's JSON-mode serializer.

    Raises
    ------
    InvalidValueError
        When *value* (or anything nested in it) has no JSON form,
        including NaN and infinite floats.
    """
    try:
        data = to_jsonable_python(value, inf_nan_mode="constants")
    except PydanticSerializationError as exc:
        raise InvalidValueError(
            type(value),
            f"Value of type '{type(value).__name__}' is not JSON serializable. {exc}",
        ) from exc
    try:
        json.dumps(data, allow_nan=False)
    except ValueError as exc:
        raise InvalidValueError(
            float, "Unable to encode non-finite float directly in JSON.",
        ) from exc
    return data


def dump_json(data: Any, *, indent: int | None = None) -> str:
    """Serialize already-encoded JSON data to text."""
    return to_json(data, indent=indent).decode("utf-8")


__all__: list[str] = [
    "TypeDecoder",
    "classify_decode_error",
    "decode_error_from_validation",
    "decoder_for",
    "decoder_label",
    "dump_json",
    "encode_json_value",
    "json_type_of",
    "type_label",
]
