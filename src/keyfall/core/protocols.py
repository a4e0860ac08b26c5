"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols - never on concrete
implementations - so the resolvers stay independent of JSON or any
other concrete format.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from keyfall.core.models import DecodeOutcome, Key

T = TypeVar("T")

ElementDecoder = Callable[[Any], T]
"""Decodes one raw value into ``T``.

May raise any :class:`~keyfall.exceptions.DecodeError` subclass; the
container adapter classifies whatever it raises.
"""


class SequenceContainer(Protocol):
    """Cursor over an ordered sequence of raw elements."""

    @property
    def count(self) -> int:
        """Total number of elements in the sequence."""
        ...  # pragma: no cover

    @property
    def current_index(self) -> int:
        """Index of the element the next call will read."""
        ...  # pragma: no cover

    def is_exhausted(self) -> bool:
        """Return ``True`` once every element has been consumed."""
        ...  # pragma: no cover

    def decode_next(self, decoder: ElementDecoder[T]) -> DecodeOutcome[T]:
        """Decode the element under the cursor.

        The cursor advances **only** on success; after a failure the
        caller must call :meth:`skip_one` to move past the element.
        """
        ...  # pragma: no cover

    def skip_one(self) -> DecodeOutcome[None]:
        """Consume the element under the cursor without decoding it.

        Fails (``OTHER``) only when the sequence is already exhausted.
        """
        ...  # pragma: no cover


class KeyedContainer(Protocol):
    """Keyed access to a structured document.

    No method raises: every parser or decoder fault is returned as a
    failed :class:`DecodeOutcome`.
    """

    def get(self, key: Key, decoder: ElementDecoder[T]) -> DecodeOutcome[T]:
        """Strict get - the key and a non-null value are both required.

        Fails with ``NOT_FOUND``, ``VALUE_MISSING``, ``TYPE_MISMATCH``,
        ``MALFORMED`` or ``OTHER``.
        """
        ...  # pragma: no cover

    def get_optional(self, key: Key, decoder: ElementDecoder[T]) -> DecodeOutcome[T]:
        """Lenient get - absence or ``null`` is ``SUCCESS(None)``."""
        ...  # pragma: no cover

    def nested_sequence(self, key: Key) -> DecodeOutcome[SequenceContainer]:
        """Return a :class:`SequenceContainer` for the value at *key*."""
        ...  # pragma: no cover


class KeyedWriter(Protocol):
    """Keyed write access to a structured document being encoded."""

    def set(self, key: Key, value: Any) -> None:
        """Write *value* under *key*.

        Raises
        ------
        InvalidValueError
            When *value* is not representable in the target format.
        EncodeFailure
            For any other write failure.
        """
        ...  # pragma: no cover


class DiagnosticsSink(Protocol):
    """Destination for diagnostic lines."""

    def write(self, message: str) -> None:
        ...  # pragma: no cover
