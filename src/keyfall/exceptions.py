"""Custom exception hierarchy for keyfall.

Every exception raised by keyfall inherits from :class:`KeyfallError`.
Raw parser and codec exceptions (``json.JSONDecodeError``, ``TypeError``
from a user decoder, ...) must NEVER propagate out of the
infrastructure layer - they are caught there and classified into a
:class:`~keyfall.core.models.DecodeOutcome` or re-raised as a typed
subclass defined here.

Hierarchy
---------
KeyfallError
├── EmptyCandidateKeysError
├── KeyResolutionError
├── DecodeError
│   ├── KeyNotFoundError
│   ├── TypeMismatchError
│   ├── ValueMissingError
│   └── MalformedDataError
├── SequenceCursorError
├── EncodeFailure
│   └── InvalidValueError
├── DocumentError
└── EnvironmentError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from keyfall.core.models import DecodeOutcome


class KeyfallError(Exception):
    """Base exception for all keyfall errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Candidate keys --------------------------------------------------------

class EmptyCandidateKeysError(KeyfallError):
    """Raised when a resolver is handed an empty list of candidate keys."""


class KeyResolutionError(KeyfallError):
    """Raised by the throwing resolver variants when no key resolves."""

    def __init__(
        self,
        message: str,
        outcome: DecodeOutcome,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.outcome: DecodeOutcome = outcome
        """The last attempt, which decided the failure."""


# --- Element decoding ------------------------------------------------------

class DecodeError(KeyfallError):
    """Base class for failures raised while decoding one raw value."""


class KeyNotFoundError(DecodeError):
    """Raised when a required key is absent from a keyed container."""

    def __init__(self, key: str, message: str | None = None) -> None:
        super().__init__(message or f"No value associated with key '{key}'.")
        self.key: str = key


class TypeMismatchError(DecodeError):
    """Raised when a value is present but has the wrong shape."""

    def __init__(self, expected: str, message: str) -> None:
        super().__init__(message)
        self.expected: str = expected


class ValueMissingError(DecodeError):
    """Raised when a value was required but ``null`` was found."""

    def __init__(self, expected: str, message: str) -> None:
        super().__init__(message)
        self.expected: str = expected


class MalformedDataError(DecodeError):
    """Raised when a value has the right shape but corrupt content."""


# --- Sequences -------------------------------------------------------------

class SequenceCursorError(KeyfallError):
    """Raised when a sequence cursor cannot move past a failed element."""


# --- Encoding --------------------------------------------------------------

class EncodeFailure(KeyfallError):
    """Raised when a value cannot be written into a keyed container."""


class InvalidValueError(EncodeFailure):
    """Raised when a value is not representable in the target format."""

    def __init__(self, value_type: type, context: str) -> None:
        super().__init__(context)
        self.value_type: type = value_type
        self.context: str = context


# --- Documents / environment -----------------------------------------------

class DocumentError(KeyfallError):
    """Raised when an input document cannot be read."""


class EnvironmentError(KeyfallError):
    """Raised when a required runtime dependency is not available."""
