"""Domain models for keyfall.

All models are **frozen** dataclasses or enums - immutable, call-scoped
value objects.  They carry zero I/O and zero dependencies on external
packages; nothing here outlives a single resolver call.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from keyfall.exceptions import EmptyCandidateKeysError

T = TypeVar("T")

Key = Union[str, enum.Enum]
"""A key identifier: a plain string or a string-valued enum member."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class LogLevel(enum.Enum):
    """Whether diagnostic messages are emitted for a call."""

    SILENT = "silent"
    VERBOSE = "verbose"


class DecodeStatus(enum.Enum):
    """Tag of a :class:`DecodeOutcome`."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    TYPE_MISMATCH = "type_mismatch"
    VALUE_MISSING = "value_missing"
    MALFORMED = "malformed"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

def key_name(key: Key) -> str:
    """Return the stable string form of *key*."""
    if isinstance(key, enum.Enum):
        return str(key.value)
    return str(key)


@dataclass(frozen=True, slots=True)
class CandidateKeys:
    """Non-empty, ordered set of key names for one logical field.

    Index 0 is tried first.  Whether the list runs newest-first or
    oldest-first is up to the caller, as long as it is consistent.
    """

    keys: tuple[Key, ...]

    def __post_init__(self) -> None:
        if not self.keys:
            raise EmptyCandidateKeysError(
                "At least one candidate key is required.",
            )

    @classmethod
    def of(cls, *keys: Key) -> CandidateKeys:
        return cls(keys=tuple(keys))

    @classmethod
    def coerce(cls, keys: Key | Iterable[Key] | CandidateKeys) -> CandidateKeys:
        """Lift a single key, or any iterable of keys, into a key set."""
        if isinstance(keys, CandidateKeys):
            return keys
        if isinstance(keys, (str, enum.Enum)):
            return cls(keys=(keys,))
        return cls(keys=tuple(keys))

    @property
    def names(self) -> list[str]:
        return [key_name(key) for key in self.keys]

    def is_last(self, index: int) -> bool:
        return index == len(self.keys) - 1

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self):
        return iter(self.keys)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DecodeOutcome(Generic[T]):
    """Result of one attempt to read a value from a container.

    Containers return outcomes instead of raising; resolvers branch on
    :attr:`status`.
    """

    status: DecodeStatus
    value: T | None = None
    key: str | None = None
    """Key the outcome refers to: the key tried, or for ``NOT_FOUND`` the
    key found missing (which may be a nested field)."""

    expected: str | None = None
    """Described type name for ``TYPE_MISMATCH`` / ``VALUE_MISSING``."""

    detail: str = ""
    """Human-readable context of the failure."""

    @classmethod
    def success(cls, value: T | None, *, key: str | None = None) -> DecodeOutcome[T]:
        return cls(status=DecodeStatus.SUCCESS, value=value, key=key)

    @classmethod
    def failure(
        cls,
        status: DecodeStatus,
        *,
        key: str | None = None,
        expected: str | None = None,
        detail: str = "",
    ) -> DecodeOutcome[T]:
        if status is DecodeStatus.SUCCESS:
            raise ValueError("A failure outcome cannot carry SUCCESS.")
        return cls(status=status, key=key, expected=expected, detail=detail)

    @property
    def ok(self) -> bool:
        return self.status is DecodeStatus.SUCCESS

    @property
    def is_recoverable(self) -> bool:
        """``True`` when the next candidate key may be tried."""
        return self.status is DecodeStatus.NOT_FOUND


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class EncodeEntry:
    """One ``(value, key)`` pair of a best-effort batch encode."""

    value: Any
    key: Key
