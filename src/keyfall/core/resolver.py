"""Scalar key-fallback resolution.

Walks an ordered list of candidate keys (one logical field under the
names it carried across schema versions) and returns the first value
that decodes.

Decision rules
--------------
* Every key but the last is read **strictly**: the key and a non-null
  value are required.  ``NOT_FOUND`` moves on to the next key.
* The last key is read **leniently**: absence or ``null`` ends the walk
  and yields the fallback.
* ``TYPE_MISMATCH``, ``VALUE_MISSING``, ``MALFORMED`` and ``OTHER`` end
  the walk at any index.  The data is there but unusable, and reading
  an older key name would hide that.
* The first success wins; later keys are never read.

Guarantees
----------
* Pure apart from diagnostics - the container is only read.
* Only :func:`resolve_or_raise` raises, and only
  :class:`~keyfall.exceptions.KeyResolutionError`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar, Union

from keyfall.core.diagnostics import SEPARATOR, Diagnostics
from keyfall.core.models import CandidateKeys, DecodeOutcome, DecodeStatus, Key, key_name
from keyfall.core.protocols import ElementDecoder, KeyedContainer
from keyfall.exceptions import KeyResolutionError

T = TypeVar("T")

KeysArg = Union[Key, Iterable[Key], CandidateKeys]


# ---------------------------------------------------------------------------
# Diagnostic messages
# ---------------------------------------------------------------------------

def describe_failure(outcome: DecodeOutcome[Any], key: str, fallback: Any) -> str:
    """Render the diagnostic line for a failed keyed attempt."""
    detail = outcome.detail
    if outcome.status is DecodeStatus.NOT_FOUND:
        missing = outcome.key or key
        return f"Failed to decode due to missing key '{missing}' not found - {detail}"
    if outcome.status is DecodeStatus.TYPE_MISMATCH:
        reason = f"due to type mismatch of type '{outcome.expected}'"
    elif outcome.status is DecodeStatus.VALUE_MISSING:
        reason = f"due to missing '{outcome.expected}' value"
    elif outcome.status is DecodeStatus.MALFORMED:
        reason = "because it appears to be invalid data"
    else:
        return f"Failed to decode key `{key}`: {detail} Using fallback: {fallback!r}"
    return f"Failed to decode key '{key}' {reason} - {detail} Using fallback: {fallback!r}"


def announce(diagnostics: Diagnostics, candidates: CandidateKeys) -> None:
    diagnostics.log(SEPARATOR)
    diagnostics.log(lambda: f"Starting to decode keys: {candidates.names}")


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_outcome(
    container: KeyedContainer,
    keys: KeysArg,
    decoder: ElementDecoder[T],
    *,
    fallback: T | None = None,
    diagnostics: Diagnostics | None = None,
) -> DecodeOutcome[T]:
    """Walk *keys* and return the outcome that ended the walk.

    *fallback* is only used to word the diagnostics.
    """
    candidates = CandidateKeys.coerce(keys)
    diag = diagnostics or Diagnostics.silent()
    announce(diag, candidates)

    outcome: DecodeOutcome[T] = DecodeOutcome.failure(DecodeStatus.NOT_FOUND)
    for index, key in enumerate(candidates):
        name = key_name(key)
        if candidates.is_last(index):
            outcome = container.get_optional(key, decoder)
        else:
            outcome = container.get(key, decoder)

        if outcome.ok:
            diag.log(lambda: f"Decoded value for key `{name}`: {outcome.value!r}")
            return outcome

        diag.log(lambda: describe_failure(outcome, name, fallback))
        if not outcome.is_recoverable:
            return outcome
    return outcome


def resolve(
    container: KeyedContainer,
    keys: KeysArg,
    decoder: ElementDecoder[T],
    *,
    fallback: T | None = None,
    diagnostics: Diagnostics | None = None,
) -> T | None:
    """Resolve one value from the first usable candidate key.

    Returns *fallback* (possibly ``None``) whenever no key yields a
    value.  Never raises for data problems.
    """
    outcome = resolve_outcome(
        container, keys, decoder, fallback=fallback, diagnostics=diagnostics,
    )
    if outcome.ok and outcome.value is not None:
        return outcome.value
    return fallback


def resolve_or_raise(
    container: KeyedContainer,
    keys: KeysArg,
    decoder: ElementDecoder[T],
    *,
    diagnostics: Diagnostics | None = None,
) -> T:
    """Like :func:`resolve`, for fields that have no fallback.

    Raises
    ------
    KeyResolutionError
        When every candidate is absent, or a candidate holds a value
        that cannot be decoded.
    """
    candidates = CandidateKeys.coerce(keys)
    outcome = resolve_outcome(container, candidates, decoder, diagnostics=diagnostics)
    if outcome.ok and outcome.value is not None:
        return outcome.value

    if outcome.ok:
        outcome = DecodeOutcome.failure(
            DecodeStatus.NOT_FOUND,
            key=outcome.key,
            detail="No value present for any candidate key.",
        )
    raise KeyResolutionError(
        f"Could not resolve any of {candidates.names}: "
        f"{outcome.status.value.replace('_', ' ')}"
        + (f" ({outcome.detail})" if outcome.detail else ""),
        outcome,
    )
