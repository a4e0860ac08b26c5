"""Key-fallback resolution for ordered sequences.

Differs from :mod:`keyfall.core.resolver` in two ways:

* ``NOT_FOUND`` moves on to the next key at **every** index, the last
  included.  Only when no candidate key holds a sequence is the
  fallback returned.
* Once a sequence is found its elements are decoded one at a time.  A
  failed element is logged, consumed with
  :meth:`~keyfall.core.protocols.SequenceContainer.skip_one` and left
  out of the result; the rest of the sequence is still decoded.

An empty sequence resolves to ``[]``, never to the fallback.
"""

from __future__ import annotations

from typing import Any, TypeVar

from keyfall.core.diagnostics import Diagnostics
from keyfall.core.models import CandidateKeys, DecodeOutcome, DecodeStatus, key_name
from keyfall.core.protocols import ElementDecoder, KeyedContainer, SequenceContainer
from keyfall.core.resolver import KeysArg, announce, describe_failure
from keyfall.exceptions import SequenceCursorError

T = TypeVar("T")


def _describe_element_failure(outcome: DecodeOutcome[Any], index: int) -> str:
    where = f"element {index}"
    detail = outcome.detail
    if outcome.status is DecodeStatus.NOT_FOUND:
        reason = f"due to missing key '{outcome.key}' not found"
    elif outcome.status is DecodeStatus.TYPE_MISMATCH:
        reason = f"due to type mismatch of type '{outcome.expected}'"
    elif outcome.status is DecodeStatus.VALUE_MISSING:
        reason = f"due to missing '{outcome.expected}' value"
    elif outcome.status is DecodeStatus.MALFORMED:
        reason = "because it appears to be invalid data"
    else:
        return f"Failed to decode {where} - {detail} Skipping item."
    return f"Failed to decode {where} {reason} - {detail} Skipping item."


def decode_elements(
    sequence: SequenceContainer,
    decoder: ElementDecoder[T],
    *,
    diagnostics: Diagnostics | None = None,
) -> list[T]:
    """Decode every element of *sequence*, skipping the ones that fail.

    Relative order of the decoded elements is preserved.

    Raises
    ------
    SequenceCursorError
        When the cursor cannot be moved past a failed element.
    """
    diag = diagnostics or Diagnostics.silent()
    items: list[T] = []
    while not sequence.is_exhausted():
        index = sequence.current_index
        outcome = sequence.decode_next(decoder)
        if outcome.ok:
            items.append(outcome.value)  # type: ignore[arg-type]
            continue

        diag.log(lambda: _describe_element_failure(outcome, index))
        skipped = sequence.skip_one()
        if not skipped.ok:
            raise SequenceCursorError(
                f"Could not skip element {index}: {skipped.detail}",
            )
        if sequence.current_index <= index:
            raise SequenceCursorError(
                f"Sequence cursor did not advance past element {index}.",
            )
    return items


def resolve_sequence(
    container: KeyedContainer,
    keys: KeysArg,
    decoder: ElementDecoder[T],
    *,
    fallback: list[T] | None = None,
    diagnostics: Diagnostics | None = None,
) -> list[T] | None:
    """Resolve a list of ``T`` from the first candidate key holding one.

    Returns *fallback* when no candidate key exists, or when the value
    under the first existing key is not a usable sequence.
    """
    candidates = CandidateKeys.coerce(keys)
    diag = diagnostics or Diagnostics.silent()
    announce(diag, candidates)

    for key in candidates:
        name = key_name(key)
        found = container.nested_sequence(key)
        if found.is_recoverable:
            diag.log(lambda: describe_failure(found, name, fallback))
            continue
        if not found.ok:
            diag.log(lambda: describe_failure(found, name, fallback))
            return fallback

        try:
            values = decode_elements(found.value, decoder, diagnostics=diag)  # type: ignore[arg-type]
        except SequenceCursorError as exc:
            diag.log(lambda: f"Failed to decode key `{name}`: {exc} Using fallback: {fallback!r}")
            return fallback
        diag.log(lambda: f"Decoded value for key `{name}`: {values!r}")
        return values

    diag.log(lambda: f"Using fallback: {fallback!r}")
    return fallback
