"""Core layer - key-fallback resolution and encode reporting.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* Containers are borrowed for one call and never stored.
"""

from keyfall.core.diagnostics import Diagnostics
from keyfall.core.encoder import encode_entries, encode_value, encode_value_quietly
from keyfall.core.models import (
    CandidateKeys,
    DecodeOutcome,
    DecodeStatus,
    EncodeEntry,
    LogLevel,
    key_name,
)
from keyfall.core.protocols import (
    DiagnosticsSink,
    ElementDecoder,
    KeyedContainer,
    KeyedWriter,
    SequenceContainer,
)
from keyfall.core.resolver import resolve, resolve_or_raise, resolve_outcome
from keyfall.core.sequence_resolver import decode_elements, resolve_sequence

__all__: list[str] = [
    "CandidateKeys",
    "DecodeOutcome",
    "DecodeStatus",
    "Diagnostics",
    "DiagnosticsSink",
    "ElementDecoder",
    "EncodeEntry",
    "KeyedContainer",
    "KeyedWriter",
    "LogLevel",
    "SequenceContainer",
    "decode_elements",
    "encode_entries",
    "encode_value",
    "encode_value_quietly",
    "key_name",
    "resolve",
    "resolve_or_raise",
    "resolve_outcome",
    "resolve_sequence",
]
