"""Infrastructure layer - concrete JSON containers, codecs and sinks.

Every raw parser or decoder exception must be caught here and either
classified into a :class:`~keyfall.core.models.DecodeOutcome` or
re-raised as a :class:`~keyfall.exceptions.KeyfallError` subclass.

Rules
-----
* No imports from ``cli``.
* No output to stdout.
* Must expose clean, typed interfaces consumed by the core layer.
"""

from keyfall.infra.json_container import (
    JsonDocument,
    JsonKeyedContainer,
    JsonObjectWriter,
    JsonSequenceContainer,
)
from keyfall.infra.json_values import decoder_for, encode_json_value
from keyfall.infra.sinks import ListSink, LoggingSink, RichConsoleSink

__all__: list[str] = [
    "JsonDocument",
    "JsonKeyedContainer",
    "JsonObjectWriter",
    "JsonSequenceContainer",
    "ListSink",
    "LoggingSink",
    "RichConsoleSink",
    "decoder_for",
    "encode_json_value",
]
