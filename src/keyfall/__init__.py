"""keyfall - resilient, schema-version tolerant decoding of keyed data.

Resolves a field from the first of several candidate key names that
holds a usable value, falling back to a caller-supplied default.
"""

from keyfall.api import (
    decode,
    decode_list,
    decode_or_raise,
    encode,
    encode_entries,
    encode_quietly,
)
from keyfall.core.models import EncodeEntry, LogLevel
from keyfall.version import __version__

__all__: list[str] = [
    "EncodeEntry",
    "LogLevel",
    "__version__",
    "decode",
    "decode_list",
    "decode_or_raise",
    "encode",
    "encode_entries",
    "encode_quietly",
]
