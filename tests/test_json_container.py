"""Tests for the JSON container adapter (infra/json_container.py).

Verifies that every parser and decoder fault is translated into the
shared outcome taxonomy and that nothing raw escapes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from keyfall.core.models import DecodeStatus
from keyfall.exceptions import DocumentError
from keyfall.infra.json_container import (
    JsonDocument,
    JsonKeyedContainer,
    JsonObjectWriter,
    JsonSequenceContainer,
)
from keyfall.infra.json_values import decoder_for

STR = decoder_for(str)
INT = decoder_for(int)


# ---------------------------------------------------------------------------
# Keyed container - strict get
# ---------------------------------------------------------------------------

class TestKeyedGet:
    def test_success(self) -> None:
        outcome = JsonKeyedContainer({"a": "x"}).get("a", STR)
        assert outcome.ok
        assert outcome.value == "x"
        assert outcome.key == "a"

    def test_missing_key(self) -> None:
        outcome = JsonKeyedContainer({}).get("a", STR)
        assert outcome.status is DecodeStatus.NOT_FOUND
        assert outcome.key == "a"

    def test_null_value(self) -> None:
        outcome = JsonKeyedContainer({"a": None}).get("a", STR)
        assert outcome.status is DecodeStatus.VALUE_MISSING
        assert outcome.expected == "str"

    def test_wrong_type(self) -> None:
        outcome = JsonKeyedContainer({"a": 123}).get("a", STR)
        assert outcome.status is DecodeStatus.TYPE_MISMATCH
        assert "found number" in outcome.detail

    def test_custom_decoder_value_error_is_type_mismatch(self) -> None:
        def parse_port(raw: Any) -> int:
            return int(raw)

        outcome = JsonKeyedContainer({"port": "http"}).get("port", parse_port)
        assert outcome.status is DecodeStatus.TYPE_MISMATCH
        assert outcome.expected == "parse_port"

    def test_custom_decoder_other_error(self) -> None:
        def broken(raw: Any) -> Any:
            raise LookupError("nope")

        outcome = JsonKeyedContainer({"a": 1}).get("a", broken)
        assert outcome.status is DecodeStatus.OTHER
        assert "LookupError: nope" in outcome.detail


# ---------------------------------------------------------------------------
# Keyed container - lenient get
# ---------------------------------------------------------------------------

class TestKeyedGetOptional:
    def test_absent_is_success_none(self) -> None:
        outcome = JsonKeyedContainer({}).get_optional("a", STR)
        assert outcome.ok
        assert outcome.value is None

    def test_null_is_success_none(self) -> None:
        outcome = JsonKeyedContainer({"a": None}).get_optional("a", STR)
        assert outcome.ok
        assert outcome.value is None

    def test_wrong_type_still_fails(self) -> None:
        outcome = JsonKeyedContainer({"a": True}).get_optional("a", INT)
        assert outcome.status is DecodeStatus.TYPE_MISMATCH


# ---------------------------------------------------------------------------
# Nested sequences
# ---------------------------------------------------------------------------

class TestNestedSequence:
    def test_returns_cursor(self) -> None:
        outcome = JsonKeyedContainer({"xs": [1, 2]}).nested_sequence("xs")
        assert outcome.ok
        assert outcome.value.count == 2

    def test_missing(self) -> None:
        outcome = JsonKeyedContainer({}).nested_sequence("xs")
        assert outcome.status is DecodeStatus.NOT_FOUND

    def test_not_an_array(self) -> None:
        outcome = JsonKeyedContainer({"xs": {"a": 1}}).nested_sequence("xs")
        assert outcome.status is DecodeStatus.TYPE_MISMATCH
        assert outcome.expected == "array"

    def test_null(self) -> None:
        outcome = JsonKeyedContainer({"xs": None}).nested_sequence("xs")
        assert outcome.status is DecodeStatus.VALUE_MISSING


class TestSequenceContainer:
    def test_decode_next_advances_only_on_success(self) -> None:
        sequence = JsonSequenceContainer(["a", 1])
        assert sequence.decode_next(STR).value == "a"
        assert sequence.current_index == 1
        assert not sequence.decode_next(STR).ok
        assert sequence.current_index == 1

    def test_skip_one_advances(self) -> None:
        sequence = JsonSequenceContainer([1])
        assert sequence.skip_one().ok
        assert sequence.is_exhausted()

    def test_skip_one_at_end_fails(self) -> None:
        sequence = JsonSequenceContainer([])
        assert sequence.skip_one().status is DecodeStatus.OTHER

    def test_decode_next_at_end_fails(self) -> None:
        sequence = JsonSequenceContainer([])
        assert sequence.decode_next(STR).status is DecodeStatus.VALUE_MISSING


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class TestJsonDocument:
    def test_from_text(self) -> None:
        outcome = JsonDocument.from_text('{"a": 1}').keyed_container()
        assert outcome.ok
        assert outcome.value.get("a", INT).value == 1

    def test_from_bytes(self) -> None:
        assert JsonDocument.from_text(b'{"a": 1}').keyed_container().ok

    def test_invalid_json_is_malformed(self) -> None:
        outcome = JsonDocument.from_text("{not json").keyed_container()
        assert outcome.status is DecodeStatus.MALFORMED
        assert "not valid JSON" in outcome.detail

    def test_top_level_array_is_type_mismatch(self) -> None:
        outcome = JsonDocument.from_data([1, 2]).keyed_container()
        assert outcome.status is DecodeStatus.TYPE_MISMATCH
        assert outcome.expected == "object"

    def test_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"v1name": "hello"}), encoding="utf-8")
        outcome = JsonDocument.from_path(path).keyed_container()
        assert outcome.value.get("v1name", STR).value == "hello"

    def test_from_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentError, match="Cannot read"):
            JsonDocument.from_path(tmp_path / "absent.json")


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class TestJsonObjectWriter:
    def test_dumps(self) -> None:
        writer = JsonObjectWriter()
        writer.set("a", 1)
        writer.set("b", ["x", None])
        assert json.loads(writer.dumps()) == {"a": 1, "b": ["x", None]}

    def test_to_dict_is_a_copy(self) -> None:
        writer = JsonObjectWriter()
        writer.set("a", 1)
        snapshot = writer.to_dict()
        snapshot["b"] = 2
        assert writer.to_dict() == {"a": 1}
