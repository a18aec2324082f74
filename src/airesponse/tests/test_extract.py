"""Tests for code-fence stripping and validated parsing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from typing_extensions import TypedDict

import pytest
from pydantic import BaseModel

from airesponse.foundation.errors import ErrorCode
from airesponse.parsing import (
    extract_validated,
    parse_json,
    parse_validated,
    strip_code_fence,
    validate_shape,
)


class Item(BaseModel):
    name: str
    count: int


FALLBACK = Item(name="d", count=0)


class Confidence(StrEnum):
    HIGH = "high"
    LOW = "low"


class Suggestion(BaseModel):
    kind: Literal["existing", "new"]
    confidence: Confidence
    topic_id: str | None = None


class Suggestions(BaseModel):
    suggestions: list[Suggestion]


# ─────────────────────────────────────────────────────────────────────────────
# strip_code_fence
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize("raw", [
    '  {"key": "value"}  ',
    "  hello  ",
    "\n\tplain text\n",
    "",
    "   ",
    "``not a fence``",
])
def test_no_fence_returns_trimmed_input(raw: str) -> None:
    assert strip_code_fence(raw) == raw.strip()


@pytest.mark.parametrize("raw", [
    '```json\n{"key": "value"}\n```',
    '```\n{"key": "value"}\n```',
    '```json{"key": "value"}```',
    'Here you go:\n```json\n{"key": "value"}\n```\nHope that helps!',
])
def test_fence_interior_is_extracted(raw: str) -> None:
    assert strip_code_fence(raw) == '{"key": "value"}'


def test_interior_is_trimmed_after_extraction() -> None:
    assert strip_code_fence("```json\n  { }\n  ```") == "{ }"
    assert strip_code_fence("```\n\n  line one\n  line two  \n\n```") == "line one\n  line two"


def test_first_fence_wins() -> None:
    raw = "```json\n{\"a\": 1}\n```\ntext\n```json\n{\"b\": 2}\n```"
    assert strip_code_fence(raw) == '{"a": 1}'


# ─────────────────────────────────────────────────────────────────────────────
# parse_validated
# ─────────────────────────────────────────────────────────────────────────────


def test_parses_fenced_json() -> None:
    raw = '```json\n{"name":"x","count":2}\n```'
    assert parse_validated(raw, Item, FALLBACK) == Item(name="x", count=2)


def test_parses_bare_json() -> None:
    assert parse_validated('{"name": "test", "count": 5}', Item, FALLBACK) == Item(name="test", count=5)


def test_not_json_returns_fallback() -> None:
    assert parse_validated("not json", Item, FALLBACK) is FALLBACK


def test_shape_mismatch_returns_fallback() -> None:
    assert parse_validated('{"name": 123}', Item, FALLBACK) is FALLBACK
    assert parse_validated('{"name": "x"}', Item, FALLBACK) is FALLBACK
    assert parse_validated("[1, 2]", Item, FALLBACK) is FALLBACK


def test_no_primitive_coercion() -> None:
    """A numeric string is not a number."""
    assert parse_validated('{"name": "x", "count": "2"}', Item, FALLBACK) is FALLBACK
    assert parse_validated('{"name": 5, "count": 2}', Item, FALLBACK) is FALLBACK


def test_extra_fields_are_dropped() -> None:
    result = parse_validated('{"name": "test", "count": 1, "extra": true}', Item, FALLBACK)

    assert result == Item(name="test", count=1)
    assert not hasattr(result, "extra")


def test_enum_and_literal_values_are_checked() -> None:
    empty = Suggestions(suggestions=[])
    good = '{"suggestions": [{"kind": "new", "confidence": "high"}]}'
    bad_enum = '{"suggestions": [{"kind": "new", "confidence": "certain"}]}'
    bad_literal = '{"suggestions": [{"kind": "maybe", "confidence": "low"}]}'

    parsed = parse_validated(good, Suggestions, empty)
    assert parsed.suggestions[0].confidence is Confidence.HIGH
    assert parsed.suggestions[0].topic_id is None
    assert parse_validated(bad_enum, Suggestions, empty) is empty
    assert parse_validated(bad_literal, Suggestions, empty) is empty


def test_typed_dict_and_dataclass_shapes() -> None:
    class Point(TypedDict):
        x: int
        y: int

    @dataclass
    class Size:
        w: float
        h: float

    assert parse_validated('{"x": 1, "y": 2, "z": 3}', Point, {"x": 0, "y": 0}) == {"x": 1, "y": 2}
    assert parse_validated('{"w": 1, "h": 2.5}', Size, Size(0, 0)) == Size(1.0, 2.5)
    assert parse_validated('["a", "b"]', list[str], []) == ["a", "b"]
    assert parse_validated('["a", 1]', list[str], []) == []


@pytest.mark.parametrize("raw", [
    "",
    "   \n\t",
    "\x00\x01\x02\xff",
    "\ud800",
    '{"name": "x", "count": 2',
    '```json\n{"name": \n```',
    "```",
    "```json",
    "[" * 5000 + "]" * 5000,
    '{"name": "x", "count": NaN}',
    '{"name": "x", "count": 1e999}',
    '{"name": "x", "count": 99999999999999999999999999}',
    "null",
    "true",
    "\"just a string\"",
])
def test_parse_validated_is_total(raw: str) -> None:
    assert parse_validated(raw, Item, FALLBACK) is FALLBACK


@pytest.mark.parametrize("raw", [None, 42, b'{"name": "x", "count": 2}', ["x"], object()])
def test_non_string_input_is_treated_as_empty(raw: object) -> None:
    assert parse_validated(raw, Item, FALLBACK) is FALLBACK


# ─────────────────────────────────────────────────────────────────────────────
# Individual stages
# ─────────────────────────────────────────────────────────────────────────────


def test_parse_json_stage() -> None:
    assert parse_json('{"a": [1, 2]}').unwrap() == {"a": [1, 2]}
    assert parse_json("{oops").unwrap_err().code is ErrorCode.INVALID_JSON


def test_validate_shape_stage() -> None:
    assert validate_shape({"name": "x", "count": 1}, Item).unwrap() == Item(name="x", count=1)

    failure = validate_shape({"name": "x"}, Item).unwrap_err()
    assert failure.code is ErrorCode.SHAPE_MISMATCH
    assert "Item" in failure.message
    assert failure.details and "count" in failure.details


def test_extract_validated_reports_which_stage_failed() -> None:
    assert extract_validated("nope", Item).unwrap_err().code is ErrorCode.INVALID_JSON
    assert extract_validated('{"name": 1}', Item).unwrap_err().code is ErrorCode.SHAPE_MISMATCH
    assert extract_validated('```\n{"name":"a","count":3}\n```', Item).unwrap() == Item(name="a", count=3)
