"""Recover one structured payload from free-form model output.

Model text arrives wrapped in Markdown fences, padded with whitespace, or
not as JSON at all. The pipeline is a chain of fallible stages, each
returning a Result:

    strip_code_fence -> parse_json -> validate_shape

parse_validated collapses any failure into a caller-supplied fallback and
never raises for any input.

Example:
    >>> from pydantic import BaseModel
    >>> class Item(BaseModel):
    ...     name: str
    ...     count: int
    >>> parse_validated('```json\\n{"name": "x", "count": 2}\\n```', Item, Item(name="d", count=0))
    Item(name='x', count=2)
    >>> parse_validated("not json", Item, Item(name="d", count=0))
    Item(name='d', count=0)
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, TypeVar

import orjson
from pydantic import TypeAdapter, ValidationError

from airesponse.foundation.errors import Err, ErrorCode, JsonValue, Ok, ResponseError, Result
from airesponse.runtime.observability.logging import get_logger

T = TypeVar("T")

_log = get_logger("airesponse.parsing")

# First fence wins: leftmost opening marker, nearest closing marker
_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def strip_code_fence(raw: str) -> str:
    """Return the trimmed interior of the first fenced block, or the trimmed input."""
    if match := _FENCE.search(raw):
        return match.group(1).strip()
    return raw.strip()


def parse_json(text: str) -> Result[JsonValue, ResponseError]:
    """Decode JSON text (orjson)."""
    try:
        return Ok(orjson.loads(text))
    except orjson.JSONDecodeError as e:
        return Err(ResponseError.create(ErrorCode.INVALID_JSON, f"Model output is not valid JSON: {e}"))


@lru_cache(maxsize=128)
def _adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def validate_shape(value: JsonValue, shape: type[T]) -> Result[T, ResponseError]:
    """Validate a decoded JSON value against a declared shape.

    The shape is anything pydantic can build a TypeAdapter for: a BaseModel,
    dataclass, TypedDict, or a plain annotated type. Validation runs strict
    in JSON mode, so "2" is not an int but enum and Literal values still
    match by value. Unknown object keys are dropped.
    """
    try:
        encoded = orjson.dumps(value)
    except orjson.JSONEncodeError as e:
        # nesting beyond what orjson re-encodes; no declared shape is that deep
        return Err(ResponseError.create(ErrorCode.SHAPE_MISMATCH, f"Model output cannot be validated: {e}"))
    try:
        return Ok(_adapter(shape).validate_json(encoded, strict=True))
    except ValidationError as e:
        return Err(ResponseError.create(
            ErrorCode.SHAPE_MISMATCH,
            f"Model output does not match {getattr(shape, '__name__', repr(shape))}",
            details=str(e),
        ))


def extract_validated(raw: object, shape: type[T]) -> Result[T, ResponseError]:
    """Run the full strip -> parse -> validate chain, keeping the failure reason."""
    text = raw if isinstance(raw, str) else ""
    return parse_json(strip_code_fence(text)).flat_map(lambda value: validate_shape(value, shape))


def parse_validated(raw: object, shape: type[T], fallback: T) -> T:
    """Parse model output into shape, or return fallback on any failure.

    Malformed JSON and shape mismatches are not distinguished to the caller.
    Non-string input is treated as an empty string.
    """
    return (
        extract_validated(raw, shape)
        .inspect_err(lambda e: _log.debug("fallback substituted", code=e.code.value, reason=e.message))
        .unwrap_or(fallback)
    )
