"""Stream chunk protocol for model responses.

One unit of a streamed response is a tagged variant:

    {"type": "text", "content": "..."}
    {"type": "error", "error": "..."}
    {"type": "done"}

Each variant carries only its meaningful field, so "content only exists on
text chunks" is enforced by the types rather than by convention. Consumers
dispatch with a match statement over the variants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from airesponse.foundation.errors import Err, ErrorCode, JsonDict, Ok, ResponseError, Result

from .codec import decode


class ChunkType(StrEnum):
    """Wire tag of a chunk."""
    TEXT = "text"
    ERROR = "error"
    DONE = "done"


class StreamState(StrEnum):
    """Consumer-side stream lifecycle states."""
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class TextChunk:
    """Partial model output. Boundaries carry no meaning."""
    content: str

    @property
    def type(self) -> Literal[ChunkType.TEXT]:
        return ChunkType.TEXT

    def to_dict(self) -> JsonDict:
        return {"type": "text", "content": self.content}


@dataclass(slots=True, frozen=True)
class ErrorChunk:
    """Terminal: the provider reported a failure."""
    error: str

    @property
    def type(self) -> Literal[ChunkType.ERROR]:
        return ChunkType.ERROR

    def to_dict(self) -> JsonDict:
        return {"type": "error", "error": self.error}


@dataclass(slots=True, frozen=True)
class DoneChunk:
    """Terminal: the response completed."""

    @property
    def type(self) -> Literal[ChunkType.DONE]:
        return ChunkType.DONE

    def to_dict(self) -> JsonDict:
        return {"type": "done"}


StreamChunk: TypeAlias = TextChunk | ErrorChunk | DoneChunk

DONE = DoneChunk()


def is_terminal(chunk: StreamChunk) -> bool:
    """True for error and done chunks."""
    match chunk:
        case TextChunk():
            return False
        case ErrorChunk() | DoneChunk():
            return True


# ─────────────────────────────────────────────────────────────────────────────
# Factory Functions
# ─────────────────────────────────────────────────────────────────────────────

def text(content: str) -> TextChunk:
    """Create a text chunk."""
    return TextChunk(content)


def error(message: str) -> ErrorChunk:
    """Create an error chunk."""
    return ErrorChunk(message)


def done() -> DoneChunk:
    """Create a done chunk."""
    return DONE


# ─────────────────────────────────────────────────────────────────────────────
# Wire Decoding
# ─────────────────────────────────────────────────────────────────────────────

class _WireText(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    type: Literal["text"]
    content: str


class _WireError(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    type: Literal["error"]
    error: str


class _WireDone(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    type: Literal["done"]


_wire = TypeAdapter(Annotated[_WireText | _WireError | _WireDone, Field(discriminator="type")])


def decode_chunk(payload: JsonDict | str | bytes) -> Result[StreamChunk, ResponseError]:
    """Decode one wire event into a chunk.

    Malformed JSON, an unknown type tag, or a missing field is a protocol
    violation (an adapter/transport defect), never a model content error.
    """
    if isinstance(payload, str | bytes):
        try:
            payload = decode(payload)
        except ValueError as e:
            return Err(_violation(f"Chunk is not valid JSON: {e}"))
    try:
        wire = _wire.validate_python(payload, strict=True)
    except ValidationError as e:
        return Err(_violation("Unrecognized chunk", details=str(e)))
    match wire:
        case _WireText(content=content):
            return Ok(TextChunk(content))
        case _WireError(error=message):
            return Ok(ErrorChunk(message))
        case _WireDone():
            return Ok(DONE)


def _violation(message: str, details: str | None = None) -> ResponseError:
    return ResponseError.create(ErrorCode.PROTOCOL_VIOLATION, message, details)
