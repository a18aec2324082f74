"""Consumer side of the chunk protocol.

StreamAccumulator is the state machine for one stream:

    STREAMING --text--> STREAMING
    STREAMING --done--> DONE      (terminal)
    STREAMING --error-> FAILED    (terminal)

Nothing leaves a terminal state. A chunk after a terminal one, or an
undecodable wire event, is a protocol violation: it is rejected and logged,
the buffer is left untouched, and the stream is unusable from then on.

Accumulated text is always readable, but result() only returns it as Ok when
a done chunk was actually observed, so a cut-off stream is never handed to
the parser as if it were complete.

Example:
    >>> acc = StreamAccumulator()
    >>> for c in (text("a"), text("b"), done()):
    ...     _ = acc.feed(c)
    >>> acc.state, acc.result()
    (<StreamState.DONE: 'done'>, Ok('ab'))
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass, field
from typing import TypeVar

from airesponse.foundation.errors import Err, ErrorCode, JsonDict, Ok, ResponseError, Result
from airesponse.parsing import parse_validated
from airesponse.runtime.observability.logging import BoundLogger, get_logger

from .stream import (
    DoneChunk,
    ErrorChunk,
    StreamChunk,
    StreamState,
    TextChunk,
    decode_chunk,
)

T = TypeVar("T")

_log = get_logger("airesponse.stream")


@dataclass(slots=True)
class StreamResult:
    """Final text of a completed stream plus streaming metadata."""
    text: str
    chunks: int
    duration_ms: float


@dataclass(slots=True)
class StreamAccumulator:
    """Accumulates text chunks of a single stream in arrival order.

    Not shared between streams; each request gets its own accumulator.
    """

    stream_id: str | None = None
    _parts: list[str] = field(default_factory=list)
    _state: StreamState = StreamState.STREAMING
    _error: str | None = None
    _violation: ResponseError | None = None
    _chunks: int = 0
    _started: float = field(default_factory=time.perf_counter)

    # ─────────────────────────────────────────────────────────────────
    # Inspection
    # ─────────────────────────────────────────────────────────────────

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def text(self) -> str:
        """Text accumulated so far, partial or complete."""
        return "".join(self._parts)

    @property
    def chunks(self) -> int:
        """Number of accepted chunks, terminal chunk included."""
        return self._chunks

    @property
    def is_terminal(self) -> bool:
        return self._state is not StreamState.STREAMING

    @property
    def violation(self) -> ResponseError | None:
        return self._violation

    # ─────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────

    def feed(self, chunk: StreamChunk) -> Result[StreamState, ResponseError]:
        """Apply one chunk. Returns the new state, or the violation it caused."""
        if self._violation is not None:
            return Err(self._violation)
        if self.is_terminal:
            return Err(self._reject(f"{type(chunk).__name__} after terminal state {self._state}"))
        match chunk:
            case TextChunk(content=str() as content):
                self._parts.append(content)
            case DoneChunk():
                self._state = StreamState.DONE
            case ErrorChunk(error=message):
                self._state = StreamState.FAILED
                self._error = message
                self._logger().warning("provider reported error", error=message)
            case _:
                return Err(self._reject(f"Unrecognized chunk {chunk!r}"))
        self._chunks += 1
        return Ok(self._state)

    def feed_wire(self, payload: JsonDict | str | bytes) -> Result[StreamState, ResponseError]:
        """Decode a wire event and apply it."""
        if self._violation is not None:
            return Err(self._violation)
        return decode_chunk(payload).or_else(lambda e: Err(self._record(e))).flat_map(self.feed)

    def result(self) -> Result[str, ResponseError]:
        """Final text if the stream completed; otherwise why it did not."""
        if self._violation is not None:
            return Err(self._violation)
        match self._state:
            case StreamState.DONE:
                return Ok(self.text)
            case StreamState.FAILED:
                return Err(ResponseError.create(
                    ErrorCode.PROVIDER_ERROR, self._error or "provider error", details=self.text or None,
                ))
            case StreamState.STREAMING:
                return Err(self.incomplete())

    def incomplete(self) -> ResponseError:
        """Error for a source that ended before any terminal chunk."""
        return ResponseError.create(
            ErrorCode.STREAM_INCOMPLETE,
            "Stream ended without a terminal chunk",
            details=self.text or None,
        )

    def to_stream_result(self) -> StreamResult:
        return StreamResult(
            text=self.text,
            chunks=self._chunks,
            duration_ms=(time.perf_counter() - self._started) * 1000,
        )

    # ─────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────

    def _reject(self, message: str) -> ResponseError:
        return self._record(ResponseError.create(ErrorCode.PROTOCOL_VIOLATION, message))

    def _record(self, violation: ResponseError) -> ResponseError:
        self._violation = violation
        self._logger().warning("protocol violation", reason=violation.message, chunks=self._chunks)
        return violation

    def _logger(self) -> BoundLogger:
        return _log.bind(stream_id=self.stream_id) if self.stream_id else _log


# ─────────────────────────────────────────────────────────────────────────────
# Stream Collectors
# ─────────────────────────────────────────────────────────────────────────────

def collect_chunks(
    chunks: Iterable[StreamChunk],
    *,
    stream_id: str | None = None,
) -> Result[StreamResult, ResponseError]:
    """Consume a chunk sequence up to its terminal chunk."""
    acc = StreamAccumulator(stream_id=stream_id)
    for chunk in chunks:
        if (step := acc.feed(chunk)).is_err():
            return Err(step.unwrap_err())
        if acc.is_terminal:
            break
    return _finish(acc)


async def collect_stream(
    stream: AsyncIterable[StreamChunk],
    *,
    stream_id: str | None = None,
) -> Result[StreamResult, ResponseError]:
    """Consume an async chunk stream up to its terminal chunk.

    The source is not read past the terminal chunk. If it ends first (for
    example because the caller cancelled the transport), the result is a
    STREAM_INCOMPLETE error carrying the partial text in its details.
    """
    acc = StreamAccumulator(stream_id=stream_id)
    async for chunk in stream:
        if (step := acc.feed(chunk)).is_err():
            return Err(step.unwrap_err())
        if acc.is_terminal:
            break
    return _finish(acc)


def _finish(acc: StreamAccumulator) -> Result[StreamResult, ResponseError]:
    outcome = acc.result().map(lambda _: acc.to_stream_result())
    if outcome.is_ok():
        _log.debug("stream completed", chunks=acc.chunks, stream_id=acc.stream_id)
    return outcome


async def stream_validated(
    stream: AsyncIterable[StreamChunk],
    shape: type[T],
    fallback: T,
    *,
    stream_id: str | None = None,
) -> Result[T, ResponseError]:
    """Collect a stream and parse its final text into shape.

    Only a completed stream reaches the parser; provider errors, protocol
    violations and incomplete streams come back as Err. Once parsing starts,
    a malformed payload degrades to fallback.
    """
    collected = await collect_stream(stream, stream_id=stream_id)
    return collected.map(lambda r: parse_validated(r.text, shape, fallback))
