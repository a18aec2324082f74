"""Server-Sent Events framing for chunk streams.

Server side, each chunk becomes one frame:

    data: {"type":"text","content":"Hel"}

Client side, frames are split on blank lines and the `data:` lines of each
event are joined and decoded back into one chunk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from airesponse.foundation.errors import ResponseError, Result
from airesponse.runtime.observability.logging import get_logger

from .codec import encode_str
from .stream import ErrorChunk, StreamChunk, decode_chunk, is_terminal

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Iterator

_log = get_logger("airesponse.sse")


class SSEAdapter:
    """Format chunks as Server-Sent Events.

    SSE format:
        data: <json_payload>

    Consumable by browser EventSource or fetch stream readers.
    """

    __slots__ = ()

    def format_chunk(self, chunk: StreamChunk) -> str:
        """Format chunk as SSE data event."""
        return f"data: {encode_str(chunk.to_dict())}\n\n"

    def format_error(self, message: str) -> str:
        """Format a terminal error event."""
        return self.format_chunk(ErrorChunk(message))


sse_adapter = SSEAdapter()


def format_sse(chunk: StreamChunk) -> str:
    return sse_adapter.format_chunk(chunk)


async def stream_to_sse(
    stream: AsyncIterator[StreamChunk],
    adapter: SSEAdapter = sse_adapter,
) -> AsyncIterator[str]:
    """Transform a chunk stream into SSE frames.

    Stops after the first terminal chunk. If the source raises, a single
    error frame is emitted instead and the stream ends.

    Example:
        >>> async for frame in stream_to_sse(adapter.stream_text(request)):
        ...     await response.write(frame)
    """
    try:
        async for chunk in stream:
            yield adapter.format_chunk(chunk)
            if is_terminal(chunk):
                break
    except Exception as e:
        _log.error("stream source failed", error=str(e), error_type=type(e).__name__)
        yield adapter.format_error(str(e) or type(e).__name__)


def iter_sse_chunks(frames: Iterable[str]) -> Iterator[Result[StreamChunk, ResponseError]]:
    """Decode SSE text into chunk results.

    `frames` may deliver the body in arbitrary pieces; events are buffered
    until their terminating blank line. Lines other than `data:` are
    ignored. Iteration stops after a terminal chunk.
    """
    buffer = ""
    for piece in frames:
        buffer += piece.replace("\r\n", "\n")
        *events, buffer = buffer.split("\n\n")
        for event in events:
            for decoded in _decode_event(event):
                yield decoded
                if decoded.is_ok() and is_terminal(decoded.unwrap()):
                    return
    for decoded in _decode_event(buffer):
        yield decoded
        if decoded.is_ok() and is_terminal(decoded.unwrap()):
            return


def _decode_event(event: str) -> Iterator[Result[StreamChunk, ResponseError]]:
    """Zero or one chunk per event; multiple data: lines form one payload."""
    data = [line[5:].removeprefix(" ") for line in event.split("\n") if line.startswith("data:")]
    if data:
        yield decode_chunk("\n".join(data))
