"""Streamed model responses: chunk protocol, accumulation, SSE transport.

Example:
    >>> from airesponse.io.streaming import collect_stream
    >>> result = await collect_stream(adapter.stream_text(request))
    >>> result.match(ok=lambda r: r.text, err=lambda e: e.render())
"""

from .accumulator import (
    StreamAccumulator,
    StreamResult,
    collect_chunks,
    collect_stream,
    stream_validated,
)
from .adapters import SSEAdapter, format_sse, iter_sse_chunks, sse_adapter, stream_to_sse
from .stream import (
    ChunkType,
    DoneChunk,
    ErrorChunk,
    StreamChunk,
    StreamState,
    TextChunk,
    decode_chunk,
    done,
    error,
    is_terminal,
    text,
)

__all__ = [
    # Core types
    "ChunkType",
    "StreamChunk",
    "TextChunk",
    "ErrorChunk",
    "DoneChunk",
    "StreamState",
    "StreamResult",
    # Factory functions
    "text",
    "error",
    "done",
    "is_terminal",
    "decode_chunk",
    # Consumption
    "StreamAccumulator",
    "collect_chunks",
    "collect_stream",
    "stream_validated",
    # Transport
    "SSEAdapter",
    "sse_adapter",
    "format_sse",
    "stream_to_sse",
    "iter_sse_chunks",
]
