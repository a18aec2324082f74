"""orjson codec for chunk transport.

Usage:
    >>> from airesponse.io.streaming.codec import encode_str, decode
    >>> encode_str({"type": "done"})
    '{"type":"done"}'
    >>> decode(b'{"type":"done"}')
    {'type': 'done'}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from airesponse.foundation.errors import JsonValue


def encode(data: JsonValue) -> bytes:
    """Encode to JSON bytes (orjson)."""
    return orjson.dumps(data)


def encode_str(data: JsonValue) -> str:
    """Encode to JSON string (orjson)."""
    return orjson.dumps(data).decode()


def decode(data: bytes | str) -> JsonValue:
    """Decode from JSON bytes/str (orjson).

    Raises:
        orjson.JSONDecodeError: A ValueError subclass, on malformed input
    """
    return orjson.loads(data)
