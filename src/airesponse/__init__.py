"""airesponse - normalization pipeline for generative model responses.

Frames streamed model output into a closed chunk protocol, recovers one
structured JSON payload from free-form text, validates it with a
guaranteed fallback, and resolves per-feature model parameters for a
deployment tier.

Quick Start:
    >>> from pydantic import BaseModel
    >>> from airesponse import parse_validated
    >>>
    >>> class Summary(BaseModel):
    ...     title: str
    ...     bullets: list[str]
    >>>
    >>> raw = '```json\\n{"title": "Leases", "bullets": ["ROU asset"]}\\n```'
    >>> parse_validated(raw, Summary, Summary(title="", bullets=[]))
    Summary(title='Leases', bullets=['ROU asset'])

Streaming:
    >>> from airesponse import MockAdapter, GenerateTextRequest, collect_stream, resolve_ai_config, user
    >>>
    >>> config = resolve_ai_config("local")
    >>> request = GenerateTextRequest.from_parameters(config.chat, [user("hello")])
    >>> result = await collect_stream(MockAdapter().stream_text(request))
    >>> result.match(ok=lambda r: r.text, err=lambda e: e.render())
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors & Result
from .foundation.errors import (
    Err,
    ErrorCode,
    Ok,
    ResponseError,
    ResponseException,
    Result,
    try_fn,
)

# Config
from .ai.config import (
    DeploymentTier,
    Feature,
    FeatureConfig,
    ModelParameters,
    resolve_ai_config,
)
from .foundation.config import AppSettings, get_settings

# Parsing
from .parsing import extract_validated, parse_validated, strip_code_fence

# Streaming
from .io.streaming import (
    DoneChunk,
    ErrorChunk,
    StreamAccumulator,
    StreamChunk,
    StreamResult,
    StreamState,
    TextChunk,
    collect_chunks,
    collect_stream,
    decode_chunk,
    stream_to_sse,
    stream_validated,
)

# Providers
from .ai import AIAdapter, AIMessage, GenerateTextRequest, MockAdapter, OpenRouterAdapter, create_adapter, user

# Logging
from .runtime.observability import configure_logging, get_logger

__all__ = [
    "__version__",
    # Errors & Result
    "Result", "Ok", "Err", "try_fn", "ErrorCode", "ResponseError", "ResponseException",
    # Config
    "DeploymentTier", "Feature", "FeatureConfig", "ModelParameters", "resolve_ai_config",
    "AppSettings", "get_settings",
    # Parsing
    "strip_code_fence", "extract_validated", "parse_validated",
    # Streaming
    "StreamChunk", "TextChunk", "ErrorChunk", "DoneChunk", "StreamState", "StreamResult",
    "StreamAccumulator", "decode_chunk", "collect_chunks", "collect_stream", "stream_validated", "stream_to_sse",
    # Providers
    "AIAdapter", "AIMessage", "GenerateTextRequest", "MockAdapter", "OpenRouterAdapter", "create_adapter", "user",
    # Logging
    "configure_logging", "get_logger",
]
