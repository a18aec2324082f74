"""Provider adapters: the boundary where model output enters the pipeline.

An adapter turns a GenerateTextRequest into either a complete string
(generate_text) or a chunk stream (stream_text). Adapters never raise for
provider failures: generate_text returns an Err, stream_text ends with a
single error chunk.

Example:
    >>> adapter = MockAdapter()
    >>> request = GenerateTextRequest.from_parameters(config.chat, [user("hello")])
    >>> result = await collect_stream(adapter.stream_text(request))
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, assert_never, runtime_checkable

import httpx
import orjson
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError

from airesponse.foundation.errors import Err, ErrorCode, Ok, ResponseError, ResponseException, Result
from airesponse.io.streaming import StreamChunk, done, error, is_terminal, text
from airesponse.runtime.observability.logging import get_logger

from .config import ModelParameters
from .messages import AIMessage

if TYPE_CHECKING:
    from airesponse.foundation.config import AppSettings

_log = get_logger("airesponse.provider")


class GenerateTextRequest(BaseModel):
    """One provider call: model parameters plus ordered conversation."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    messages: tuple[AIMessage, ...]
    temperature: float | None = None
    max_tokens: int | None = Field(default=None, gt=0)

    @classmethod
    def from_parameters(cls, params: ModelParameters, messages: Sequence[AIMessage]) -> GenerateTextRequest:
        return cls(
            model=params.model,
            messages=tuple(messages),
            temperature=params.temperature,
            max_tokens=params.max_tokens,
        )

    def to_body(self, *, stream: bool = False) -> dict[str, object]:
        """OpenAI-compatible chat completion body."""
        body: dict[str, object] = {
            "model": self.model,
            "messages": [m.to_provider() for m in self.messages],
            # latency-first provider routing
            "provider": {"sort": "latency"},
        }
        if self.temperature is not None:
            body["temperature"] = self.temperature
        if self.max_tokens is not None:
            body["max_tokens"] = self.max_tokens
        if stream:
            body["stream"] = True
        return body


class TokenUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt_tokens: NonNegativeInt
    completion_tokens: NonNegativeInt


class GenerateTextResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    usage: TokenUsage | None = None


@runtime_checkable
class AIAdapter(Protocol):
    """Protocol for model providers."""

    async def generate_text(self, request: GenerateTextRequest) -> Result[GenerateTextResult, ResponseError]: ...

    def stream_text(self, request: GenerateTextRequest) -> AsyncIterator[StreamChunk]: ...


# ─────────────────────────────────────────────────────────────────────────────
# Mock Adapter
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class MockResponse:
    """Canned response selected when pattern matches the last message."""
    pattern: str | re.Pattern[str]
    response: str
    delay: float = 0.0

    def matches(self, content: str) -> bool:
        if isinstance(self.pattern, str):
            return self.pattern in content
        return self.pattern.search(content) is not None


DEFAULT_MOCK_RESPONSES: tuple[MockResponse, ...] = (
    MockResponse(
        pattern=re.compile(r"revenue recognition", re.IGNORECASE),
        response=(
            "Revenue recognition follows five steps:\n\n"
            "1. Identify the contract\n"
            "2. Identify the performance obligations\n"
            "3. Determine the transaction price\n"
            "4. Allocate the price to the obligations\n"
            "5. Recognize revenue as each obligation is satisfied"
        ),
    ),
    MockResponse(
        pattern=re.compile(r".*"),
        response="Thanks for the question. Let's work through this topic step by step.",
    ),
)


class MockAdapter:
    """Deterministic adapter for local development and tests.

    The first response whose pattern matches the last message wins; the
    last response is the catch-all. Streams one character per text chunk.
    """

    __slots__ = ("_responses",)

    def __init__(self, responses: Sequence[MockResponse] = DEFAULT_MOCK_RESPONSES) -> None:
        if not responses:
            raise ValueError("MockAdapter needs at least one response")
        self._responses = tuple(responses)

    def _find(self, request: GenerateTextRequest) -> MockResponse:
        content = request.messages[-1].content if request.messages else ""
        return next((r for r in self._responses if r.matches(content)), self._responses[-1])

    async def generate_text(self, request: GenerateTextRequest) -> Result[GenerateTextResult, ResponseError]:
        return Ok(GenerateTextResult(content=self._find(request).response))

    async def stream_text(self, request: GenerateTextRequest) -> AsyncIterator[StreamChunk]:
        mock = self._find(request)
        for char in mock.response:
            if mock.delay:
                await asyncio.sleep(mock.delay)
            yield text(char)
        yield done()


# ─────────────────────────────────────────────────────────────────────────────
# OpenRouter Adapter
# ─────────────────────────────────────────────────────────────────────────────


class OpenRouterAdapter:
    """OpenAI-compatible chat completions over httpx.

    Works against OpenRouter or any server speaking the same API. Transport
    and HTTP failures are reported, not raised.
    """

    __slots__ = ("_api_key", "_base_url", "_timeout", "_client")

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    @property
    def _url(self) -> str:
        return f"{self._base_url}/chat/completions"

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"}

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create httpx async client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> OpenRouterAdapter:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def generate_text(self, request: GenerateTextRequest) -> Result[GenerateTextResult, ResponseError]:
        log = _log.bind(model=request.model)
        try:
            response = await self._get_client().post(
                self._url, headers=self._headers, content=orjson.dumps(request.to_body()),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            log.error("generate request failed", error=str(e))
            return Err(_provider_error(e))
        try:
            payload = orjson.loads(response.content)
            usage = payload.get("usage")
            result = GenerateTextResult(
                content=payload["choices"][0]["message"]["content"] or "",
                usage=TokenUsage(
                    prompt_tokens=usage.get("prompt_tokens", 0),
                    completion_tokens=usage.get("completion_tokens", 0),
                ) if isinstance(usage, dict) else None,
            )
        except (ValidationError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            log.error("unexpected provider payload", error=repr(e))
            return Err(ResponseError.create(ErrorCode.PROVIDER_ERROR, f"Unexpected provider payload: {e!r}"))
        return Ok(result)

    async def stream_text(self, request: GenerateTextRequest) -> AsyncIterator[StreamChunk]:
        log = _log.bind(model=request.model)
        try:
            async with self._get_client().stream(
                "POST", self._url, headers=self._headers, content=orjson.dumps(request.to_body(stream=True)),
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    chunk = _parse_stream_line(line)
                    if chunk is None:
                        continue
                    yield chunk
                    if is_terminal(chunk):
                        return
        except httpx.HTTPError as e:
            log.error("stream request failed", error=str(e))
            yield error(str(e) or type(e).__name__)
            return
        except Exception as e:
            log.exception("stream failed", error_type=type(e).__name__)
            yield error(str(e) or type(e).__name__)
            return
        # body ended without [DONE]
        yield done()


def _parse_stream_line(line: str) -> StreamChunk | None:
    """Map one OpenAI-style SSE line to a chunk; None for lines with no text."""
    if not line.startswith("data:"):
        return None
    data = line[5:].strip()
    if data == "[DONE]":
        return done()
    try:
        payload = orjson.loads(data)
    except orjson.JSONDecodeError:
        return error(f"Malformed provider event: {data[:200]}")
    if not isinstance(payload, dict):
        return error(f"Malformed provider event: {data[:200]}")
    if err := payload.get("error"):
        return error(str(err.get("message", err)) if isinstance(err, dict) else str(err))
    choices = payload.get("choices")
    if not choices:
        return None
    if not isinstance(choices, list) or not isinstance(choices[0], dict):
        return error(f"Unexpected provider event shape: {data[:200]}")
    delta = choices[0].get("delta")
    if not delta:
        return None
    if not isinstance(delta, dict):
        return error(f"Unexpected provider event shape: {data[:200]}")
    content = delta.get("content")
    if not content:
        return None
    if not isinstance(content, str):
        return error(f"Unexpected provider event shape: {data[:200]}")
    return text(content)


def _provider_error(exc: httpx.HTTPError) -> ResponseError:
    if isinstance(exc, httpx.HTTPStatusError):
        return ResponseError.create(
            ErrorCode.PROVIDER_ERROR,
            f"Provider returned HTTP {exc.response.status_code}",
            details=exc.response.text[:1000] or None,
        )
    return ResponseError.create(ErrorCode.PROVIDER_ERROR, str(exc) or type(exc).__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Factory
# ─────────────────────────────────────────────────────────────────────────────


def create_adapter(settings: AppSettings) -> AIAdapter:
    """Build the adapter selected by AIRESPONSE_AI_PROVIDER.

    Raises:
        ResponseException: openrouter selected without an API key
    """
    provider = settings.ai
    match provider.provider:
        case "mock":
            return MockAdapter()
        case "openrouter":
            if provider.api_key is None or not provider.api_key.get_secret_value():
                raise ResponseException.create(
                    ErrorCode.CONFIGURATION_ERROR, "API key required for openrouter provider",
                )
            return OpenRouterAdapter(
                provider.api_key.get_secret_value(),
                base_url=provider.base_url,
                timeout=provider.timeout,
            )
        case unreachable:
            assert_never(unreachable)
