"""Standardized error handling for the response pipeline.

Provides error codes and structured error values carried inside Result
failures. Uses Pydantic for validation and serialization.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(StrEnum):
    """Error codes for pipeline failures.

    Used for programmatic handling: callers decide between a retry prompt,
    a silent fallback, or a defect report based on the code.
    """
    INVALID_JSON = "INVALID_JSON"
    SHAPE_MISMATCH = "SHAPE_MISMATCH"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    PROTOCOL_VIOLATION = "PROTOCOL_VIOLATION"
    STREAM_INCOMPLETE = "STREAM_INCOMPLETE"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class ResponseError(BaseModel):
    """Structured failure produced at a pipeline boundary.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error message
        details: Optional extra information (validation errors, partial text)
    """

    model_config = ConfigDict(
        frozen=True,
        validate_default=True,
        json_schema_extra={
            "title": "Response Error",
            "description": "Structured error from the AI response pipeline",
            "examples": [{
                "code": "PROVIDER_ERROR",
                "message": "upstream returned 503",
            }],
        },
    )

    code: ErrorCode
    message: Annotated[str, Field(min_length=1)]
    details: str | None = Field(default=None, repr=False)

    @classmethod
    def create(cls, code: ErrorCode, message: str, details: str | None = None) -> Self:
        return cls(code=code, message=message or code.value, details=details)

    @property
    def is_retryable(self) -> bool:
        """Whether retrying the request might succeed (provider failures, cut-off streams)."""
        return self.code in _RETRYABLE_CODES

    @property
    def is_protocol_defect(self) -> bool:
        """Whether this indicates an adapter/transport defect rather than a model failure."""
        return self.code is ErrorCode.PROTOCOL_VIOLATION

    def render(self) -> str:
        """Format error for display or logs."""
        text = f"[{self.code}] {self.message}"
        return f"{text}\n{self.details}" if self.details else text

    __str__ = render


_RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.PROVIDER_ERROR,
    ErrorCode.STREAM_INCOMPLETE,
})


class ResponseException(Exception):
    """Exception wrapping a ResponseError for the few places that raise."""

    __slots__ = ("error",)

    def __init__(self, error: ResponseError) -> None:
        self.error = error
        super().__init__(error.message)

    @classmethod
    def create(cls, code: ErrorCode, message: str, details: str | None = None) -> Self:
        return cls(ResponseError.create(code, message, details))
