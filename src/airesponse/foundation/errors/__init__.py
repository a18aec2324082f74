"""Unified error handling for airesponse.

- ErrorCode: Error codes for pipeline failures
- ResponseError/ResponseException: Structured errors and exceptions
- Result/Ok/Err: Monadic error handling with railway-oriented programming
"""

from .errors import ErrorCode, ResponseError, ResponseException
from .result import (
    Err,
    Ok,
    Result,
    chain,
    failure,
    is_failure,
    is_success,
    map_result,
    match_result,
    success,
    try_fn,
    unwrap_or,
)
from .types import JsonDict, JsonPrimitive, JsonValue

__all__ = [
    # Core errors
    "ErrorCode", "ResponseError", "ResponseException",
    # Result monad
    "Result", "Ok", "Err", "try_fn",
    # Functional forms
    "success", "failure", "is_success", "is_failure", "map_result", "chain", "unwrap_or", "match_result",
    # Type aliases
    "JsonDict", "JsonPrimitive", "JsonValue",
]
