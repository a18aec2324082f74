"""JSON type aliases shared across the pipeline."""

from __future__ import annotations

from typing import Any, Union

# Using Any for recursive slots to avoid Pydantic resolution issues
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]
