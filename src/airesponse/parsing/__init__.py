"""Extraction and validated parsing of model output."""

from .extract import extract_validated, parse_json, parse_validated, strip_code_fence, validate_shape

__all__ = [
    "extract_validated",
    "parse_json",
    "parse_validated",
    "strip_code_fence",
    "validate_shape",
]
