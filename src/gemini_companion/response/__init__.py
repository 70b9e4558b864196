"""Turning raw model payloads into validated shapes"""

from .extraction import (
    extract_json,
    find_balanced_span,
    strip_code_fences,
    truncate_to_last_close,
)
from .validation import extract_structured, validate_shape

__all__ = [
    "extract_json",
    "extract_structured",
    "find_balanced_span",
    "strip_code_fences",
    "truncate_to_last_close",
    "validate_shape",
]
