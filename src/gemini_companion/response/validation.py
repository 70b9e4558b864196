"""Schema validation for extracted JSON values"""

from __future__ import annotations

from functools import lru_cache
import logging
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from gemini_companion.constants import DIAGNOSTIC_EXCERPT_CHARS
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import ExtractionError, SchemaMismatchError
from gemini_companion.telemetry import TelemetryContextProtocol

from .extraction import extract_json

logger = logging.getLogger(__name__)


@lru_cache(maxsize=64)
def _adapter_for(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def _shape_name(shape: Any) -> str:
    return getattr(shape, "__name__", None) or str(shape)


def _dotted(loc: tuple[int | str, ...]) -> str:
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int) and parts:
            parts[-1] = f"{parts[-1]}[{item}]"
        else:
            parts.append(str(item))
    return ".".join(parts) or "<root>"


def validate_shape(value: Any, shape: Any) -> Result[Any, SchemaMismatchError]:
    """Validate a parsed JSON value against ``shape``.

    ``shape`` is a pydantic model class or any type a ``TypeAdapter``
    accepts, e.g. ``list[BookSearchResult]``. Missing and invalid fields are
    reported separately as dotted paths.
    """
    try:
        if hasattr(shape, "model_validate"):
            return Success(shape.model_validate(value))
        return Success(_adapter_for(shape).validate_python(value))
    except PydanticValidationError as e:
        missing: list[str] = []
        invalid: list[str] = []
        for err in e.errors():
            path = _dotted(tuple(err["loc"]))
            if err["type"] == "missing":
                missing.append(path)
            else:
                invalid.append(path)
        error = SchemaMismatchError(
            _shape_name(shape), tuple(missing), tuple(invalid), value=value
        )
        logger.warning("%s", error.message)
        return Failure(error)


def extract_structured(
    payload: Any,
    shape: Any,
    *,
    excerpt_chars: int = DIAGNOSTIC_EXCERPT_CHARS,
    telemetry: TelemetryContextProtocol | None = None,
) -> Result[Any, ExtractionError | SchemaMismatchError]:
    """Extract JSON from ``payload`` and validate it against ``shape``."""
    extracted = extract_json(payload, excerpt_chars=excerpt_chars, telemetry=telemetry)
    if isinstance(extracted, Failure):
        return extracted
    return validate_shape(extracted.value, shape)
