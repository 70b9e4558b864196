"""Error taxonomy for the companion core.

Every error carries a stable ``reason`` code so callers can branch on it
without string matching, plus an optional bounded ``excerpt`` of the text
that caused it. Errors from structured generation also keep the start of
the raw model reply in ``response_excerpt``. Extraction and reconciliation
errors are returned inside ``Failure`` values rather than raised.
"""

from __future__ import annotations

from typing import Any


class CompanionError(Exception):
    """Base exception for gemini_companion errors"""

    reason = "error"
    default_message = "The request could not be completed"

    def __init__(self, message: str | None = None, *, excerpt: str | None = None):
        self.message = message or self.default_message
        self.excerpt = excerpt
        self.response_excerpt: str | None = None
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Short human-readable message, with the excerpt when one is attached"""
        if self.excerpt:
            return f"{self.message}: {self.excerpt}"
        return self.message


# --- Configuration ---


class ConfigurationError(CompanionError):
    """Raised when the generation service cannot be constructed"""

    reason = "configuration"
    default_message = "The generation client could not be initialized"


class MissingKeyError(ConfigurationError):
    """Raised when the API key is missing"""

    reason = "missing-key"
    default_message = "API key not found. Set GEMINI_API_KEY (or API_KEY)"


class InvalidRequestError(CompanionError):
    """User input is insufficient to build a request"""

    reason = "invalid-request"
    default_message = "Not enough information to send the request"


class GenerationServiceError(CompanionError):
    """Opaque failure reported by the generation service"""

    reason = "generation-failed"
    default_message = "Content generation failed"


# --- Extraction ---


class ExtractionError(CompanionError):
    """Base class for payload extraction failures"""

    reason = "extraction"
    default_message = "The response could not be parsed"

    def __init__(
        self,
        message: str | None = None,
        *,
        excerpt: str | None = None,
        salvaged: str = "",
    ):
        super().__init__(message, excerpt=excerpt)
        self.salvaged = salvaged


class EmptyPayloadError(ExtractionError):
    reason = "empty"
    default_message = "The response was empty"


class NoJsonStartError(ExtractionError):
    reason = "no-json-start"
    default_message = "The response does not contain '{' or '['"


class StillInvalidError(ExtractionError):
    reason = "still-invalid"
    default_message = "The cleaned response does not start with '{' or '['"


class JsonParseError(ExtractionError):
    reason = "parse-error"
    default_message = "The response is not valid JSON"


class SchemaMismatchError(CompanionError):
    """Parsed JSON does not match the expected shape"""

    reason = "schema-mismatch"
    default_message = "The response is missing required fields"

    def __init__(
        self,
        shape_name: str,
        missing_fields: tuple[str, ...] = (),
        invalid_fields: tuple[str, ...] = (),
        *,
        value: Any = None,
    ):
        self.shape_name = shape_name
        self.missing_fields = missing_fields
        self.invalid_fields = invalid_fields
        self.value = value
        details = []
        if missing_fields:
            details.append("missing " + ", ".join(missing_fields))
        if invalid_fields:
            details.append("invalid " + ", ".join(invalid_fields))
        message = f"{shape_name} response did not match the expected shape"
        if details:
            message = f"{message} ({'; '.join(details)})"
        super().__init__(message)


# --- Reconciliation ---


class ReconcileError(CompanionError):
    """Base class for state reconciliation failures"""

    reason = "reconcile"


class SlotNotFoundError(ReconcileError):
    reason = "slot-not-found"
    default_message = "The requested item group does not exist"


class IndexOutOfRangeError(ReconcileError):
    reason = "index-out-of-range"
    default_message = "The requested position is out of range"


class EntryNotFoundError(ReconcileError):
    reason = "entry-not-found"
    default_message = "The library entry does not exist"


class RequestInFlightError(CompanionError):
    reason = "in-flight"
    default_message = "A request for this item is already in progress"
