"""Extract a JSON value from free-form model output.

Model output frequently arrives wrapped in Markdown fences, preceded by a
sentence of prose, or followed by commentary. ``extract_json`` peels those
layers off in a fixed order and parses what is left. It never raises for
bad input: every outcome is a ``Success`` with the parsed value or a
``Failure`` whose error carries a reason code and a bounded excerpt.

No shape checking happens here; see ``response.validation``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from gemini_companion.constants import DIAGNOSTIC_EXCERPT_CHARS
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import (
    EmptyPayloadError,
    ExtractionError,
    JsonParseError,
    NoJsonStartError,
    StillInvalidError,
)
from gemini_companion.telemetry import TelemetryContext, TelemetryContextProtocol

logger = logging.getLogger(__name__)

# Whole payload is a single fenced block, optional language tag
_WHOLE_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)
_LEADING_FENCE_RE = re.compile(r"^```\w*")
_TRAILING_FENCE_RE = re.compile(r"```$")

_OPENERS = "{["
_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences around ``text``.

    A payload that is entirely one fenced block is replaced by its content.
    Otherwise a dangling opening fence (with or without a language tag) and
    a dangling closing fence are removed from the ends.
    """
    cleaned = text.strip()
    match = _WHOLE_FENCE_RE.match(cleaned)
    if match and match.group(2):
        cleaned = match.group(2).strip()
    cleaned = _LEADING_FENCE_RE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def find_balanced_span(text: str) -> str | None:
    """Return the balanced object/array starting at position 0, if any.

    Brackets inside string literals are ignored. Returns None when ``text``
    does not start with ``{``/``[`` or the structure never closes.
    """
    if not text or text[0] not in _OPENERS:
        return None

    stack: list[str] = []
    in_string = False
    escape = False
    for i, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _OPENERS:
            stack.append(_CLOSERS[ch])
        elif ch in "}]":
            if not stack or stack.pop() != ch:
                return None
            if not stack:
                return text[: i + 1]
    return None


def truncate_to_last_close(text: str) -> str:
    """Cut ``text`` after the last closer matching its first character.

    Lossy when trailing prose itself contains a ``}`` or ``]``.
    """
    if not text:
        return text
    closer = _CLOSERS.get(text[0])
    if closer is None:
        return text
    end = text.rfind(closer)
    if end == -1:
        return text
    return text[: end + 1]


def _starts_json(text: str) -> bool:
    return bool(text) and text[0] in _OPENERS


def _jump_to_json_start(text: str) -> str | None:
    if _starts_json(text):
        return text
    positions = [p for p in (text.find("{"), text.find("[")) if p != -1]
    if not positions:
        return None
    return text[min(positions) :]


def extract_json(
    payload: Any,
    *,
    excerpt_chars: int = DIAGNOSTIC_EXCERPT_CHARS,
    telemetry: TelemetryContextProtocol | None = None,
) -> Result[Any, ExtractionError]:
    """Parse a JSON value out of a raw model payload.

    Args:
        payload: Raw text returned by the generation call. Non-string values
            (including None) are treated as empty.
        excerpt_chars: Upper bound on the diagnostic text kept on failures.
        telemetry: Optional telemetry context for outcome counters.

    Returns:
        ``Success(value)`` with the parsed JSON value, or ``Failure(error)``
        where ``error`` is one of the ``ExtractionError`` subclasses.
    """
    tele = telemetry or TelemetryContext()
    with tele("extraction.extract_json"):
        outcome = _extract(payload, excerpt_chars)
        if isinstance(outcome, Failure):
            tele.count(f"failed.{outcome.error.reason}")
            logger.warning(
                "JSON extraction failed (%s): %s | excerpt=%r",
                outcome.error.reason,
                outcome.error.message,
                outcome.error.excerpt or outcome.error.salvaged,
            )
        else:
            tele.count("ok")
        return outcome


def _extract(payload: Any, excerpt_chars: int) -> Result[Any, ExtractionError]:
    if not isinstance(payload, str) or not payload.strip():
        return Failure(EmptyPayloadError())

    cleaned = strip_code_fences(payload)

    jumped = _jump_to_json_start(cleaned)
    if jumped is None:
        return Failure(
            NoJsonStartError(
                excerpt=cleaned[:excerpt_chars], salvaged=cleaned[:excerpt_chars]
            )
        )
    cleaned = jumped

    # Strict pass: a balanced span that parses wins over the heuristic
    span = find_balanced_span(cleaned)
    if span is not None:
        try:
            return Success(json.loads(span))
        except json.JSONDecodeError:
            logger.debug("Balanced span did not parse, falling back to truncation")

    cleaned = truncate_to_last_close(cleaned).strip()
    if not _starts_json(cleaned):
        return Failure(
            StillInvalidError(
                excerpt=cleaned[:excerpt_chars], salvaged=cleaned[:excerpt_chars]
            )
        )

    try:
        return Success(json.loads(cleaned))
    except json.JSONDecodeError as e:
        return Failure(
            JsonParseError(
                f"The response is not valid JSON ({e.msg} at line {e.lineno} column {e.colno})",
                excerpt=cleaned[:excerpt_chars],
                salvaged=cleaned[:excerpt_chars],
            )
        )
