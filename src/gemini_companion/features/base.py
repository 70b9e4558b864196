"""Shared plumbing for feature sessions: service lookup and structured calls"""

from __future__ import annotations

import logging
from typing import Any

from gemini_companion.client.generation import GenerationResponse, ResponseFormat
from gemini_companion.context import CompanionContext
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import CompanionError, InvalidRequestError
from gemini_companion.response.validation import extract_structured

logger = logging.getLogger(__name__)


def require_text(value: str | None, message: str) -> Result[str, InvalidRequestError]:
    if value is None or not value.strip():
        return Failure(InvalidRequestError(message))
    return Success(value.strip())


class FeatureSession:
    def __init__(self, context: CompanionContext) -> None:
        self.context = context
        self.tele = context.telemetry

    def _generate(
        self,
        prompt: str,
        response_format: ResponseFormat = "text",
        *,
        web_search: bool = False,
    ) -> Result[GenerationResponse, CompanionError]:
        service = self.context.require_generation()
        if isinstance(service, Failure):
            return service
        return service.value.generate(prompt, response_format, web_search=web_search)

    def _generate_structured(
        self, prompt: str, shape: Any, *, web_search: bool = False
    ) -> Result[Any, CompanionError]:
        """Generate JSON and validate it against ``shape``.

        Failures keep the cleaned excerpt from extraction, shortened for
        display, and carry the start of the raw reply as ``response_excerpt``.
        """
        generated = self._generate(prompt, "json", web_search=web_search)
        if isinstance(generated, Failure):
            return generated
        text = generated.value.text
        outcome = extract_structured(
            text,
            shape,
            excerpt_chars=self.context.config.diagnostic_excerpt_chars,
            telemetry=self.tele,
        )
        if isinstance(outcome, Failure) and text:
            limit = self.context.config.user_excerpt_chars
            outcome.error.excerpt = (outcome.error.excerpt or text)[:limit]
            outcome.error.response_excerpt = text[:limit]
        return outcome
