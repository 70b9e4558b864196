"""Generation service seam and its google-genai implementation.

Features talk to a ``GenerationService``: given a prompt and a response
format hint it returns the raw text plus any web grounding references, or a
``Failure``. There are no retries; a failed call is reported once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Literal, Protocol, runtime_checkable

from google import genai
from google.genai import types

from gemini_companion.constants import (
    DEFAULT_SAFETY_CATEGORIES,
    DEFAULT_SAFETY_THRESHOLD,
    JSON_MIME_TYPE,
    UNTITLED_SOURCE,
)
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import GenerationServiceError, MissingKeyError
from gemini_companion.telemetry import TelemetryContext, TelemetryContextProtocol

from .error_handler import GenerationErrorHandler

logger = logging.getLogger(__name__)

ResponseFormat = Literal["json", "text"]


@dataclass(frozen=True, slots=True)
class GroundingReference:
    uri: str
    title: str = UNTITLED_SOURCE


@dataclass(frozen=True, slots=True)
class GenerationResponse:
    text: str | None
    grounding_references: tuple[GroundingReference, ...] = field(default_factory=tuple)


@runtime_checkable
class GenerationService(Protocol):
    def generate(
        self,
        prompt: str,
        response_format: ResponseFormat = "text",
        *,
        web_search: bool = False,
    ) -> Result[GenerationResponse, GenerationServiceError]: ...


def build_safety_settings(threshold: str) -> list[types.SafetySetting]:
    return [
        types.SafetySetting(
            category=types.HarmCategory(category),
            threshold=types.HarmBlockThreshold(threshold),
        )
        for category in DEFAULT_SAFETY_CATEGORIES
    ]


def grounding_references(response: Any) -> tuple[GroundingReference, ...]:
    """Collect web grounding chunks from the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ()
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    refs: list[GroundingReference] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        refs.append(
            GroundingReference(
                uri=getattr(web, "uri", None) or "",
                title=getattr(web, "title", None) or UNTITLED_SOURCE,
            )
        )
    return tuple(refs)


class GeminiGenerationService:
    """``GenerationService`` backed by ``google.genai``."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        *,
        safety_threshold: str = DEFAULT_SAFETY_THRESHOLD,
        client: genai.Client | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise MissingKeyError()
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model
        self.safety_settings = build_safety_settings(safety_threshold)
        self.error_handler = GenerationErrorHandler()
        self.tele = telemetry or TelemetryContext()
        logger.debug("GeminiGenerationService initialized with model '%s'", model)

    def _build_config(
        self, response_format: ResponseFormat, web_search: bool
    ) -> types.GenerateContentConfig:
        options: dict[str, Any] = {"safety_settings": self.safety_settings}
        if web_search:
            # The JSON mime type cannot be combined with tools
            options["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        elif response_format == "json":
            options["response_mime_type"] = JSON_MIME_TYPE
        return types.GenerateContentConfig(**options)

    def generate(
        self,
        prompt: str,
        response_format: ResponseFormat = "text",
        *,
        web_search: bool = False,
    ) -> Result[GenerationResponse, GenerationServiceError]:
        with self.tele("client.generate", response_format=response_format):
            try:
                response = self.client.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=self._build_config(response_format, web_search),
                )
                text = response.text
            except Exception as e:
                error = self.error_handler.classify(
                    e, response_format=response_format, web_search=web_search
                )
                logger.warning("Generation call failed: %s", error.message)
                self.tele.count("failed")
                return Failure(error)

            refs = grounding_references(response) if web_search else ()
            return Success(GenerationResponse(text=text, grounding_references=refs))
