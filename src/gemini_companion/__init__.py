"""Gemini companion: structured diet, reading, research and video planning assistant."""

import importlib.metadata
import logging

from gemini_companion.client import (
    GeminiGenerationService,
    GenerationResponse,
    GenerationService,
    GroundingReference,
)
from gemini_companion.config import FrozenConfig, resolve_config
from gemini_companion.context import CompanionContext
from gemini_companion.core.requests import BlueprintRequest, PlanRequest
from gemini_companion.core.types import (
    Failure,
    NestedListSlot,
    PlanSection,
    Result,
    Success,
)
from gemini_companion.exceptions import CompanionError
from gemini_companion.features import (
    BookReaderSession,
    PlannerSession,
    ResearchDesk,
    VideoStrategist,
)
from gemini_companion.response import extract_json, extract_structured, validate_shape
from gemini_companion.telemetry import (
    InMemoryReporter,
    TelemetryContext,
    TelemetryReporter,
)

try:
    __version__ = importlib.metadata.version("gemini-companion")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Context and configuration
    "CompanionContext",
    "FrozenConfig",
    "resolve_config",
    # Features
    "BookReaderSession",
    "PlannerSession",
    "ResearchDesk",
    "VideoStrategist",
    "BlueprintRequest",
    "PlanRequest",
    # Normalization core
    "extract_json",
    "extract_structured",
    "validate_shape",
    "NestedListSlot",
    "PlanSection",
    "Result",
    "Success",
    "Failure",
    "CompanionError",
    # Generation service
    "GenerationService",
    "GeminiGenerationService",
    "GenerationResponse",
    "GroundingReference",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    "InMemoryReporter",
]
