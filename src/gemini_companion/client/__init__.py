from .error_handler import GenerationErrorHandler
from .generation import (
    GeminiGenerationService,
    GenerationResponse,
    GenerationService,
    GroundingReference,
    ResponseFormat,
    build_safety_settings,
    grounding_references,
)

__all__ = [
    "GeminiGenerationService",
    "GenerationErrorHandler",
    "GenerationResponse",
    "GenerationService",
    "GroundingReference",
    "ResponseFormat",
    "build_safety_settings",
    "grounding_references",
]
