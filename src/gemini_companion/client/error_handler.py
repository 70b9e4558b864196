"""Error handling for Gemini API generation requests"""

from gemini_companion.exceptions import GenerationServiceError


class GenerationErrorHandler:
    """Turns SDK exceptions into short, user-facing generation errors"""

    def classify(
        self,
        error: Exception,
        *,
        response_format: str = "text",
        web_search: bool = False,
    ) -> GenerationServiceError:
        """Return a ``GenerationServiceError`` describing ``error``.

        The original exception is kept as ``__cause__``.
        """
        error_str = str(error).lower()
        search_context = " (with web search)" if web_search else ""

        if "api key" in error_str or "api_key" in error_str or "permission" in error_str:
            message = "The API key was rejected. Check GEMINI_API_KEY"
        elif "quota" in error_str or "resource_exhausted" in error_str or "429" in error_str:
            message = "The generation quota is exhausted. Try again later"
        elif "safety" in error_str or "blocked" in error_str:
            message = "The request was blocked by safety filters"
        elif response_format == "json" and ("json" in error_str or "schema" in error_str):
            message = f"Structured output generation failed{search_context}"
        elif "not found" in error_str or "404" in error_str:
            message = "The configured model was not found"
        elif "timeout" in error_str or "deadline" in error_str:
            message = "The generation request timed out"
        elif "unavailable" in error_str or "503" in error_str:
            message = "The generation service is unavailable"
        else:
            message = f"Content generation failed{search_context}"

        wrapped = GenerationServiceError(f"{message}: {error}")
        wrapped.__cause__ = error
        return wrapped
