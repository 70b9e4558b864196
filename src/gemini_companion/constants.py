"""
Project-wide constants for the Gemini companion
"""

# ==============================================================================
# Generation Service
# ==============================================================================

DEFAULT_MODEL = "gemini-2.5-flash"
JSON_MIME_TYPE = "application/json"
UNTITLED_SOURCE = "Untitled"

# Applied to every request unless overridden in config
DEFAULT_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
DEFAULT_SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"

# ==============================================================================
# Extraction Diagnostics
# ==============================================================================

DIAGNOSTIC_EXCERPT_CHARS = 500  # logged / salvaged prefix
USER_EXCERPT_CHARS = 200  # shown alongside user-facing messages

# ==============================================================================
# Reader Library
# ==============================================================================

# Characters per page, not words
DEFAULT_PAGE_WINDOW = 300
EXCERPT_TARGET_WORDS = DEFAULT_PAGE_WINDOW * 5
LIBRARY_STORAGE_KEY = "savedBooks"
NO_CONTENT_MARKER = "No content is available for this book."
TRANSLATION_MARKER_TEMPLATE = "\n\n--- (translated to {language}) ---"
TRANSLATION_MARKER_PREFIX = "\n\n--- ("

# ==============================================================================
# Telemetry
# ==============================================================================

TELEMETRY_ENV_VAR = "GEMINI_COMPANION_TELEMETRY"
